# invitation_service/schemas.py

# =================================================================================
# 📦 Schemas (Pydantic data models)
# ---------------------------------------------------------------------------------
# Request and response models of the API, on Pydantic v2.
# - Request models carry the validation rules and the user-facing messages
#   (Indonesian, like the rest of the API) for each field.
# - Response models read straight from ORM objects (from_attributes=True).
# - The invitation sender travels as "from" on the wire; in Python it is
#   `sender` because `from` is a keyword.
# =================================================================================

from datetime import datetime
from typing import Any, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from invitation_service.models import (
    DeliveryStatusEnum,
    InvitationTypeEnum,
    RoleEnum,
    RSVPStatusEnum,
)

TYPE_VALUES = [e.value for e in InvitationTypeEnum]
RSVP_VALUES = [e.value for e in RSVPStatusEnum]
DELIVERY_VALUES = [e.value for e in DeliveryStatusEnum]


# =================================================================================
# 🧰 Normalization helpers
# =================================================================================
def _blank_to_none(v: Any) -> Any:
    if v is None:
        return None
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


def _optional_int(v: Any, field: str) -> Optional[int]:
    """Accepts ints and numeric strings (as HTML forms send them); '' → None."""
    v = _blank_to_none(v)
    if v is None:
        return None
    if isinstance(v, bool):
        raise ValueError(f"Field {field} harus berupa angka.")
    try:
        number = float(v)
    except (TypeError, ValueError):
        raise ValueError(f"Field {field} harus berupa angka.")
    if not number.is_integer():
        raise ValueError(f"Field {field} harus berupa bilangan bulat.")
    if number < 0:
        raise ValueError(f"Field {field} tidak boleh negatif.")
    return int(number)


def _required_text(v: Any, field: str) -> str:
    v = _blank_to_none(v)
    if v is None:
        raise ValueError(f"Field {field} wajib diisi.")
    return str(v)


# =================================================================================
# 💌 Invitations
# =================================================================================
class InvitationIn(BaseModel):
    """Body of POST /api/invitations and PUT /api/invitations/{id}."""

    model_config = ConfigDict(populate_by_name=True)

    sender: Optional[str] = Field(default=None, alias="from")
    name: Optional[str] = Field(default=None, validate_default=True)
    category: Optional[int] = None
    phone: Optional[str] = None
    qty: Optional[int] = None
    type: Optional[InvitationTypeEnum] = Field(default=None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def _name_required(cls, v):
        return _required_text(v, "name")

    @field_validator("type", mode="before")
    @classmethod
    def _type_enum(cls, v):
        if v not in TYPE_VALUES:
            raise ValueError("Field type harus 'digital' atau 'cetak'.")
        return v

    @field_validator("sender", "phone", mode="before")
    @classmethod
    def _strip_optional(cls, v):
        v = _blank_to_none(v)
        return None if v is None else str(v)

    @field_validator("qty", mode="before")
    @classmethod
    def _qty_number(cls, v):
        return _optional_int(v, "qty")

    @field_validator("category", mode="before")
    @classmethod
    def _category_number(cls, v):
        return _optional_int(v, "category")


class DeliveryStatusIn(BaseModel):
    """Body of PATCH /api/invitations/{slug}/status."""

    is_sent: Optional[bool] = None
    is_copied: Optional[bool] = None
    status_pengiriman: Optional[DeliveryStatusEnum] = None

    @field_validator("status_pengiriman", mode="before")
    @classmethod
    def _status_enum(cls, v):
        if v is None:
            return None
        if v not in DELIVERY_VALUES:
            raise ValueError('Status tidak valid. Gunakan "terkirim" atau "belum_terkirim".')
        return v

    @model_validator(mode="after")
    def _at_least_one(self):
        if self.is_sent is None and self.is_copied is None and self.status_pengiriman is None:
            raise ValueError(
                "Minimal satu dari is_sent, is_copied atau status_pengiriman harus disertakan."
            )
        return self


class RSVPIn(BaseModel):
    """Body of PATCH /api/invitations/{slug}/kehadiran."""

    rsvp_status: Optional[RSVPStatusEnum] = Field(default=None, validate_default=True)
    jumlah_real: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _ignore_count_when_absent(cls, data):
        # 'Tidak Hadir' always stores 0, whatever count was sent
        if isinstance(data, dict) and data.get("rsvp_status") == RSVPStatusEnum.tidak_hadir.value:
            data = {**data, "jumlah_real": None}
        return data

    @field_validator("rsvp_status", mode="before")
    @classmethod
    def _status_enum(cls, v):
        if _blank_to_none(v) is None:
            raise ValueError("rsvp_status wajib diisi.")
        if v not in RSVP_VALUES:
            raise ValueError(
                "rsvp_status harus salah satu: 'Belum Konfirmasi', 'Hadir', 'Tidak Hadir'."
            )
        return v

    @field_validator("jumlah_real", mode="before")
    @classmethod
    def _qty_number(cls, v):
        return _optional_int(v, "jumlah_real")


class CheckinIn(BaseModel):
    """Optional body of PATCH /api/invitations/checkin/{slug}."""

    checked_in_qty: Optional[int] = None
    device_note: Optional[str] = Field(default=None, max_length=255)

    @field_validator("checked_in_qty", mode="before")
    @classmethod
    def _qty_number(cls, v):
        return _optional_int(v, "checked_in_qty")

    @field_validator("device_note", mode="before")
    @classmethod
    def _clean_note(cls, v):
        return _blank_to_none(v)


class CheckinOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invitation_id: int
    checked_in_qty: int
    scan_count: int
    device_note: Optional[str] = None
    checked_in_at: datetime
    last_scan_at: datetime


class MessageBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invitation_id: int
    message: str
    created_at: Optional[datetime] = None


class InvitationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: int
    sender: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("sender", "from"),
        serialization_alias="from",
    )
    name: str
    category: Optional[int] = None
    phone: Optional[str] = None
    qty: Optional[int] = None
    type: InvitationTypeEnum
    slug: str
    qrcode: Optional[str] = None
    rsvp_status: RSVPStatusEnum
    checked_in: bool
    checked_in_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    real_qty: Optional[int] = None
    is_sent: bool
    is_copied: bool
    status_pengiriman: DeliveryStatusEnum


# =================================================================================
# 💬 Messages
# =================================================================================
class MessageIn(BaseModel):
    invitation_id: Optional[int] = Field(default=None, validate_default=True)
    message: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("invitation_id", mode="before")
    @classmethod
    def _id_required(cls, v):
        value = _optional_int(v, "invitation_id")
        if value is None:
            raise ValueError("invitation_id dan message wajib diisi.")
        return value

    @field_validator("message", mode="before")
    @classmethod
    def _message_required(cls, v):
        if _blank_to_none(v) is None:
            raise ValueError("invitation_id dan message wajib diisi.")
        return str(v).strip()


class MessageEdit(BaseModel):
    message: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("message", mode="before")
    @classmethod
    def _message_required(cls, v):
        return _required_text(v, "message")


# =================================================================================
# 🏷️ Categories / captions
# =================================================================================
class CategoryIn(BaseModel):
    name: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def _name_required(cls, v):
        return _required_text(v, "name")


class CategoryOut(BaseModel):
    id: int
    name: str
    total_guests: int = 0


class CaptionIn(BaseModel):
    category_id: Optional[int] = Field(default=None, validate_default=True)
    caption_text: Optional[str] = Field(default=None, validate_default=True)
    is_active: bool = True

    @field_validator("category_id", mode="before")
    @classmethod
    def _category_required(cls, v):
        value = _optional_int(v, "category_id")
        if value is None:
            raise ValueError("Field category_id wajib diisi.")
        return value

    @field_validator("caption_text", mode="before")
    @classmethod
    def _text_required(cls, v):
        return _required_text(v, "caption_text")


class CaptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: int
    caption_text: str
    is_active: bool
    created_at: Optional[datetime] = None


# =================================================================================
# 🔐 Login / users
# =================================================================================
class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

    @model_validator(mode="after")
    def _both_required(self):
        self.username = _blank_to_none(self.username)
        if not self.username or not self.password:
            raise ValueError("Username dan password wajib diisi")
        return self


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: int
    username: str
    role: RoleEnum


class LoginResponse(BaseModel):
    message: str
    role: RoleEnum
    user: UserOut

    model_config = ConfigDict(use_enum_values=True)


# =================================================================================
# 📊 Summary
# =================================================================================
class RSVPBreakdown(BaseModel):
    hadir: int = 0
    tidak_hadir: int = 0
    belum_konfirmasi: int = 0


class SummaryOut(BaseModel):
    totalUndangan: int = 0
    totalTamu: int = 0
    checkedInUndangan: int = 0
    checkedInTamu: int = 0
    belumCheckInUndangan: int = 0
    belumCheckInTamu: int = 0
    digital: int = 0
    cetak: int = 0
    confirmed: RSVPBreakdown = Field(default_factory=RSVPBreakdown)
    total: int = 0
    estimasi_tamu: int = 0


class QuickSearchItem(BaseModel):
    slug: str
    name: str
    qty: int
    checked_in: bool
    checked_in_at: Optional[datetime] = None


class MessageItem(BaseModel):
    id: int
    invitation_id: int
    message: str
    created_at: Optional[datetime] = None
    guest_name: Optional[str] = None
    rsvp_status: Optional[str] = None
    attendance_status: Optional[str] = None
    checked_in: Optional[bool] = None
    checked_in_at: Optional[datetime] = None


class MessagePage(BaseModel):
    total: int
    page: int
    limit: int
    data: List[MessageItem]
    invitations: Optional[dict] = None
