# invitation_service/models.py

# =================================================================================
# 🏛️ DATABASE MODELS (ORM)
# ---------------------------------------------------------------------------------
# Table layout of the invitation service, declared with SQLAlchemy ORM.
# - Enums keep RSVP status, delivery type, delivery status and roles consistent.
# - Enum columns store the enum *values* ("Belum Konfirmasi", "digital"...),
#   which is what the API speaks, not the Python member names.
# - One check-in log row per invitation, enforced with a UNIQUE constraint.
# =================================================================================

import enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLAlchemyEnum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    false,
    func,
)
from sqlalchemy.orm import relationship

from invitation_service.db import Base


# 🗂️ ENUMS
# ---------------------------------------------------------------------------------
class RSVPStatusEnum(str, enum.Enum):
    belum_konfirmasi = "Belum Konfirmasi"  # not yet confirmed
    hadir = "Hadir"                        # attending
    tidak_hadir = "Tidak Hadir"            # not attending


class InvitationTypeEnum(str, enum.Enum):
    digital = "digital"
    cetak = "cetak"  # printed


class DeliveryStatusEnum(str, enum.Enum):
    terkirim = "terkirim"
    belum_terkirim = "belum_terkirim"


class RoleEnum(str, enum.Enum):
    client = "client"
    user = "user"


def _enum_column(enum_cls, **kwargs):
    return SQLAlchemyEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        validate_strings=True,
        length=32,
        **kwargs,
    )


# 🏷️ CATEGORIES / CAPTIONS
# ---------------------------------------------------------------------------------
class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)

    captions = relationship(
        "Caption",
        back_populates="category",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Caption(Base):
    __tablename__ = "caption"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), index=True, nullable=False
    )
    caption_text = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    category = relationship("Category", back_populates="captions")


# 💌 INVITATIONS (TABLE 'invitations')
# ---------------------------------------------------------------------------------
class Invitation(Base):
    __tablename__ = "invitations"

    id = Column(Integer, primary_key=True, index=True)
    sender = Column("from", String(120), nullable=True)
    name = Column(String(160), index=True, nullable=False)
    category = Column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), index=True, nullable=True
    )
    phone = Column(String(32), nullable=True)
    qty = Column(Integer, nullable=True)
    type = Column(_enum_column(InvitationTypeEnum), nullable=False)

    # --- Identity used in links / QR (immutable once created) ---
    slug = Column(String(120), unique=True, index=True, nullable=False)
    qrcode = Column(String(512), nullable=True)

    # --- RSVP and check-in state ---
    rsvp_status = Column(
        _enum_column(RSVPStatusEnum),
        nullable=False,
        default=RSVPStatusEnum.belum_konfirmasi,
        server_default=RSVPStatusEnum.belum_konfirmasi.value,
    )
    checked_in = Column(Boolean, default=False, server_default=false(), nullable=False)
    checked_in_at = Column(DateTime, nullable=True)
    real_qty = Column(Integer, nullable=True)

    # --- Delivery tracking (WhatsApp send / link copy) ---
    is_sent = Column(Boolean, default=False, server_default=false(), nullable=False)
    is_copied = Column(Boolean, default=False, server_default=false(), nullable=False)
    status_pengiriman = Column(
        _enum_column(DeliveryStatusEnum),
        nullable=False,
        default=DeliveryStatusEnum.belum_terkirim,
        server_default=DeliveryStatusEnum.belum_terkirim.value,
    )

    created_at = Column(DateTime, server_default=func.now())

    category_ref = relationship("Category", lazy="joined")
    checkin = relationship(
        "Checkin",
        back_populates="invitation",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    messages = relationship(
        "Message",
        back_populates="invitation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.created_at",
    )


# 📷 CHECK-IN LOG (TABLE 'checkins')
# ---------------------------------------------------------------------------------
class Checkin(Base):
    __tablename__ = "checkins"
    __table_args__ = (
        UniqueConstraint("invitation_id", name="uq_checkins_invitation_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    invitation_id = Column(
        Integer, ForeignKey("invitations.id", ondelete="CASCADE"), index=True, nullable=False
    )
    checked_in_qty = Column(Integer, default=0, nullable=False)
    scan_count = Column(Integer, default=1, nullable=False)
    device_note = Column(String(255), nullable=True)
    checked_in_at = Column(DateTime, nullable=False)
    last_scan_at = Column(DateTime, nullable=False)

    invitation = relationship("Invitation", back_populates="checkin")


# 💬 MESSAGES (TABLE 'messages')
# ---------------------------------------------------------------------------------
class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    invitation_id = Column(
        Integer, ForeignKey("invitations.id", ondelete="CASCADE"), index=True, nullable=False
    )
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    invitation = relationship("Invitation", back_populates="messages")


# 🔐 USERS (TABLE 'users')
# ---------------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(80), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(_enum_column(RoleEnum), nullable=False, default=RoleEnum.user)
    created_at = Column(DateTime, server_default=func.now())
