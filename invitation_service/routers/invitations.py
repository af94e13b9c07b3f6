# invitation_service/routers/invitations.py

# =================================================================================
# 💌 INVITATIONS ROUTER (/api/invitations)
# ---------------------------------------------------------------------------------
# - Create / list / get / update / delete invitations.
# - RSVP confirmation by slug (guest-facing page).
# - QR check-in by slug (reception scanner).
# - Delivery flags (WhatsApp sent, link copied).
# - Quick search for the scan page and the summary alias.
# Static paths (/summary, /search, /checkin/...) are declared before /{slug}.
# =================================================================================

from typing import List, Optional, Set

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from invitation_service import schemas
from invitation_service.config import Settings, get_app_settings
from invitation_service.crud import (
    catalog_crud,
    checkins_crud,
    invitations_crud,
    messages_crud,
    summary_crud,
)
from invitation_service.db import get_db
from invitation_service.models import Invitation, InvitationTypeEnum, RSVPStatusEnum

router = APIRouter(prefix="/api/invitations", tags=["invitations"])

NOT_FOUND = "Undangan tidak ditemukan."
INCLUDE_OPTIONS = {"checkins", "messages"}


# ------------------------------ Local helpers --------------------------------

def _parse_include(raw: Optional[str]) -> Set[str]:
    return {part.strip() for part in (raw or "").split(",") if part.strip() in INCLUDE_OPTIONS}


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)


def _ensure_category(db: Session, category_id: Optional[int]) -> None:
    if category_id is not None and catalog_crud.get_category(db, category_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Kategori tidak ditemukan.")


def _serialize(
    inv: Invitation,
    caption_text: Optional[str],
    checkins=None,
    messages=None,
) -> dict:
    data = schemas.InvitationOut.model_validate(inv).model_dump(by_alias=True)
    data["category_name"] = inv.category_ref.name if inv.category_ref else None
    data["caption_text"] = caption_text
    if checkins is not None:
        data["checkins"] = [schemas.CheckinOut.model_validate(c).model_dump() for c in checkins]
    if messages is not None:
        data["messages"] = [schemas.MessageBrief.model_validate(m).model_dump() for m in messages]
    return data


def _serialize_many(db: Session, rows, include: Set[str]) -> list:
    ids = [inv.id for inv, _ in rows]
    logs = checkins_crud.logs_for(db, ids) if "checkins" in include else {}
    msgs = messages_crud.messages_for(db, ids) if "messages" in include else {}
    return [
        _serialize(
            inv,
            caption,
            checkins=logs.get(inv.id) if "checkins" in include else None,
            messages=msgs.get(inv.id) if "messages" in include else None,
        )
        for inv, caption in rows
    ]


# =================================================================================
# 📋 LISTING / LOOKUPS
# =================================================================================
@router.get("")
def list_invitations(
    type: Optional[InvitationTypeEnum] = None,
    category: Optional[int] = None,
    checked_in: Optional[bool] = None,
    rsvp_status: Optional[RSVPStatusEnum] = None,
    search: Optional[str] = None,
    include: Optional[str] = None,
    db: Session = Depends(get_db),
):
    rows = invitations_crud.list_invitations(
        db,
        type=type,
        category=category,
        checked_in=checked_in,
        rsvp_status=rsvp_status,
        search=search,
    )
    return _serialize_many(db, rows, _parse_include(include))


@router.get("/summary", response_model=schemas.SummaryOut)
def invitations_summary(db: Session = Depends(get_db)):
    return summary_crud.get_summary(db)


@router.get("/search", response_model=List[schemas.QuickSearchItem])
def quick_search(q: str = Query(default=""), db: Session = Depends(get_db)):
    return invitations_crud.quick_search(db, q)


# =================================================================================
# 📷 CHECK-IN
# =================================================================================
@router.patch("/checkin/{slug}")
def checkin(
    slug: str,
    payload: Optional[schemas.CheckinIn] = Body(default=None),
    db: Session = Depends(get_db),
):
    payload = payload or schemas.CheckinIn()
    result = checkins_crud.record_checkin(
        db, slug, checked_in_qty=payload.checked_in_qty, device_note=payload.device_note
    )
    if result is None:
        raise _not_found()

    inv = result.invitation
    return {
        "message": "Check-in berhasil."
        if result.first_checkin
        else "Scan diterima (tamu sudah pernah check-in).",
        "first_checkin": result.first_checkin,
        "name": inv.name,
        "qty_recorded": result.qty_recorded,
        "scan_count": result.log.scan_count,
        "checked_in": bool(inv.checked_in),
        "checked_in_at": inv.checked_in_at,
        "real_qty": inv.real_qty,
        "rsvp_status": inv.rsvp_status.value,
    }


@router.get("/{slug}")
def get_invitation(slug: str, include: Optional[str] = None, db: Session = Depends(get_db)):
    found = invitations_crud.get_with_caption(db, slug)
    if found is None:
        raise _not_found()
    return _serialize_many(db, [found], _parse_include(include))[0]


# =================================================================================
# ✍️ CREATE / UPDATE / DELETE
# =================================================================================
@router.post("", status_code=status.HTTP_201_CREATED)
def create_invitation(
    payload: schemas.InvitationIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    _ensure_category(db, payload.category)
    inv, links = invitations_crud.create_invitation(db, settings, payload)
    return {
        "message": "Undangan berhasil dibuat.",
        "id": inv.id,
        "slug": inv.slug,
        "qrcode": inv.qrcode,
        "confirm_link": links["confirm_link"],
        "invite_link": links["invite_link"],
        "link": links["confirm_link"],
    }


@router.put("/{invitation_id}")
def update_invitation(
    invitation_id: int,
    payload: schemas.InvitationIn,
    db: Session = Depends(get_db),
):
    inv = invitations_crud.get_by_id(db, invitation_id)
    if inv is None:
        raise _not_found()
    _ensure_category(db, payload.category)
    inv = invitations_crud.update_invitation(db, inv, payload)
    return {"message": "Undangan berhasil diperbarui.", "id": inv.id, "slug": inv.slug}


@router.patch("/{slug}/kehadiran")
def confirm_attendance(slug: str, payload: schemas.RSVPIn, db: Session = Depends(get_db)):
    inv = invitations_crud.get_by_slug(db, slug)
    if inv is None:
        raise _not_found()
    inv = invitations_crud.set_rsvp(db, inv, payload.rsvp_status, payload.jumlah_real)
    return {
        "message": "Kehadiran berhasil dikonfirmasi.",
        "rsvp_status": inv.rsvp_status.value,
        "jumlah_real": inv.real_qty,
        "real_qty": inv.real_qty,
        "qrcode": inv.qrcode,
    }


@router.patch("/{slug}/status")
def update_delivery_status(
    slug: str, payload: schemas.DeliveryStatusIn, db: Session = Depends(get_db)
):
    inv = invitations_crud.get_by_slug(db, slug)
    if inv is None:
        raise _not_found()
    inv = invitations_crud.update_delivery_status(db, inv, payload)
    return {
        "message": "Status pengiriman diperbarui.",
        "slug": inv.slug,
        "is_sent": inv.is_sent,
        "is_copied": inv.is_copied,
        "status_pengiriman": inv.status_pengiriman.value,
    }


@router.delete("/{invitation_id}")
def delete_invitation(invitation_id: int, db: Session = Depends(get_db)):
    inv = invitations_crud.get_by_id(db, invitation_id)
    if inv is None:
        raise _not_found()
    invitations_crud.delete_invitation(db, inv)
    return {"message": "Undangan berhasil dihapus."}
