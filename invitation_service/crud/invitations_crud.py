# invitation_service/crud/invitations_crud.py

# =================================================================================
# 🧩 Invitation CRUD
# - Unique slug generation (numeric or name-based) with a bounded number of attempts.
# - create / update / delete, RSVP confirmation and delivery-status flags.
# - Listing with filters + free-text search, and the quick search used by the
#   reception desk.
# =================================================================================

import re
import secrets
import unicodedata
from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from invitation_service import schemas
from invitation_service.config import Settings
from invitation_service.links import build_links
from invitation_service.models import (
    Caption,
    Invitation,
    InvitationTypeEnum,
    RSVPStatusEnum,
)

QUICK_SEARCH_LIMIT = 50


class SlugGenerationError(RuntimeError):
    """No free slug was found within the configured number of attempts."""


# ---------------------------------------------------------------------------------
# 🔤 Slug generation
# ---------------------------------------------------------------------------------

def _slug_base(name: Optional[str]) -> str:
    """ASCII, lowercase, dash-separated version of the guest name ('guest' if empty)."""
    txt = unicodedata.normalize("NFKD", name or "")
    txt = "".join(ch for ch in txt if not unicodedata.combining(ch))
    txt = re.sub(r"[^a-z0-9]+", "-", txt.lower()).strip("-")
    return txt or "guest"


def _numeric_candidate() -> str:
    return str(100000 + secrets.randbelow(900000))


def _name_candidate(base: str) -> str:
    return f"{base}-{1000 + secrets.randbelow(9000)}"


def slug_exists(db: Session, slug: str) -> bool:
    return db.query(Invitation.id).filter(Invitation.slug == slug).first() is not None


def generate_unique_slug(
    db: Session,
    name: Optional[str] = None,
    *,
    style: str = "numeric",
    max_attempts: int = 10,
) -> str:
    """
    Draws random slugs until one is not in use.
    - numeric: 6 digits (100000-999999)
    - name:    '<ascii-name>-NNNN'
    Raises SlugGenerationError once `max_attempts` candidates all collided.
    """
    base = _slug_base(name) if style == "name" else None
    for attempt in range(1, max_attempts + 1):
        candidate = _name_candidate(base) if base else _numeric_candidate()
        if not slug_exists(db, candidate):
            return candidate
        logger.debug("Slug collision '{}' (attempt {}/{})", candidate, attempt, max_attempts)

    logger.error("No free slug after {} attempts (style={})", max_attempts, style)
    raise SlugGenerationError("Gagal membuat slug unik. Silakan coba lagi.")


# ---------------------------------------------------------------------------------
# 🔎 Lookups
# ---------------------------------------------------------------------------------

def get_by_id(db: Session, invitation_id: int) -> Optional[Invitation]:
    return db.get(Invitation, invitation_id)


def get_by_slug(db: Session, slug: str) -> Optional[Invitation]:
    return db.query(Invitation).filter(Invitation.slug == slug).first()


def active_caption_subquery():
    """Latest active caption of the invitation's category (correlated scalar)."""
    return (
        select(Caption.caption_text)
        .where(Caption.category_id == Invitation.category, Caption.is_active.is_(True))
        .order_by(Caption.id.desc())
        .limit(1)
        .correlate(Invitation)
        .scalar_subquery()
    )


def get_with_caption(db: Session, slug: str) -> Optional[Tuple[Invitation, Optional[str]]]:
    row = (
        db.query(Invitation, active_caption_subquery().label("caption_text"))
        .filter(Invitation.slug == slug)
        .first()
    )
    return (row[0], row[1]) if row else None


def list_invitations(
    db: Session,
    *,
    type: Optional[str] = None,
    category: Optional[int] = None,
    checked_in: Optional[bool] = None,
    rsvp_status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Tuple[Invitation, Optional[str]]]:
    """All invitations matching the filters (id desc), with their active caption."""
    q = db.query(Invitation, active_caption_subquery().label("caption_text"))

    if type:
        q = q.filter(Invitation.type == InvitationTypeEnum(type))
    if category is not None:
        q = q.filter(Invitation.category == category)
    if checked_in is not None:
        q = q.filter(Invitation.checked_in.is_(checked_in))
    if rsvp_status:
        q = q.filter(Invitation.rsvp_status == RSVPStatusEnum(rsvp_status))
    if search:
        like = f"%{search.strip()}%"
        q = q.filter(
            or_(
                Invitation.name.ilike(like),
                Invitation.sender.ilike(like),
                Invitation.phone.ilike(like),
                Invitation.slug.ilike(like),
            )
        )

    rows = q.order_by(Invitation.id.desc()).all()
    return [(inv, caption) for inv, caption in rows]


def quick_search(db: Session, q: str, limit: int = QUICK_SEARCH_LIMIT) -> List[dict]:
    """Name/slug lookup for the check-in desk: checked-in guests first, then by name."""
    term = (q or "").strip()
    if not term:
        return []

    like = f"%{term}%"
    rows = (
        db.query(Invitation)
        .filter(or_(Invitation.name.ilike(like), Invitation.slug.ilike(like)))
        .order_by(Invitation.checked_in.desc(), Invitation.name.asc())
        .limit(limit)
        .all()
    )
    return [
        {
            "slug": inv.slug,
            "name": inv.name,
            "qty": inv.real_qty if inv.real_qty is not None else (inv.qty or 0),
            "checked_in": bool(inv.checked_in),
            "checked_in_at": inv.checked_in_at,
        }
        for inv in rows
    ]


# ---------------------------------------------------------------------------------
# 🆕 Create / update / delete
# ---------------------------------------------------------------------------------

def create_invitation(
    db: Session, settings: Settings, payload: schemas.InvitationIn
) -> Tuple[Invitation, dict]:
    """Persists a new invitation with a fresh slug and its QR url. Returns (row, links)."""
    slug = generate_unique_slug(
        db,
        payload.name,
        style=settings.slug_style,
        max_attempts=settings.effective_slug_attempts,
    )
    links = build_links(settings, slug)

    obj = Invitation(
        sender=payload.sender,
        name=payload.name,
        category=payload.category,
        phone=payload.phone,
        qty=payload.qty,
        type=payload.type,
        slug=slug,
        qrcode=links["qrcode"],
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    logger.info("Invitation created | id={} slug={} type={}", obj.id, slug, obj.type.value)
    return obj, links


def update_invitation(db: Session, obj: Invitation, payload: schemas.InvitationIn) -> Invitation:
    """Replaces the editable fields. Slug, QR and RSVP/check-in state are kept."""
    obj.sender = payload.sender
    obj.name = payload.name
    obj.category = payload.category
    obj.phone = payload.phone
    obj.qty = payload.qty
    obj.type = payload.type
    db.commit()
    db.refresh(obj)
    return obj


def update_delivery_status(
    db: Session, obj: Invitation, payload: schemas.DeliveryStatusIn
) -> Invitation:
    if payload.is_sent is not None:
        obj.is_sent = payload.is_sent
    if payload.is_copied is not None:
        obj.is_copied = payload.is_copied
    if payload.status_pengiriman is not None:
        obj.status_pengiriman = payload.status_pengiriman
    db.commit()
    db.refresh(obj)
    return obj


def set_rsvp(
    db: Session, obj: Invitation, status: RSVPStatusEnum, jumlah_real: Optional[int]
) -> Invitation:
    """Stores the guest's answer; 'Tidak Hadir' always means zero attendees."""
    obj.rsvp_status = status
    obj.real_qty = 0 if status == RSVPStatusEnum.tidak_hadir else jumlah_real
    db.commit()
    db.refresh(obj)
    logger.info("RSVP | slug={} status={} real_qty={}", obj.slug, status.value, obj.real_qty)
    return obj


def delete_invitation(db: Session, obj: Invitation) -> None:
    """Removes the invitation; its check-in log and messages go with it."""
    invitation_id, slug = obj.id, obj.slug
    db.delete(obj)
    db.commit()
    logger.info("Invitation deleted | id={} slug={}", invitation_id, slug)
