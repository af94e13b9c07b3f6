# invitation_service/crud/checkins_crud.py

# =================================================================================
# 📷 QR check-in
# ---------------------------------------------------------------------------------
# One scan = one transaction:
#   1) lock the invitation row (SELECT ... FOR UPDATE where the backend has it)
#   2) create or bump its single check-in log row
#   3) mark the invitation as checked in (first scan) or refresh the timestamp
#   4) commit once. Any failure rolls everything back.
# =================================================================================

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, lazyload

from invitation_service.models import Checkin, Invitation


@dataclass
class CheckinResult:
    invitation: Invitation
    log: Checkin
    qty_recorded: int
    first_checkin: bool


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def resolve_qty(override: Optional[int], real_qty: Optional[int], qty: Optional[int]) -> Optional[int]:
    """Explicit count from the scanner, else the RSVP count, else the invited count."""
    if override is not None:
        return override
    if real_qty is not None:
        return real_qty
    return qty


def lock_invitation_stmt(slug: str):
    """SELECT ... FOR UPDATE on the invitation row only (no eager join to categories)."""
    return (
        select(Invitation)
        .options(lazyload(Invitation.category_ref))
        .where(Invitation.slug == slug)
        .with_for_update(of=Invitation)
    )


def record_checkin(
    db: Session,
    slug: str,
    checked_in_qty: Optional[int] = None,
    device_note: Optional[str] = None,
) -> Optional[CheckinResult]:
    """Registers one scan of `slug`. Returns None when the slug does not exist."""
    now = _utcnow()
    try:
        inv = db.execute(lock_invitation_stmt(slug)).scalar_one_or_none()
        if inv is None:
            return None

        qty = resolve_qty(checked_in_qty, inv.real_qty, inv.qty)
        recorded = qty if qty is not None else 0
        first = not inv.checked_in

        log = db.execute(
            select(Checkin).where(Checkin.invitation_id == inv.id).with_for_update()
        ).scalar_one_or_none()

        if log is None:
            log = Checkin(
                invitation_id=inv.id,
                checked_in_qty=recorded,
                scan_count=1,
                device_note=device_note,
                checked_in_at=now,
                last_scan_at=now,
            )
            db.add(log)
        else:
            log.scan_count = Checkin.scan_count + 1
            log.checked_in_qty = recorded
            if device_note is not None:
                log.device_note = device_note
            log.last_scan_at = now

        if first:
            inv.checked_in = True
            if inv.real_qty is None:
                inv.real_qty = qty
        inv.checked_in_at = now

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(inv)
    db.refresh(log)
    logger.info(
        "Check-in | slug={} first={} scan_count={} qty={}",
        slug, first, log.scan_count, recorded,
    )
    return CheckinResult(invitation=inv, log=log, qty_recorded=recorded, first_checkin=first)


def logs_for(db: Session, invitation_ids: Iterable[int]) -> Dict[int, List[Checkin]]:
    ids = list(invitation_ids)
    grouped: Dict[int, List[Checkin]] = {i: [] for i in ids}
    if not ids:
        return grouped
    for log in db.query(Checkin).filter(Checkin.invitation_id.in_(ids)).all():
        grouped[log.invitation_id].append(log)
    return grouped
