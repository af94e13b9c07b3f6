# invitation_service/crud/messages_crud.py

# =================================================================================
# 💬 Guest messages (wishes left on the invitation page)
# =================================================================================

from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from invitation_service.models import Invitation, Message


def _attendance(inv: Invitation) -> str:
    return "Sudah Check-in" if inv.checked_in else "Belum Check-in"


def to_item(msg: Message, inv: Invitation) -> dict:
    """Message row joined with the few invitation fields the dashboard shows."""
    return {
        "id": msg.id,
        "invitation_id": msg.invitation_id,
        "message": msg.message,
        "created_at": msg.created_at,
        "guest_name": inv.name,
        "rsvp_status": inv.rsvp_status.value,
        "attendance_status": _attendance(inv),
        "checked_in": bool(inv.checked_in),
        "checked_in_at": inv.checked_in_at,
    }


def list_messages(
    db: Session,
    *,
    invitation_id: Optional[int] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 25,
) -> Tuple[int, List[Tuple[Message, Invitation]]]:
    """Newest first. Returns (total matching, rows of the requested page)."""
    q = db.query(Message, Invitation).join(Invitation, Message.invitation_id == Invitation.id)
    if invitation_id is not None:
        q = q.filter(Message.invitation_id == invitation_id)
    if search:
        like = f"%{search.strip()}%"
        q = q.filter(
            or_(
                Message.message.ilike(like),
                Invitation.name.ilike(like),
                Invitation.phone.ilike(like),
                Invitation.slug.ilike(like),
            )
        )

    total = q.count()
    rows = (
        q.order_by(Message.created_at.desc(), Message.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return total, rows


def get_message(db: Session, message_id: int) -> Optional[Tuple[Message, Invitation]]:
    row = (
        db.query(Message, Invitation)
        .join(Invitation, Message.invitation_id == Invitation.id)
        .filter(Message.id == message_id)
        .first()
    )
    return (row[0], row[1]) if row else None


def list_for_invitation(db: Session, invitation_id: int) -> List[Message]:
    return (
        db.query(Message)
        .filter(Message.invitation_id == invitation_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .all()
    )


def messages_for(db: Session, invitation_ids: Iterable[int]) -> Dict[int, List[Message]]:
    ids = list(invitation_ids)
    grouped: Dict[int, List[Message]] = {i: [] for i in ids}
    if not ids:
        return grouped
    rows = (
        db.query(Message)
        .filter(Message.invitation_id.in_(ids))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .all()
    )
    for msg in rows:
        grouped[msg.invitation_id].append(msg)
    return grouped


def create_message(db: Session, invitation_id: int, text: str) -> Message:
    obj = Message(invitation_id=invitation_id, message=text)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def update_message(db: Session, obj: Message, text: str) -> Message:
    obj.message = text
    db.commit()
    db.refresh(obj)
    return obj


def delete_message(db: Session, message_id: int) -> bool:
    obj = db.get(Message, message_id)
    if obj is None:
        return False
    db.delete(obj)
    db.commit()
    return True
