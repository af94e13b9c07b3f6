# invitation_service/routers/messages.py

# =================================================================================
# 💬 MESSAGES ROUTER (/api/messages)
# - Paginated listing with search, per-invitation listing, CRUD on one message.
# =================================================================================

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from invitation_service import schemas
from invitation_service.crud import invitations_crud, messages_crud
from invitation_service.db import get_db

router = APIRouter(prefix="/api/messages", tags=["messages"])

MESSAGE_NOT_FOUND = "Pesan tidak ditemukan."
INVITATION_NOT_FOUND = "Undangan tidak ditemukan."


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


@router.get("", response_model=schemas.MessagePage, response_model_exclude_unset=True)
def list_messages(
    invitation_id: Optional[int] = None,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=25, ge=1, le=100),
    include_inv: bool = False,
    db: Session = Depends(get_db),
):
    total, rows = messages_crud.list_messages(
        db, invitation_id=invitation_id, search=search, page=page, limit=limit
    )
    result = {
        "total": total,
        "page": page,
        "limit": limit,
        "data": [messages_crud.to_item(msg, inv) for msg, inv in rows],
    }
    if include_inv:
        result["invitations"] = {
            str(inv.id): {
                "id": inv.id,
                "name": inv.name,
                "slug": inv.slug,
                "phone": inv.phone,
                "rsvp_status": inv.rsvp_status.value,
                "checked_in": bool(inv.checked_in),
            }
            for _, inv in rows
        }
    return schemas.MessagePage(**result)


@router.get("/invitation/{invitation_id}")
def list_for_invitation(invitation_id: int, db: Session = Depends(get_db)):
    inv = invitations_crud.get_by_id(db, invitation_id)
    if inv is None:
        raise _not_found(INVITATION_NOT_FOUND)
    return {
        "invitation": {"id": inv.id, "name": inv.name},
        "data": [
            messages_crud.to_item(msg, inv)
            for msg in messages_crud.list_for_invitation(db, invitation_id)
        ],
    }


@router.get("/{message_id}", response_model=schemas.MessageItem)
def get_message(message_id: int, db: Session = Depends(get_db)):
    found = messages_crud.get_message(db, message_id)
    if found is None:
        raise _not_found(MESSAGE_NOT_FOUND)
    return messages_crud.to_item(*found)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_message(payload: schemas.MessageIn, db: Session = Depends(get_db)):
    if invitations_crud.get_by_id(db, payload.invitation_id) is None:
        raise _not_found(INVITATION_NOT_FOUND)
    msg = messages_crud.create_message(db, payload.invitation_id, payload.message)
    return {"message": "Pesan berhasil dikirim.", "id": msg.id, "invitation_id": msg.invitation_id}


@router.patch("/{message_id}", response_model=schemas.MessageItem)
def edit_message(message_id: int, payload: schemas.MessageEdit, db: Session = Depends(get_db)):
    found = messages_crud.get_message(db, message_id)
    if found is None:
        raise _not_found(MESSAGE_NOT_FOUND)
    msg, inv = found
    msg = messages_crud.update_message(db, msg, payload.message)
    return messages_crud.to_item(msg, inv)


@router.delete("/{message_id}")
def delete_message(message_id: int, db: Session = Depends(get_db)):
    if not messages_crud.delete_message(db, message_id):
        raise _not_found(MESSAGE_NOT_FOUND)
    return {"message": "Pesan berhasil dihapus."}
