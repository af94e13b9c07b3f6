# invitation_service/routers/captions.py

# =================================================================================
# 📝 CAPTIONS ROUTER (/api/captions)
# Text shown on the invitation page, per category. Only the newest active
# caption of a category is served.
# =================================================================================

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from invitation_service import schemas
from invitation_service.crud import catalog_crud
from invitation_service.db import get_db

router = APIRouter(prefix="/api/captions", tags=["captions"])


@router.get("", response_model=List[schemas.CaptionOut])
def list_captions(db: Session = Depends(get_db)):
    return catalog_crud.list_captions(db)


@router.get("/{category_id}", response_model=schemas.CaptionOut)
def active_caption(category_id: int, db: Session = Depends(get_db)):
    caption = catalog_crud.get_active_caption(db, category_id)
    if caption is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Caption untuk kategori ini tidak ditemukan.",
        )
    return caption


@router.post("", status_code=status.HTTP_201_CREATED)
def create_caption(payload: schemas.CaptionIn, db: Session = Depends(get_db)):
    if catalog_crud.get_category(db, payload.category_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Kategori tidak ditemukan.")
    caption = catalog_crud.create_caption(
        db, payload.category_id, payload.caption_text, payload.is_active
    )
    return {"success": True, "id": caption.id}
