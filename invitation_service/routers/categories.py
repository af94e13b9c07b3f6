# invitation_service/routers/categories.py

# =================================================================================
# 🏷️ CATEGORIES ROUTER (/api/categories)
# =================================================================================

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from invitation_service import schemas
from invitation_service.crud import catalog_crud
from invitation_service.db import get_db

router = APIRouter(prefix="/api/categories", tags=["categories"])

NOT_FOUND = "Kategori tidak ditemukan."


def _get_or_404(db: Session, category_id: int):
    category = catalog_crud.get_category(db, category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return category


@router.get("", response_model=List[schemas.CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return catalog_crud.list_categories(db)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(payload: schemas.CategoryIn, db: Session = Depends(get_db)):
    category = catalog_crud.create_category(db, payload.name)
    return {"message": "Kategori berhasil dibuat.", "id": category.id}


@router.put("/{category_id}")
def rename_category(category_id: int, payload: schemas.CategoryIn, db: Session = Depends(get_db)):
    category = catalog_crud.rename_category(db, _get_or_404(db, category_id), payload.name)
    return {"message": "Kategori berhasil diperbarui.", "id": category.id, "name": category.name}


@router.delete("/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db)):
    catalog_crud.delete_category(db, _get_or_404(db, category_id))
    return {"message": "Kategori berhasil dihapus."}
