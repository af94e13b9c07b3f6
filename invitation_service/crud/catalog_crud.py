# invitation_service/crud/catalog_crud.py

# =================================================================================
# 🏷️ Categories and their invitation captions
# =================================================================================

from typing import List, Optional

from loguru import logger
from sqlalchemy import func
from sqlalchemy.orm import Session

from invitation_service.models import Caption, Category, Invitation


# ---------------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------------

def get_category(db: Session, category_id: int) -> Optional[Category]:
    return db.get(Category, category_id)


def list_categories(db: Session) -> List[dict]:
    """Every category with the number of invitations in it, newest first."""
    rows = (
        db.query(Category.id, Category.name, func.count(Invitation.id))
        .outerjoin(Invitation, Invitation.category == Category.id)
        .group_by(Category.id, Category.name)
        .order_by(Category.id.desc())
        .all()
    )
    return [{"id": cid, "name": name, "total_guests": total} for cid, name, total in rows]


def create_category(db: Session, name: str) -> Category:
    obj = Category(name=name)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    logger.info("Category created | id={} name='{}'", obj.id, name)
    return obj


def rename_category(db: Session, obj: Category, name: str) -> Category:
    obj.name = name
    db.commit()
    db.refresh(obj)
    return obj


def delete_category(db: Session, obj: Category) -> None:
    """Invitations keep existing with category=NULL; captions are removed."""
    category_id = obj.id
    db.delete(obj)
    db.commit()
    logger.info("Category deleted | id={}", category_id)


# ---------------------------------------------------------------------------------
# Captions
# ---------------------------------------------------------------------------------

def list_captions(db: Session) -> List[Caption]:
    return db.query(Caption).order_by(Caption.id.desc()).all()


def get_active_caption(db: Session, category_id: int) -> Optional[Caption]:
    return (
        db.query(Caption)
        .filter(Caption.category_id == category_id, Caption.is_active.is_(True))
        .order_by(Caption.id.desc())
        .first()
    )


def create_caption(db: Session, category_id: int, text: str, is_active: bool = True) -> Caption:
    obj = Caption(category_id=category_id, caption_text=text, is_active=is_active)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
