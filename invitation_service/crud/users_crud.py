# invitation_service/crud/users_crud.py

# =================================================================================
# 🔐 Dashboard accounts (one row per login, role 'client' or 'user')
# =================================================================================

from typing import Optional

from loguru import logger
from sqlalchemy.orm import Session

from invitation_service.auth import hash_password
from invitation_service.models import RoleEnum, User


def get_by_username(db: Session, username: str) -> Optional[User]:
    if not username:
        return None
    return db.query(User).filter(User.username == username.strip()).first()


def get_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def create_or_update_user(db: Session, username: str, password: str, role) -> User:
    """Creates the account, or resets password and role when it already exists."""
    user = get_by_username(db, username)
    if user is None:
        user = User(username=username.strip())
        db.add(user)
        logger.info("User created | username={}", username)
    else:
        logger.info("User updated | username={}", username)
    user.password = hash_password(password)
    user.role = RoleEnum(role)
    db.commit()
    db.refresh(user)
    return user
