# invitation_service/routers/auth_routes.py

# =================================================================================
# 🔑 AUTH ROUTER (dashboard accounts)
# ---------------------------------------------------------------------------------
# - POST /api/login   → checks username/password, sets the role's cookie.
# - POST /api/logout  → clears both session cookies.
# - GET  /api/{client|user}/me    → the logged-in account (DB row).
# - GET  /api/{client|user}/data  → the token claims, gated by role.
# - Login is rate-limited per client IP.
# =================================================================================

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from loguru import logger
from sqlalchemy.orm import Session

from invitation_service import auth, schemas
from invitation_service.config import Settings, get_app_settings
from invitation_service.crud import users_crud
from invitation_service.db import get_db
from invitation_service.models import RoleEnum
from invitation_service.rate_limit import client_ip

router = APIRouter(prefix="/api", tags=["auth"])

require_client = auth.require_role(RoleEnum.client)
require_user = auth.require_role(RoleEnum.user)


# =================================================================================
# 🚪 LOGIN / LOGOUT
# =================================================================================
@router.post("/login", response_model=schemas.LoginResponse)
def login(
    payload: schemas.LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    ip = client_ip(request)
    limiter = request.app.state.login_limiter
    if not limiter.is_allowed(f"login:{ip}"):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"message": "Terlalu banyak percobaan login. Coba lagi nanti."},
            headers={"Retry-After": str(settings.login_rl_window)},
        )

    user = users_crud.get_by_username(db, payload.username)
    if user is None:
        logger.info("Login failed (unknown user) username='{}' ip={}", payload.username, ip)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "User tidak ditemukan"},
        )
    if not auth.verify_password(payload.password, user.password):
        logger.info("Login failed (bad password) username='{}' ip={}", payload.username, ip)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Password salah"},
        )

    token = auth.create_access_token(
        settings, user_id=user.id, username=user.username, role=user.role.value
    )
    auth.set_session_cookie(response, settings, user.role, token)
    logger.info("Login success username='{}' role={} ip={}", user.username, user.role.value, ip)
    return {"message": "Login berhasil", "role": user.role, "user": schemas.UserOut.model_validate(user)}


@router.post("/logout")
def logout(response: Response):
    auth.clear_session_cookies(response)
    return {"message": "Logout berhasil"}


# =================================================================================
# 👤 PER-ROLE ENDPOINTS
# =================================================================================
def _current_user(db: Session, claims: Dict[str, Any]):
    user = users_crud.get_by_id(db, claims.get("id"))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "User tidak ditemukan"},
        )
    return user


@router.get("/client/me", response_model=schemas.UserOut)
def client_me(claims: Dict[str, Any] = Depends(require_client), db: Session = Depends(get_db)):
    return _current_user(db, claims)


@router.get("/user/me", response_model=schemas.UserOut)
def user_me(claims: Dict[str, Any] = Depends(require_user), db: Session = Depends(get_db)):
    return _current_user(db, claims)


@router.get("/client/data")
def client_data(claims: Dict[str, Any] = Depends(require_client)):
    return {"message": "Data khusus client", "user": claims}


@router.get("/user/data")
def user_data(claims: Dict[str, Any] = Depends(require_user)):
    return {"message": "Data khusus user", "user": claims}
