# invitation_service/auth.py

# =================================================================================
# 🔐 AUTHENTICATION MODULE (JWT in httpOnly cookies)
# ---------------------------------------------------------------------------------
# - Hashes and checks login passwords with bcrypt.
# - Signs / verifies session tokens with python-jose (HS256 by default).
# - Two fixed roles, each with its own cookie: client → token_client,
#   user → token_user.
# - require_role(role) builds the FastAPI dependency that gates a route.
# =================================================================================

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import bcrypt
from fastapi import Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt

from invitation_service.config import Settings, get_app_settings
from invitation_service.models import RoleEnum

COOKIE_NAMES: Dict[RoleEnum, str] = {
    RoleEnum.client: "token_client",
    RoleEnum.user: "token_user",
}


# 🔑 Password helpers
# ---------------------------------------------------------------------------------
def hash_password(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:72], hashed.encode())
    except ValueError:
        # stored value is not a bcrypt hash
        return False


# ✨ Token creation / decoding
# ---------------------------------------------------------------------------------
def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(settings: Settings, *, user_id: int, username: str, role: str) -> str:
    """Signs a session token carrying the user's id, username and role."""
    now = _utcnow()
    exp = now + timedelta(minutes=settings.token_expire_minutes)
    payload: Dict[str, Any] = {
        "id": user_id,
        "username": username,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str) -> Dict[str, Any]:
    """Decodes and validates signature/expiry. Raises JWTError when invalid."""
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


# 🍪 Cookies
# ---------------------------------------------------------------------------------
def cookie_name_for(role) -> str:
    return COOKIE_NAMES[RoleEnum(role)]


def set_session_cookie(response: Response, settings: Settings, role, token: str) -> None:
    response.set_cookie(
        key=cookie_name_for(role),
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.token_expire_minutes * 60,
        path="/",
    )


def clear_session_cookies(response: Response) -> None:
    for name in COOKIE_NAMES.values():
        response.delete_cookie(name, path="/")


# 🚧 Route guard
# ---------------------------------------------------------------------------------
def _reject(code: int, message: str) -> HTTPException:
    return HTTPException(status_code=code, detail={"message": message})


def require_role(role) -> Callable[..., Dict[str, Any]]:
    """
    Returns a dependency that only lets through requests carrying a valid
    token for `role` in that role's cookie. The decoded claims end up in
    `request.state.user` and are returned to the route.
    """
    required = RoleEnum(role)
    cookie = COOKIE_NAMES[required]

    def _dependency(
        request: Request,
        settings: Settings = Depends(get_app_settings),
    ) -> Dict[str, Any]:
        token: Optional[str] = request.cookies.get(cookie)
        if not token:
            raise _reject(status.HTTP_401_UNAUTHORIZED, "Tidak ada token")

        try:
            claims = decode_access_token(settings, token)
        except JWTError:
            raise _reject(status.HTTP_401_UNAUTHORIZED, "Token tidak valid")

        if claims.get("role") != required.value:
            raise _reject(status.HTTP_403_FORBIDDEN, "Akses ditolak")

        request.state.user = claims
        return claims

    _dependency.__name__ = f"require_{required.value}"
    return _dependency
