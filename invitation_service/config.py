# invitation_service/config.py

# =================================================================================
# ⚙️ APPLICATION SETTINGS (environment variables + .env)
# ---------------------------------------------------------------------------------
# Central place for every environment-driven value of the service.
# - Loads `.env` from the working directory with python-dotenv.
# - Builds one immutable Settings object that create_app() injects into
#   app.state; nothing else in the package reads os.environ directly.
# - Keeps the fail-fast policy for the database URL: production never falls
#   back to SQLite by accident.
# =================================================================================

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Request
from loguru import logger

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_QR_API_URL = "https://api.qrserver.com/v1/create-qr-code/"
SLUG_STYLES = ("numeric", "name")
QR_PAYLOADS = ("slug", "link")


# ---------------------------------------------------------------------------------
# 🧰 Parsing helpers
# ---------------------------------------------------------------------------------

def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        logger.warning("{} is not a valid integer; using {}", name, default)
        return default


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


def resolve_database_url(raw_url: Optional[str], force_db: str = "postgres") -> str:
    """
    Returns the SQLAlchemy URL to use.

    - Unresolved platform placeholders (``${{...}}``) count as empty.
    - ``postgres://`` is rewritten to ``postgresql://`` for SQLAlchemy.
    - Empty URL + ``FORCE_DB=postgres`` aborts startup; any other FORCE_DB
      value falls back to a local SQLite file next to the package.
    """
    url = (raw_url or "").strip()

    if url.startswith("${{") and url.endswith("}}"):
        logger.warning("DATABASE_URL looks like an unresolved placeholder: {}", url)
        url = ""

    if not url:
        if (force_db or "").strip().lower() == "postgres":
            raise RuntimeError(
                "FATAL: DATABASE_URL is not set and FORCE_DB=postgres. "
                "Aborting to avoid an accidental SQLite fallback in production."
            )
        logger.warning("DATABASE_URL is empty. Falling back to local SQLite.")
        return f"sqlite:///{PROJECT_ROOT / 'invitations.db'}"

    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


# =================================================================================
# 🧾 SETTINGS
# =================================================================================

@dataclass(frozen=True)
class Settings:
    database_url: str
    auto_create_tables: bool = False

    # --- Session / JWT ---
    jwt_secret: str = "dev_secret"
    jwt_algorithm: str = "HS256"
    token_expire_minutes: int = 1440
    cookie_secure: bool = False

    # --- Links and QR ---
    link_base: str = ""
    confirm_path: str = "/confirm"
    invite_path: str = "/invite"
    qr_api_url: str = DEFAULT_QR_API_URL
    qr_payload: str = "link"

    # --- Slugs ---
    slug_style: str = "numeric"
    slug_max_attempts: Optional[int] = None

    # --- /api/login rate limit ---
    login_rl_max: int = 5
    login_rl_window: int = 60

    # --- HTTP / logging ---
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    port: int = 8081

    def __post_init__(self):
        if self.slug_style not in SLUG_STYLES:
            raise ValueError(f"SLUG_STYLE must be one of {SLUG_STYLES}, not '{self.slug_style}'")
        if self.qr_payload not in QR_PAYLOADS:
            raise ValueError(f"QR_PAYLOAD must be one of {QR_PAYLOADS}, not '{self.qr_payload}'")
        if not self.jwt_secret:
            raise ValueError("JWT_SECRET is not configured.")

    @property
    def effective_slug_attempts(self) -> int:
        if self.slug_max_attempts and self.slug_max_attempts > 0:
            return self.slug_max_attempts
        return 10 if self.slug_style == "numeric" else 5

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        """Reads the process environment (after loading `.env`) into Settings."""
        load_dotenv(dotenv_path=env_file or Path(".") / ".env")

        attempts = os.getenv("SLUG_MAX_ATTEMPTS")
        return cls(
            database_url=resolve_database_url(
                os.getenv("DATABASE_URL"), os.getenv("FORCE_DB", "postgres")
            ),
            auto_create_tables=_env_bool("AUTO_CREATE_TABLES"),
            jwt_secret=os.getenv("JWT_SECRET", "dev_secret"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            token_expire_minutes=_env_int("TOKEN_EXPIRE_MINUTES", 1440),
            cookie_secure=_env_bool("COOKIE_SECURE"),
            link_base=os.getenv("INVITATION_LINK_BASE", "").rstrip("/"),
            confirm_path=os.getenv("INVITATION_CONFIRM_PATH", "/confirm"),
            invite_path=os.getenv("INVITATION_INVITE_PATH", "/invite"),
            qr_api_url=os.getenv("QR_API_URL", DEFAULT_QR_API_URL),
            qr_payload=os.getenv("QR_PAYLOAD", "link").strip().lower(),
            slug_style=os.getenv("SLUG_STYLE", "numeric").strip().lower(),
            slug_max_attempts=int(attempts) if attempts and attempts.isdigit() else None,
            login_rl_max=_env_int("LOGIN_RL_MAX", 5),
            login_rl_window=_env_int("LOGIN_RL_WINDOW", 60),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "*")) or ["*"],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            port=_env_int("PORT", 8081),
        )


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings built from the environment on first use."""
    return Settings.from_env()


def get_app_settings(request: Request) -> Settings:
    """FastAPI dependency: the Settings instance the running app was built with."""
    return request.app.state.settings
