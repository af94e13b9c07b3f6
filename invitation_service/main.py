# invitation_service/main.py

# =================================================================================
# 🧠 API CORE (FastAPI)
# ---------------------------------------------------------------------------------
# - create_app(settings) builds the application: settings, database, rate
#   limiter, CORS, request logging, error handlers and routers.
# - Schema management in production is Alembic's job; AUTO_CREATE_TABLES=1
#   runs create_all at startup for local development and tests.
# - Run with:  uvicorn invitation_service.main:create_app --factory
# =================================================================================

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from invitation_service.config import Settings, get_settings
from invitation_service.crud.invitations_crud import SlugGenerationError
from invitation_service.db import Database
from invitation_service.logging_setup import setup_logging
from invitation_service.rate_limit import SlidingWindowLimiter
from invitation_service.routers import (
    auth_routes,
    captions,
    categories,
    invitations,
    messages,
    meta,
    summary,
)

API_TITLE = "Wedding Invitation API"
API_VERSION = "1.0.0"


# =================================================================================
# ❗ ERROR HANDLERS
# =================================================================================
def _validation_message(err: dict) -> tuple:
    """(message, field) for the first Pydantic error of a request."""
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    field = loc[-1] if loc else None
    kind = err.get("type", "")

    if kind == "missing":
        if field is None:
            return "Body permintaan wajib diisi.", None
        return f"Field {field} wajib diisi.", field
    if kind == "json_invalid":
        return "Body JSON tidak valid.", None
    if kind.startswith("value_error"):
        cause = (err.get("ctx") or {}).get("error")
        text = str(cause) if cause else err.get("msg", "")
        return text.replace("Value error, ", "", 1), field
    if field:
        return f"Field {field} tidak valid.", field
    return "Permintaan tidak valid.", None


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message, field = _validation_message(errors[0]) if errors else ("Permintaan tidak valid.", None)
    content = {"error": message}
    if field:
        content["field"] = field
    logger.info("Validation error {} {} → {}", request.method, request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def slug_exception_handler(request: Request, exc: SlugGenerationError):
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"error": str(exc)})


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.opt(exception=exc).error("Database error on {} {}", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Terjadi kesalahan pada server."},
    )


# =================================================================================
# 🏗️ APP FACTORY
# =================================================================================
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    database = Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.log_path()
        if settings.auto_create_tables:
            logger.info("AUTO_CREATE_TABLES=1 → creating missing tables")
            database.create_all()
        logger.info(
            "[BOOT] slug_style={} | qr_payload={} | link_base='{}' | cookie_secure={}",
            settings.slug_style, settings.qr_payload, settings.link_base, settings.cookie_secure,
        )
        yield
        database.dispose()
        logger.info("Database engine disposed")

    app = FastAPI(
        title=API_TITLE,
        description="Backend for wedding invitations: RSVP, QR check-in, messages and statistics",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.login_limiter = SlidingWindowLimiter(settings.login_rl_max, settings.login_rl_window)

    # "*" cannot be combined with credentials; cookies need explicit origins.
    wildcard = settings.cors_origins == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=not wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "[{}] {} → {} ({:.1f} ms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SlugGenerationError, slug_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)

    app.include_router(auth_routes.router)
    app.include_router(invitations.router)
    app.include_router(messages.router)
    app.include_router(categories.router)
    app.include_router(captions.router)
    app.include_router(summary.router)
    app.include_router(meta.router)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "invitation_service.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=get_settings().port,
    )
