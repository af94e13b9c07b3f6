# invitation_service/db.py
# =================================================================================
# 🗄️ DATABASE CONFIGURATION AND CONNECTION
# ---------------------------------------------------------------------------------
# Centralizes the SQLAlchemy setup, with conditional engine options for SQLite
# (development/tests) and PostgreSQL/MySQL (production).
# The engine and session factory live in an explicit `Database` object owned
# by the FastAPI app (app.state.database) and disposed on shutdown.
# =================================================================================

import os
from typing import Iterator

from fastapi import Request
from loguru import logger
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    # SQLite ignores ON DELETE CASCADE / SET NULL unless asked per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Creates the engine with the options each backend needs."""
    if database_url.startswith("sqlite"):
        logger.info("DB in use → SQLite")
        options = {
            "connect_args": {"check_same_thread": False},
            "pool_pre_ping": True,
        }
        # In-memory databases only exist inside a single connection.
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        engine = create_engine(database_url, echo=echo, **options)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    logger.info("DB in use → {}", database_url.split(":", 1)[0])
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


class Database:
    """Engine + session factory with an explicit startup/shutdown lifecycle."""

    def __init__(self, database_url: str, echo: bool = False):
        self.engine = build_engine(database_url, echo=echo)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self) -> None:
        from invitation_service import models  # noqa: F401  (registers the tables)

        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database ping failed: {}", e)
            return False

    def dispose(self) -> None:
        self.engine.dispose()

    def log_path(self) -> None:
        """Writes to the logs which database engine is in use at boot."""
        try:
            url = self.engine.url
            logger.info("DB driver in use → {}", url.drivername)
            if url.drivername.startswith("sqlite"):
                db_file = getattr(url, "database", None)
                abs_path = os.path.abspath(db_file) if db_file else "<memory>"
                logger.info("DB path → {} (abs={})", db_file, abs_path)
        except Exception as e:
            logger.warning("Could not resolve database information: {}", e)


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency that injects one session per request."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
