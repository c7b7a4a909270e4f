from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from .config import Settings, settings

logger = logging.getLogger(__name__)

_engine: Engine | None = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False, future=True)


def _make_engine(url: str, echo: bool = False) -> Engine:
    connect_args = {}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        # one engine is shared by the thread pool that runs request handlers
        connect_args["check_same_thread"] = False
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, echo=echo, future=True, connect_args=connect_args)


def configure_engine(url: str, echo: bool = False) -> Engine:
    """Replace the process-wide engine, e.g. for tests or a custom DATABASE_URL."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = _make_engine(url, echo=echo)
    SessionLocal.configure(bind=_engine)
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        configure_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    return _engine


def get_db() -> Iterator[Session]:
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(app_settings: Settings | None = None) -> None:
    """Create missing tables and run the one-time first-run seed."""
    from .models import Base
    from .services.seed import seed_initial_content

    cfg = app_settings or settings
    engine = configure_engine(cfg.DATABASE_URL, echo=cfg.DB_ECHO)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_initial_content(db, cfg)
    finally:
        db.close()
