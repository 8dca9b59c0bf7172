"""Database engine and session configuration."""

from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from pricecomparator.config import settings


def build_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """Create an engine for the catalog database.

    Args:
        url: Database URL, defaults to settings.DATABASE_URL
        echo: Log SQL statements, defaults to settings.DEBUG
    """
    url = url or settings.DATABASE_URL
    engine_kwargs: dict = {"echo": settings.DEBUG if echo is None else echo}

    # SQLite doesn't support pool_size / max_overflow / pool_pre_ping
    if not url.startswith("sqlite"):
        engine_kwargs.update(pool_size=20, max_overflow=10, pool_pre_ping=True)

    return create_engine(url, **engine_kwargs)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(engine, class_=Session, expire_on_commit=False)
