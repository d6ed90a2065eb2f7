"""
Engine and sessions for the charge rate store.

The service runs without a database (rates and awards come from the static
tables), so engine and SessionLocal are None when no URL is configured.
"""
from typing import Iterator, Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from chargerate.config import settings

load_dotenv()

Base = declarative_base()


def normalize_database_url(url: str) -> str:
    """SQLAlchemy needs postgresql://, hosted Postgres hands out postgres://"""
    url = (url or "").strip()
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def make_engine(url: str) -> Optional[Engine]:
    url = normalize_database_url(url)
    if not url:
        return None
    connect_args = {}
    if url.startswith("sqlite"):
        # Sync routes run in a threadpool, so one connection can cross threads
        connect_args["check_same_thread"] = False
    return create_engine(url, pool_pre_ping=not url.startswith("sqlite"), connect_args=connect_args)


DATABASE_URL = normalize_database_url(settings.database_url)
engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine) if engine else None


def _session() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db() -> Iterator[Session]:
    if SessionLocal is None:
        raise RuntimeError("DATABASE_URL not configured")
    yield from _session()


def get_db_optional() -> Iterator[Optional[Session]]:
    """Yields None without a database so reference data can fall back to static tables."""
    if SessionLocal is None:
        yield None
        return
    yield from _session()
