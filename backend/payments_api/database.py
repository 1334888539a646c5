"""
Database Engine & Session Management
SQLAlchemy setup with dependency injection for FastAPI.
"""
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from payments_api.config import get_settings

settings = get_settings()

_connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    _connect_args = {"check_same_thread": False}  # Required for SQLite

    # Ensure data directory exists for file-backed databases
    _db_path = settings.DATABASE_URL.replace("sqlite:///", "", 1)
    if settings.DATABASE_URL.startswith("sqlite:///") and os.path.dirname(_db_path):
        os.makedirs(os.path.dirname(_db_path), exist_ok=True)

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args,
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a database session, auto-closes on finish."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables. Called once at application startup."""
    from payments_api.models import payment as _payment_model              # noqa: F401
    from payments_api.models import registration as _registration_model    # noqa: F401

    Base.metadata.create_all(bind=engine)
