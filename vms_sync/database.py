"""
Database connection, session management, and table creation.
Uses SQLAlchemy (SQLite by default, PostgreSQL via DATABASE_URL). All models
are auto-imported here so create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from vms_sync.config import settings

_engine_kwargs = {"pool_pre_ping": True, "echo": False}
if settings.DATABASE_URL.startswith("sqlite"):
    # FastAPI runs sync routes in a threadpool
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    _engine_kwargs.update(pool_size=10, max_overflow=20)

engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from vms_sync.models.raw_camera import RawPayload, RawCamera, CameraFieldKeys  # noqa
    from vms_sync.models.field_mapping import FieldMapping                         # noqa
    from vms_sync.models.unified_camera import UnifiedCamera                       # noqa

    Base.metadata.create_all(bind=engine)
