# File: app/db/session.py
# Project: community-reports-backend

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from app.core.config import settings

def make_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # sqlite uses its own pool classes; pool sizing does not apply
        return create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": settings.db_pool_timeout},
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,
        pool_timeout=settings.db_pool_timeout,
    )

engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def init_db(bind: Engine = engine) -> None:
    """Create any missing tables. Production deployments run `alembic upgrade head` instead."""
    from app.models import issue, user, xp_transaction  # noqa: F401  register mappers
    from app.db.base import Base

    Base.metadata.create_all(bind=bind)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
