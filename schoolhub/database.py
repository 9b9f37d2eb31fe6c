from sqlalchemy import create_engine, Column, DateTime, func
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from schoolhub.core.config import settings
from schoolhub.core.logging_config import logger


def _engine_options() -> dict:
    """Pool options only apply to server databases; SQLite gets the defaults."""
    if settings.is_sqlite:
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,       # Test connections before using
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": 30,
        "pool_recycle": 3600,
    }


# Single process-wide engine; disposed from the application lifespan.
engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    **_engine_options()
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
)

logger.info(f"Database engine configured ({engine.dialect.name})")


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def dispose_engine() -> None:
    engine.dispose()
    logger.info("Database engine disposed")
