from sqlmodel import SQLModel, create_engine
from sqlalchemy.pool import StaticPool
from vocabdeck.core.config import settings
import logging

logger = logging.getLogger(__name__)


def build_engine(db_url: str):
    """
    Create a SQLAlchemy engine for the given URL.

    SQLite needs cross-thread access enabled (FastAPI runs startup and
    requests on different threads), and an in-memory SQLite database must
    share one connection or every session would see an empty database.
    """
    # SQLAlchemy prefers postgresql:// over postgres://
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql://", 1)

    logger.info(f"Connecting to database: {db_url[:20]}...")  # Log partial URL for debugging

    if db_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(db_url, echo=False, **kwargs)

    return create_engine(
        db_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
    )


engine = build_engine(settings.database_url)


def init_db():
    """Initialize database tables."""
    SQLModel.metadata.create_all(engine)
