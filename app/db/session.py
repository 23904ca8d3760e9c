from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import get_settings
from app.db.base import Base

DATABASE_URL = get_settings().database_url

# SQLite connections are used from FastAPI's threadpool and background tasks
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db() -> None:
    """Create tables that do not exist yet."""
    # Registers the ORM classes on Base.metadata
    import app.db.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
