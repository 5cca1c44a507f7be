"""
SQLAlchemy engine and session factory.

Usage:
    from db.engine import SessionLocal

    with SessionLocal() as db:
        user = db.query(User).first()
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from config import Config


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections are shared across threads."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before use
        connect_args=connect_args,
        echo=echo,
    )


engine = make_engine(Config.DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Base class for all models
Base = declarative_base()


def init_db(bind: Engine | None = None) -> None:
    """Create missing tables. Alembic remains the path for schema changes."""
    # Register models on Base.metadata
    import db.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
