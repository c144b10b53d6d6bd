"""
Session factory for the execution history database
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from depflow.core.storage.sqlalchemy.models import Base


def is_in_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def create_history_engine(url: str, create_tables: bool = False) -> Engine:
    """
    Create a database engine for the history store.

    In-memory SQLite shares one connection (StaticPool) so that every
    session sees the same database.

    Args:
        url: SQLAlchemy database URL
        create_tables: Create missing history tables
    """
    if is_in_memory_sqlite(url):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(url, pool_pre_ping=True)

    if create_tables:
        Base.metadata.create_all(engine)
    return engine


def create_session_factory(url: str, create_tables: bool = False) -> sessionmaker:
    """Provide a SQLAlchemy session factory for the history database."""
    engine = create_history_engine(url, create_tables=create_tables)
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


__all__ = ["create_history_engine", "create_session_factory", "is_in_memory_sqlite"]
