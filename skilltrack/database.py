"""Database configuration for SkillTrack.

This module provides the database engine and table creation.
"""

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

# Import models so they're registered with SQLModel.metadata
from .models import User, Task, Skill  # noqa: F401


def get_engine(database_url: str, echo: bool = False):
    """Create a database engine for the given URL.

    SQLite URLs get ``check_same_thread`` disabled since FastAPI serves
    requests from a thread pool. In-memory SQLite shares one connection.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, pool_pre_ping=True)
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, echo=echo, connect_args={"check_same_thread": False})


def create_db_and_tables(engine) -> None:
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)
