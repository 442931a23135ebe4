"""
SQLAlchemy engine and session factory.

The job queue is an in-memory structure guarded by a lock, written through
to the database on every mutation so that queued jobs survive a restart.
All of that happens in plain threads (API thread pool, worker thread), so a
single sync engine (psycopg2 driver) is all we need.
"""

from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy import create_engine

from config.settings import settings


class Base(DeclarativeBase):
    """Base class for all ORM models. SQLAlchemy uses this to track table metadata."""
    pass


engine = create_engine(settings.database_url, echo=False, pool_pre_ping=True)
SessionLocal = sessionmaker(engine, expire_on_commit=False)
