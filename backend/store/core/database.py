"""
PostgreSQL connection helpers

This module centralizes every way of reaching the database:
- psycopg2 dict-cursor connections (repositories run raw SQL)
- SQLAlchemy engine (schema creation from store.models)

Author: TM3
Updated: 2025-10-17
"""
import logging

import psycopg2
from psycopg2.extras import RealDictCursor
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from .config import settings

logger = logging.getLogger(__name__)


# ============================================================================
# SQLAlchemy Configuration (schema of record)
# ============================================================================

Base = declarative_base()

_engine = None


def get_engine() -> Engine:
    """
    Lazily create the SQLAlchemy engine

    Only schema management goes through SQLAlchemy; queries use psycopg2.
    """
    global _engine
    if _engine is None:
        _engine = create_engine(
            settings.DATABASE_URL,
            pool_pre_ping=True,  # Check connection before use
            pool_size=5,
            max_overflow=10,
        )
    return _engine


def create_schema(engine: Engine = None) -> None:
    """
    Create every table declared in store.models (no-op for existing tables)

    Args:
        engine: Engine to use (defaults to get_engine())
    """
    # Register the models on Base.metadata
    import store.models  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())
    logger.info("Database schema is up to date")


def dispose_engine() -> None:
    """Close pooled SQLAlchemy connections (shutdown hook)"""
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None


# ============================================================================
# psycopg2 Direct Connections (for raw SQL queries)
# ============================================================================

def _database_url() -> str:
    database_url = settings.DATABASE_URL
    if not database_url:
        raise RuntimeError("DATABASE_URL not configured")
    return database_url


def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT id, name FROM customers")
        rows = cursor.fetchall()  # list of dicts
        cursor.close()
        conn.close()
    """
    return psycopg2.connect(
        _database_url(),
        cursor_factory=RealDictCursor,
        connect_timeout=settings.DB_CONNECT_TIMEOUT,
    )
