"""Shared utilities for Celery tasks"""
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from opensrs_gateway.core.database import _engine_options
from opensrs_gateway.core.config import settings


def create_task_db_session():
    """
    Create a new database engine and session factory for use in Celery tasks.

    Each task runs its coroutine with ``asyncio.run()``, i.e. on a fresh
    event loop; asyncpg connections are bound to the loop that opened them,
    so the application's global engine cannot be reused here.
    """
    task_engine = create_async_engine(settings.DATABASE_URL, **_engine_options())
    session_factory = async_sessionmaker(
        task_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    return task_engine, session_factory
