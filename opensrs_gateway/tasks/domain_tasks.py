"""Domain mirror background tasks"""
import asyncio
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from opensrs_gateway.tasks import celery_app
from opensrs_gateway.tasks.utils import create_task_db_session
from opensrs_gateway.services.domain_service import DomainService

logger = logging.getLogger(__name__)


@celery_app.task(name="opensrs_gateway.tasks.domain.mark_expired_domains")
def mark_expired_domains():
    """Flip active mirrors past their expiration date to expired"""
    return asyncio.run(_mark_expired_domains_async())


async def _mark_expired_domains_async(now: datetime = None):
    task_engine, session_factory = create_task_db_session()
    try:
        async with session_factory() as db:
            try:
                count = await DomainService(db).mark_expired(now)
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(f"Failed to mark expired domains: {e}")
                raise
    finally:
        await task_engine.dispose()

    if count:
        logger.info(f"Marked {count} domains as expired")
    return {"status": "success", "expired": count}
