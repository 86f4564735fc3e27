"""System initialization and setup utilities"""
import asyncio
import logging
from sqlalchemy import text, select
from sqlalchemy.exc import SQLAlchemyError

from opensrs_gateway.core.database import AsyncSessionLocal, engine, Base
import opensrs_gateway.models  # Register all models
from opensrs_gateway.core.config import settings
from opensrs_gateway.models.user import User, UserRole
from opensrs_gateway.core.security import get_password_hash

logger = logging.getLogger(__name__)


async def create_tables():
    """Create all database tables"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created successfully")


async def seed_admin():
    """Create the admin account configured by SEED_ADMIN_EMAIL/PASSWORD"""
    if not settings.SEED_ADMIN_EMAIL or not settings.SEED_ADMIN_PASSWORD:
        return

    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(
                select(User).filter(User.email == settings.SEED_ADMIN_EMAIL.lower())
            )
            if result.scalars().first():
                return

            logger.info("Creating default admin user...")
            user = User(
                username="admin",
                email=settings.SEED_ADMIN_EMAIL.lower(),
                password_hash=get_password_hash(settings.SEED_ADMIN_PASSWORD),
                first_name="Admin",
                last_name="User",
                role=UserRole.ADMIN,
                is_active=True,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            logger.info(f"Created admin user with ID {user.id}")
    except SQLAlchemyError as e:
        logger.error(f"Error seeding admin user: {e}")


async def check_database_connection():
    """Check database connection"""
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        logger.info("Database connection successful")
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection failed: {e}")
        return False


async def init_system():
    """Initialize system on startup"""
    logger.info("Initializing OpenSRS gateway...")

    db_ok = await check_database_connection()
    if not db_ok:
        logger.error("Cannot start: Database connection failed")
        return False

    await create_tables()
    await seed_admin()

    logger.info("System initialized successfully")
    return True


if __name__ == "__main__":
    asyncio.run(init_system())
