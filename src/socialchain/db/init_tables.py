"""
Initialize database tables using SQLAlchemy models.

This script creates all tables defined in the models. Deployments that
track schema history use the Alembic migrations instead.
"""

import asyncio

from ..core.config import get_config
from ..core.logging import get_logger, setup_logging
from .session import Database

logger = get_logger(__name__)


async def init_tables() -> None:
    """Create all tables in the database."""
    config = get_config()
    setup_logging(config)
    database = Database(config)
    database.init()

    try:
        await database.create_all()
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating tables: {e}")
        raise
    finally:
        await database.close()


if __name__ == "__main__":
    asyncio.run(init_tables())
