import asyncio
import structlog
from sqlalchemy.ext.asyncio import AsyncEngine

from crisis_updates.core.config import settings
from crisis_updates.db.base import Base
from crisis_updates.db.session import build_engine

logger = structlog.get_logger()


async def init_db(engine: AsyncEngine) -> None:
    """
    Create the snapshot tables if they do not exist yet.
    """
    # Trigger model registration
    from crisis_updates.models.crisis_update import CrisisUpdateRow, StoreMeta  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def main():
    logger.info("db_init_start", database_url=settings.DATABASE_URL)
    engine = build_engine(settings.DATABASE_URL)
    try:
        await init_db(engine)
    except Exception as e:
        logger.error("db_init_failed", error=str(e))
        raise
    finally:
        await engine.dispose()
    logger.info("db_init_complete")

if __name__ == "__main__":
    asyncio.run(main())
