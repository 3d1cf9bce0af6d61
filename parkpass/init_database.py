"""Initialize the ParkPass snapshot database."""
import asyncio

from parkpass.config.settings_env import settings
from parkpass.infrastructure.persistence.database import AsyncSessionLocal, init_db, seed_db
from parkpass.shared.utils import logger


async def _seed():
    async with AsyncSessionLocal() as session:
        await seed_db(session, settings.STORAGE_KEY)


def main():
    logger.info("Initializing parkpass database...")
    init_db()
    if settings.SEED_DEMO_DATA:
        asyncio.run(_seed())
    logger.info("Database initialization complete!")


if __name__ == "__main__":
    main()
