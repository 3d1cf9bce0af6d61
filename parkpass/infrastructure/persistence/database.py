from typing import Optional

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from parkpass.config.settings_env import settings
from parkpass.infrastructure.persistence.models.models import Base
from parkpass.infrastructure.persistence.schemas import LedgerSnapshot
from parkpass.infrastructure.persistence.seed import initial_snapshot
from parkpass.infrastructure.persistence.sqlalchemy_repositories import SQLAlchemySnapshotRepository

DATABASE_URL = settings.DATABASE_URL
ASYNC_DATABASE_URL = settings.ASYNC_DATABASE_URL

# Sync engine for initialization
engine = create_engine(DATABASE_URL, connect_args={
                       "check_same_thread": False} if "sqlite" in DATABASE_URL else {})

# Async engine for application
async_engine = create_async_engine(ASYNC_DATABASE_URL, echo=False)
AsyncSessionLocal = async_sessionmaker(
    async_engine, class_=AsyncSession, expire_on_commit=False)


async def get_async_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def init_db(bind=None):
    bind = bind or engine
    logger.info(f"Initializing database at: {bind.url}")
    Base.metadata.create_all(bind=bind, checkfirst=True)
    logger.info("Tables created")


async def seed_db(session: AsyncSession, key: Optional[str] = None) -> bool:
    """Store the demo snapshot under ``key`` unless something is already there."""
    key = key or settings.STORAGE_KEY
    repo = SQLAlchemySnapshotRepository(session)
    if await repo.load(key) is not None:
        logger.info(f"Snapshot '{key}' already present, skipping seed")
        return False

    snapshot = LedgerSnapshot.model_validate(initial_snapshot())
    await repo.save(key, snapshot.to_json())
    logger.info(
        f"Seeded '{key}' with {len(snapshot.users)} users and {len(snapshot.parking_spots)} parking spots"
    )
    return True
