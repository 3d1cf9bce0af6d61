from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from parkpass.application.repositories import AbstractSnapshotRepository
from parkpass.infrastructure.persistence.models.models import Snapshot as ORMSnapshot


class SQLAlchemySnapshotRepository(AbstractSnapshotRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def load(self, key: str) -> Optional[str]:
        orm_snapshot = await self.session.get(ORMSnapshot, key)
        if orm_snapshot:
            logger.trace(f"Loaded snapshot '{key}' ({orm_snapshot.size_bytes} bytes)")
            return orm_snapshot.payload
        return None

    async def save(self, key: str, payload: str) -> None:
        orm_snapshot = await self.session.get(ORMSnapshot, key)
        if orm_snapshot:
            orm_snapshot.payload = payload
        else:
            self.session.add(ORMSnapshot(key=key, payload=payload))
        await self.session.commit()
        logger.trace(f"Saved snapshot '{key}'")
