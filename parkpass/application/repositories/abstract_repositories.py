from abc import ABC, abstractmethod
from typing import Optional


class AbstractSnapshotRepository(ABC):
    """Keyed blob store holding serialized ledger snapshots."""

    @abstractmethod
    async def load(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def save(self, key: str, payload: str) -> None:
        pass
