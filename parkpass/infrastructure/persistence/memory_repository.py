from typing import Dict, Optional

from parkpass.application.repositories import AbstractSnapshotRepository


class InMemorySnapshotRepository(AbstractSnapshotRepository):
    """Snapshot store kept in a dict, for tests and throwaway processes."""

    def __init__(self, blobs: Optional[Dict[str, str]] = None):
        self.blobs = dict(blobs or {})
        self.save_count = 0

    async def load(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    async def save(self, key: str, payload: str) -> None:
        self.blobs[key] = payload
        self.save_count += 1
