from datetime import datetime, timezone
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import declarative_base
from parkpass.shared.custom_types import UTCDateTime

Base = declarative_base()


class Snapshot(Base):
    __tablename__ = "snapshots"

    key = Column(String, primary_key=True, index=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(
        UTCDateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    @property
    def size_bytes(self):
        return len(self.payload.encode("utf-8")) if self.payload else 0

    def to_dict(self):
        return {
            "key": self.key,
            "payload": self.payload,
            "updated_at": self.updated_at,
        }
