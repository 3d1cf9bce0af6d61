"""Pydantic models for the persisted ledger snapshot.

The snapshot keeps the camelCase field names of the stored JSON document
(``parkingSpots``, ``availableSlots``, ``qrCode`` ...). Records convert to and
from the plain domain entities.
"""
from datetime import datetime, timezone
from typing import List, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from parkpass.domain.common import UserType, PriceType, BookingStatus
from parkpass.domain.entities import Vehicle, User, ParkingSpot, Booking, Review


class SnapshotModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VehicleRecord(SnapshotModel):
    id: str
    make: str
    model: str
    license_plate: str
    color: str

    def to_entity(self) -> Vehicle:
        return Vehicle(**self.model_dump())


class UserRecord(SnapshotModel):
    id: str
    name: str
    email: str
    phone: str = ""
    password: str
    user_type: UserType
    vehicles: List[VehicleRecord] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, user: User) -> "UserRecord":
        return cls(
            **{k: v for k, v in vars(user).items() if k != "vehicles"},
            vehicles=[VehicleRecord(**vars(v)) for v in user.vehicles],
        )

    def to_entity(self) -> User:
        data = self.model_dump(exclude={"vehicles"})
        return User(**data, vehicles=[v.to_entity() for v in self.vehicles])


class ParkingSpotRecord(SnapshotModel):
    id: str
    name: str
    address: str
    price: float = Field(..., ge=0)
    price_type: PriceType
    total_slots: int = Field(..., ge=0)
    available_slots: int
    rating: float = 0.0
    review_count: int = 0
    images: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    opening_hours: str = ""
    phone: str = ""
    description: str = ""
    lat: float = 0.0
    lng: float = 0.0
    owner_id: str
    is_active: bool = True

    def to_entity(self) -> ParkingSpot:
        return ParkingSpot(**self.model_dump())


class BookingRecord(SnapshotModel):
    id: str
    spot_id: str
    user_id: str
    vehicle_id: str
    start_time: datetime
    end_time: datetime
    total_cost: float
    status: BookingStatus
    qr_code: str
    pin: str = Field(..., pattern=r"^\d{4}$")
    created_at: datetime

    @field_validator('start_time', 'end_time', 'created_at')
    @classmethod
    def make_datetime_aware(cls, dt: datetime) -> datetime:
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    def to_entity(self) -> Booking:
        return Booking(**self.model_dump())


class ReviewRecord(SnapshotModel):
    id: str
    user_id: str
    spot_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    created_at: datetime
    user_name: str = ""

    @field_validator('created_at')
    @classmethod
    def make_datetime_aware(cls, dt: datetime) -> datetime:
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    def to_entity(self) -> Review:
        return Review(**self.model_dump())


class LedgerSnapshot(SnapshotModel):
    users: List[UserRecord] = Field(default_factory=list)
    parking_spots: List[ParkingSpotRecord] = Field(default_factory=list)
    bookings: List[BookingRecord] = Field(default_factory=list)
    reviews: List[ReviewRecord] = Field(default_factory=list)

    @classmethod
    def from_entities(
        cls,
        users: Sequence[User],
        parking_spots: Sequence[ParkingSpot],
        bookings: Sequence[Booking],
        reviews: Sequence[Review],
    ) -> "LedgerSnapshot":
        return cls(
            users=[UserRecord.from_entity(u) for u in users],
            parking_spots=[ParkingSpotRecord(**vars(s)) for s in parking_spots],
            bookings=[BookingRecord(**vars(b)) for b in bookings],
            reviews=[ReviewRecord(**vars(r)) for r in reviews],
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
