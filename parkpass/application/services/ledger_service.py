import asyncio
import math
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict

from loguru import logger
from pydantic import ValidationError

from parkpass.application.repositories import AbstractSnapshotRepository
from parkpass.config.settings_env import settings
from parkpass.domain.common import UserType, PriceType, BookingStatus, OPEN_STATUSES, TERMINAL_STATUSES
from parkpass.domain.entities import User, Vehicle, ParkingSpot, Booking, Review
from parkpass.domain.exceptions import (
    BookingConflictError,
    CapacityExceededError,
    VehicleLimitError,
    PinSpaceExhaustedError,
)
from parkpass.infrastructure.persistence.schemas import (
    LedgerSnapshot,
    VehicleRecord,
    UserRecord,
    ParkingSpotRecord,
    BookingRecord,
    ReviewRecord,
)

PIN_MIN = 1000
PIN_MAX = 9999

# update_spot never rewrites these
PROTECTED_SPOT_FIELDS = frozenset({"id"})


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _round_rating(mean: float) -> float:
    # Half-up to one decimal
    return math.floor(mean * 10 + 0.5) / 10


def _validate_record(label: str, record_cls, data: Dict):
    """Check fields against the stored record so bad input fails before any edit."""
    try:
        return record_cls.model_validate(data)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise ValueError(f"Invalid {label} {field}: {error['msg']}") from exc


def _user_fields(user: User) -> Dict:
    return {**vars(user), "vehicles": [vars(v) for v in user.vehicles]}


class LedgerStore:
    """In-memory ledger of users, parking spots, bookings and reviews.

    Every mutating operation validates its input, applies all of its in-memory
    edits and then writes the whole snapshot through the injected repository,
    so slot counts and rating aggregates are never observable half-updated.
    Saves are serialized by a lock, so concurrent operations sharing one
    repository session never overlap inside it.
    """

    def __init__(
        self,
        snapshot_repo: AbstractSnapshotRepository,
        snapshot: Optional[LedgerSnapshot] = None,
        storage_key: Optional[str] = None,
        max_vehicles_per_customer: Optional[int] = None,
        enforce_capacity: Optional[bool] = None,
    ):
        self.snapshot_repo = snapshot_repo
        self.storage_key = storage_key or settings.STORAGE_KEY
        self.max_vehicles_per_customer = (
            max_vehicles_per_customer if max_vehicles_per_customer is not None
            else settings.MAX_VEHICLES_PER_CUSTOMER
        )
        self.enforce_capacity = enforce_capacity if enforce_capacity is not None else settings.ENFORCE_CAPACITY
        self._persist_lock = asyncio.Lock()

        snapshot = snapshot or LedgerSnapshot()
        self.users: List[User] = [r.to_entity() for r in snapshot.users]
        self.parking_spots: List[ParkingSpot] = [r.to_entity() for r in snapshot.parking_spots]
        self.bookings: List[Booking] = [r.to_entity() for r in snapshot.bookings]
        self.reviews: List[Review] = [r.to_entity() for r in snapshot.reviews]

    @classmethod
    async def open(
        cls,
        snapshot_repo: AbstractSnapshotRepository,
        seed: Optional[Dict] = None,
        **kwargs,
    ) -> "LedgerStore":
        """Load the stored snapshot, falling back to ``seed`` and then to an empty ledger."""
        storage_key = kwargs.get("storage_key") or settings.STORAGE_KEY
        payload = await snapshot_repo.load(storage_key)

        if payload is not None:
            snapshot = LedgerSnapshot.model_validate_json(payload)
            logger.debug(f"Loaded ledger snapshot '{storage_key}'")
        elif seed is not None:
            snapshot = LedgerSnapshot.model_validate(seed)
            logger.info(f"No snapshot under '{storage_key}', starting from seed data")
        else:
            snapshot = LedgerSnapshot()
            logger.info(f"No snapshot under '{storage_key}', starting empty")

        return cls(snapshot_repo, snapshot=snapshot, **kwargs)

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot.from_entities(self.users, self.parking_spots, self.bookings, self.reviews)

    async def _persist(self) -> None:
        # Serialized under the lock so each save carries the latest state
        async with self._persist_lock:
            payload = self.snapshot().to_json()
            await self.snapshot_repo.save(self.storage_key, payload)

    # Users

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        user = next((u for u in self.users if u.email == email and u.password == password), None)
        if not user:
            logger.warning(f"Failed login attempt for {email}")
        return user

    async def create_user(
        self,
        name: str,
        email: str,
        phone: str,
        password: str,
        user_type: UserType = UserType.CUSTOMER,
        vehicles: Optional[List[Vehicle]] = None,
    ) -> User:
        user = User(
            id=_new_id("user"),
            name=name,
            email=email,
            phone=phone,
            password=password,
            user_type=UserType(user_type),
            vehicles=list(vehicles or []),
        )
        for vehicle in user.vehicles:
            if vehicle.id is None:
                vehicle.id = _new_id("v")
        _validate_record("user", UserRecord, _user_fields(user))

        self.users.append(user)
        await self._persist()

        logger.info(f"Created {user.user_type.value} account {user.id} for {email}")
        return user

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    async def update_user_profile(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Optional[User]:
        user = await self.get_user_by_id(user_id)
        if not user:
            return None

        changes = {k: v for k, v in {"name": name, "email": email, "phone": phone}.items() if v is not None}
        _validate_record("user", UserRecord, {**_user_fields(user), **changes})

        for field, value in changes.items():
            setattr(user, field, value)

        await self._persist()
        logger.info(f"Updated profile of user {user_id}")
        return user

    async def add_vehicle(
        self, user_id: str, make: str, model: str, license_plate: str, color: str
    ) -> Optional[Vehicle]:
        user = await self.get_user_by_id(user_id)
        if not user:
            return None

        if user.user_type == UserType.CUSTOMER and len(user.vehicles) >= self.max_vehicles_per_customer:
            raise VehicleLimitError(
                f"You can only add up to {self.max_vehicles_per_customer} vehicles."
            )

        vehicle = Vehicle(
            id=_new_id("v"),
            make=make,
            model=model,
            license_plate=license_plate,
            color=color,
        )
        _validate_record("vehicle", VehicleRecord, vars(vehicle))

        user.vehicles.append(vehicle)
        await self._persist()

        logger.info(f"Vehicle {license_plate} added to user {user_id}")
        return vehicle

    async def remove_vehicle(self, user_id: str, vehicle_id: str) -> Optional[User]:
        user = await self.get_user_by_id(user_id)
        if not user:
            return None

        remaining = [v for v in user.vehicles if v.id != vehicle_id]
        if len(remaining) == len(user.vehicles):
            return None

        user.vehicles = remaining
        await self._persist()

        logger.info(f"Vehicle {vehicle_id} removed from user {user_id}")
        return user

    # Parking spots

    async def list_active_spots(self) -> List[ParkingSpot]:
        return [s for s in self.parking_spots if s.is_active]

    async def get_spot_by_id(self, spot_id: str) -> Optional[ParkingSpot]:
        return next((s for s in self.parking_spots if s.id == spot_id), None)

    async def create_spot(
        self,
        owner_id: str,
        name: str,
        address: str,
        price: float,
        price_type: PriceType,
        total_slots: int,
        **details,
    ) -> ParkingSpot:
        if total_slots < 0:
            raise ValueError("total_slots must not be negative")

        spot = ParkingSpot(
            name=name,
            address=address,
            price=price,
            price_type=PriceType(price_type),
            total_slots=total_slots,
            owner_id=owner_id,
            **details,
        )
        # Derived fields always start fresh whatever the caller passed
        spot.id = _new_id("spot")
        spot.rating = 0.0
        spot.review_count = 0
        spot.available_slots = total_slots
        spot.is_active = True
        _validate_record("parking spot", ParkingSpotRecord, vars(spot))

        self.parking_spots.append(spot)
        await self._persist()

        logger.info(f"Created parking spot {spot.id} '{name}' with {total_slots} slots for owner {owner_id}")
        return spot

    async def update_spot(self, spot_id: str, **updates) -> Optional[ParkingSpot]:
        """Merge ``updates`` into the spot.

        Each value is checked and coerced on its own (``price_type`` must be a
        known price type, ``price`` must not be negative) before the spot is
        touched. No cross-field validation happens here: callers passing
        ``available_slots`` are responsible for keeping it within
        ``0..total_slots``.
        """
        spot = await self.get_spot_by_id(spot_id)
        if not spot:
            return None

        for field in updates:
            if field in PROTECTED_SPOT_FIELDS or not hasattr(spot, field):
                raise ValueError(f"Unknown parking spot field: {field}")

        merged = _validate_record("parking spot", ParkingSpotRecord, {**vars(spot), **updates})
        for field in updates:
            setattr(spot, field, getattr(merged, field))

        await self._persist()
        logger.debug(f"Updated parking spot {spot_id}: {sorted(updates)}")
        return spot

    async def list_spots_by_owner(self, owner_id: str) -> List[ParkingSpot]:
        return [s for s in self.parking_spots if s.owner_id == owner_id]

    async def set_spot_active(self, spot_id: str, is_active: bool) -> Optional[ParkingSpot]:
        return await self.update_spot(spot_id, is_active=is_active)

    async def search_spots(self, query: str) -> List[ParkingSpot]:
        active = await self.list_active_spots()
        query = (query or "").strip().lower()
        if not query:
            return active

        return [
            s for s in active
            if query in s.name.lower() or query in s.address.lower() or query in s.description.lower()
        ]

    # Bookings

    def _generate_pin(self) -> str:
        issued = {b.pin for b in self.bookings}
        if len(issued) >= PIN_MAX - PIN_MIN + 1:
            raise PinSpaceExhaustedError("Every 4-digit PIN has already been issued")

        while True:
            pin = str(random.randint(PIN_MIN, PIN_MAX))
            if pin not in issued:
                return pin

    async def create_booking(
        self,
        spot_id: str,
        user_id: str,
        vehicle_id: str,
        start_time: datetime,
        end_time: datetime,
        total_cost: float,
        status: BookingStatus = BookingStatus.PENDING,
    ) -> Booking:
        start_time, end_time = _as_utc(start_time), _as_utc(end_time)
        if start_time >= end_time:
            raise ValueError("Booking start time must be before its end time")

        spot = await self.get_spot_by_id(spot_id)
        if spot and spot.available_slots <= 0 and self.enforce_capacity:
            logger.warning(f"Rejected booking on full spot {spot_id}")
            raise CapacityExceededError(f"No available slots at {spot.name}")

        created_at = datetime.now(timezone.utc)
        booking_id = _new_id("booking")
        epoch_millis = int(created_at.timestamp() * 1000)

        booking = Booking(
            id=booking_id,
            spot_id=spot_id,
            user_id=user_id,
            vehicle_id=vehicle_id,
            start_time=start_time,
            end_time=end_time,
            total_cost=total_cost,
            status=BookingStatus(status),
            qr_code=f"QR_{booking_id}_{spot_id}_{epoch_millis}",
            pin=self._generate_pin(),
            created_at=created_at,
        )
        _validate_record("booking", BookingRecord, vars(booking))

        self.bookings.append(booking)

        if spot and spot.available_slots > 0:
            spot.available_slots -= 1
        elif spot:
            logger.warning(f"Spot {spot_id} has no free slot, booking {booking_id} created without one")

        await self._persist()

        logger.info(f"Booking {booking_id} created on spot {spot_id} for user {user_id}")
        return booking

    async def list_bookings_by_user(self, user_id: str) -> List[Booking]:
        return [b for b in self.bookings if b.user_id == user_id]

    async def list_all_bookings(self) -> List[Booking]:
        return list(self.bookings)

    async def list_bookings_by_owner(self, owner_id: str) -> List[Booking]:
        spot_ids = {s.id for s in await self.list_spots_by_owner(owner_id)}
        return [b for b in self.bookings if b.spot_id in spot_ids]

    async def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        return next((b for b in self.bookings if b.id == booking_id), None)

    async def find_booking_by_qr_code(self, qr_code: str) -> Optional[Booking]:
        return next((b for b in self.bookings if b.qr_code == qr_code), None)

    async def find_booking_by_pin(self, pin: str) -> Optional[Booking]:
        return next((b for b in self.bookings if b.pin == pin), None)

    async def set_booking_status(self, booking_id: str, status: BookingStatus) -> Optional[Booking]:
        booking = await self.get_booking_by_id(booking_id)
        if not booking:
            return None

        old_status = booking.status
        booking.status = BookingStatus(status)

        if old_status in OPEN_STATUSES and booking.status in TERMINAL_STATUSES:
            spot = await self.get_spot_by_id(booking.spot_id)
            if spot:
                spot.available_slots = min(spot.available_slots + 1, spot.total_slots)

        await self._persist()

        logger.info(f"Booking {booking_id}: {old_status.value} -> {booking.status.value}")
        return booking

    async def extend_booking(self, booking_id: str, additional_hours: float) -> Optional[Booking]:
        if additional_hours <= 0:
            raise ValueError("Extension must be a positive number of hours")

        booking = await self.get_booking_by_id(booking_id)
        if not booking:
            return None

        spot = await self.get_spot_by_id(booking.spot_id)
        if not spot:
            return None

        new_end_time = booking.end_time + timedelta(hours=additional_hours)

        conflicting = [
            b for b in self.bookings
            if b.spot_id == booking.spot_id
            and b.id != booking.id
            and b.holds_slot
            and b.start_time < new_end_time
            and b.end_time > booking.end_time
        ]
        slots_needed = len(conflicting) + 1
        if slots_needed > spot.total_slots:
            logger.warning(
                f"Extension of booking {booking_id} by {additional_hours}h conflicts with {len(conflicting)} bookings"
            )
            raise BookingConflictError("Extension not possible due to conflicting bookings")

        if spot.price_type == PriceType.DAY:
            additional_cost = math.ceil(additional_hours / 24) * spot.price
        else:
            additional_cost = additional_hours * spot.price

        booking.end_time = new_end_time
        booking.total_cost += additional_cost
        await self._persist()

        logger.info(f"Booking {booking_id} extended by {additional_hours}h for {additional_cost}")
        return booking

    async def next_available_time(self, spot_id: str) -> Optional[datetime]:
        spot = await self.get_spot_by_id(spot_id)
        if not spot:
            return None

        now = datetime.now(timezone.utc)
        if spot.available_slots > 0:
            return now

        upcoming = [
            b for b in self.bookings
            if b.spot_id == spot_id and b.holds_slot and b.end_time > now
        ]
        if not upcoming:
            return now

        # min() keeps the first of equal end times
        return min(upcoming, key=lambda b: b.end_time).end_time

    # Reviews

    async def create_review(
        self, user_id: str, spot_id: str, rating: int, comment: str, user_name: str
    ) -> Review:
        if not 1 <= rating <= 5:
            raise ValueError("Rating must be between 1 and 5")

        review = Review(
            id=_new_id("review"),
            user_id=user_id,
            spot_id=spot_id,
            rating=rating,
            comment=comment,
            user_name=user_name,
            created_at=datetime.now(timezone.utc),
        )
        _validate_record("review", ReviewRecord, vars(review))

        self.reviews.append(review)

        spot_reviews = [r for r in self.reviews if r.spot_id == spot_id]
        spot = await self.get_spot_by_id(spot_id)
        if spot:
            spot.rating = _round_rating(sum(r.rating for r in spot_reviews) / len(spot_reviews))
            spot.review_count = len(spot_reviews)

        await self._persist()

        logger.info(f"Review {review.id} ({rating}/5) added to spot {spot_id}")
        return review

    async def list_reviews_by_spot(self, spot_id: str) -> List[Review]:
        return [r for r in self.reviews if r.spot_id == spot_id]
