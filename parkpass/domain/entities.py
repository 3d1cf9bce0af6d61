from datetime import datetime
from typing import List, Optional

from parkpass.domain.common import UserType, PriceType, BookingStatus, OPEN_STATUSES


class Vehicle:
    def __init__(
        self, make: str, model: str, license_plate: str, color: str, id: Optional[str] = None
    ):
        self.id = id
        self.make = make
        self.model = model
        self.license_plate = license_plate
        self.color = color


class User:
    def __init__(
        self,
        name: str,
        email: str,
        phone: str,
        password: str,
        user_type: UserType,
        vehicles: Optional[List[Vehicle]] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.email = email
        self.phone = phone
        self.password = password
        self.user_type = user_type
        self.vehicles = vehicles if vehicles is not None else []


class ParkingSpot:
    def __init__(
        self,
        name: str,
        address: str,
        price: float,
        price_type: PriceType,
        total_slots: int,
        owner_id: str,
        available_slots: Optional[int] = None,
        lat: float = 0.0,
        lng: float = 0.0,
        rating: float = 0.0,
        review_count: int = 0,
        amenities: Optional[List[str]] = None,
        images: Optional[List[str]] = None,
        opening_hours: str = "",
        phone: str = "",
        description: str = "",
        is_active: bool = True,
        id: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.address = address
        self.price = price
        self.price_type = price_type
        self.total_slots = total_slots
        self.available_slots = available_slots if available_slots is not None else total_slots
        self.owner_id = owner_id
        self.lat = lat
        self.lng = lng
        self.rating = rating
        self.review_count = review_count
        self.amenities = amenities if amenities is not None else []
        self.images = images if images is not None else []
        self.opening_hours = opening_hours
        self.phone = phone
        self.description = description
        self.is_active = is_active


class Booking:
    def __init__(
        self,
        spot_id: str,
        user_id: str,
        vehicle_id: str,
        start_time: datetime,
        end_time: datetime,
        total_cost: float,
        status: BookingStatus = BookingStatus.PENDING,
        qr_code: Optional[str] = None,
        pin: Optional[str] = None,
        created_at: Optional[datetime] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.spot_id = spot_id
        self.user_id = user_id
        self.vehicle_id = vehicle_id
        self.start_time = start_time
        self.end_time = end_time
        self.total_cost = total_cost
        self.status = status
        self.qr_code = qr_code
        self.pin = pin
        self.created_at = created_at

    @property
    def holds_slot(self) -> bool:
        return self.status in OPEN_STATUSES


class Review:
    def __init__(
        self,
        user_id: str,
        spot_id: str,
        rating: int,
        comment: str,
        user_name: str,
        created_at: Optional[datetime] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.spot_id = spot_id
        self.rating = rating
        self.comment = comment
        self.user_name = user_name
        self.created_at = created_at
