from datetime import datetime, timedelta, timezone
from parkpass.domain.entities import Vehicle, User, ParkingSpot, Booking, Review
from parkpass.domain.common import UserType, PriceType, BookingStatus


def test_vehicle_creation():
    """Test that a Vehicle object can be created with correct attributes."""
    vehicle = Vehicle(make="Toyota", model="Camry", license_plate="ABC-123", color="Silver", id="v1")
    assert vehicle.id == "v1"
    assert vehicle.make == "Toyota"
    assert vehicle.model == "Camry"
    assert vehicle.license_plate == "ABC-123"
    assert vehicle.color == "Silver"


def test_user_creation_defaults():
    """Test User creation with default optional arguments."""
    user = User(name="John", email="j@example.com", phone="", password="pw", user_type=UserType.CUSTOMER)
    assert user.id is None
    assert user.vehicles == []


def test_users_do_not_share_vehicle_lists():
    first = User(name="A", email="a@x", phone="", password="pw", user_type=UserType.CUSTOMER)
    second = User(name="B", email="b@x", phone="", password="pw", user_type=UserType.CUSTOMER)
    first.vehicles.append(Vehicle(make="Kia", model="Rio", license_plate="K-1", color="Red"))
    assert second.vehicles == []


def test_parking_spot_creation_defaults():
    """Test that available slots default to the total."""
    spot = ParkingSpot(name="Lot", address="1 Main St", price=25, price_type=PriceType.HOUR, total_slots=50, owner_id="owner1")
    assert spot.id is None
    assert spot.available_slots == 50
    assert spot.rating == 0.0
    assert spot.review_count == 0
    assert spot.amenities == []
    assert spot.is_active is True


def test_parking_spot_explicit_available_slots():
    spot = ParkingSpot(
        name="Lot", address="1 Main St", price=150, price_type=PriceType.DAY,
        total_slots=200, available_slots=45, owner_id="owner1",
    )
    assert spot.available_slots == 45


def test_booking_creation():
    """Test that a Booking object can be created with correct attributes."""
    start = datetime.now(timezone.utc)
    booking = Booking(
        spot_id="1",
        user_id="user1",
        vehicle_id="v1",
        start_time=start,
        end_time=start + timedelta(hours=8),
        total_cost=200,
        status=BookingStatus.ACTIVE,
        qr_code="QR_b1_1_1737123456789",
        pin="1234",
        id="b1",
    )
    assert booking.id == "b1"
    assert booking.end_time - booking.start_time == timedelta(hours=8)
    assert booking.pin == "1234"
    assert booking.created_at is None


def test_booking_holds_slot():
    start = datetime.now(timezone.utc)
    booking = Booking(spot_id="1", user_id="u", vehicle_id="v", start_time=start,
                      end_time=start + timedelta(hours=1), total_cost=0)
    assert booking.status == BookingStatus.PENDING
    assert booking.holds_slot is True

    booking.status = BookingStatus.ACTIVE
    assert booking.holds_slot is True

    for status in (BookingStatus.COMPLETED, BookingStatus.CANCELLED):
        booking.status = status
        assert booking.holds_slot is False


def test_review_creation():
    review = Review(user_id="user1", spot_id="1", rating=5, comment="Great", user_name="John D.")
    assert review.id is None
    assert review.rating == 5
    assert review.created_at is None
