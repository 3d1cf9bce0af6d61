from enum import Enum


class UserType(str, Enum):
    CUSTOMER = "customer"
    OWNER = "owner"


class PriceType(str, Enum):
    HOUR = "hour"
    DAY = "day"


class BookingStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# A booking in one of these states holds a slot at its spot
OPEN_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.ACTIVE})
TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})
