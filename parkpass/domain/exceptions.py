class LedgerError(ValueError):
    """Base class for rule violations raised by the ledger store."""


class BookingConflictError(LedgerError):
    pass


class CapacityExceededError(LedgerError):
    pass


class VehicleLimitError(LedgerError):
    pass


class PinSpaceExhaustedError(LedgerError):
    pass
