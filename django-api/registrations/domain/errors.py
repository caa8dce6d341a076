"""Domain error codes for the registrations module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    LINE_ITEM_NOT_FOUND = "LINE_ITEM_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    INVALID_REGISTRATION_ID = "INVALID_REGISTRATION_ID"
    DISCOUNT_NOT_FOUND = "DISCOUNT_NOT_FOUND"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    CANCELLATION_NOT_ALLOWED = "CANCELLATION_NOT_ALLOWED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    EVENT_NOT_OPEN = "EVENT_NOT_OPEN"
    EVENT_FULL = "EVENT_FULL"
    INVALID_DATE = "INVALID_DATE"
    MISSING_AGE = "MISSING_AGE"
    MISSING_MULTIPLIER = "MISSING_MULTIPLIER"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidDateError(DomainError):
    """Raised when a date cannot be parsed for age calculation."""

    def __init__(self, value: object) -> None:
        super().__init__(
            code=ErrorCode.INVALID_DATE,
            message="Invalid date",
        )
        self.value = value


class MissingAgeError(DomainError):
    """Raised when an age-based line item is priced without an age."""

    def __init__(self, line_item_name: str) -> None:
        super().__init__(
            code=ErrorCode.MISSING_AGE,
            message="User age required for age-based pricing",
        )
        self.line_item_name = line_item_name


class MissingMultiplierError(DomainError):
    """Raised when an age-based line item has no multiplier configured."""

    def __init__(self, line_item_name: str) -> None:
        super().__init__(
            code=ErrorCode.MISSING_MULTIPLIER,
            message="Multiplier required for age-based pricing",
        )
        self.line_item_name = line_item_name


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class LineItemNotFoundError(DomainError):
    """Raised when a selected line item does not belong to the event."""

    def __init__(self, line_item_id: str) -> None:
        super().__init__(
            code=ErrorCode.LINE_ITEM_NOT_FOUND,
            message="Line item not found for event",
        )
        self.line_item_id = line_item_id


class RegistrationNotFoundError(DomainError):
    """Raised when a registration is not found."""

    def __init__(self, registration_id: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="Registration not found",
        )
        self.registration_id = registration_id


class InvalidRegistrationIdError(DomainError):
    """Raised when a registration ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_REGISTRATION_ID,
            message="Invalid registration ID format",
        )


class DiscountNotFoundError(DomainError):
    """Raised when a discount does not exist on the registration."""

    def __init__(self, discount_id: str) -> None:
        super().__init__(
            code=ErrorCode.DISCOUNT_NOT_FOUND,
            message="Discount not found",
        )
        self.discount_id = discount_id


class AlreadyRegisteredError(DomainError):
    """Raised when a user already holds a registration for the event."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_REGISTERED,
            message="User is already registered for this event",
        )
        self.event_id = event_id
        self.user_id = user_id


class CancellationNotAllowedError(DomainError):
    """Raised when a paid event registration is cancelled by the registrant."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CANCELLATION_NOT_ALLOWED,
            message="Cannot cancel paid event registration. "
            "Please contact an administrator for refunds.",
        )


class PermissionDeniedError(DomainError):
    """Raised when a user acts on a registration they do not own."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PERMISSION_DENIED,
            message="Not allowed to modify this registration",
        )


class InvalidAmountError(DomainError):
    """Raised when a monetary input or result is negative or too large to store."""

    def __init__(self, amount: object) -> None:
        super().__init__(
            code=ErrorCode.INVALID_AMOUNT,
            message="Amount must be between 0 and 99,999,999.99",
        )
        self.amount = amount


class InvalidQuantityError(DomainError):
    """Raised when a line item quantity is outside the allowed range."""

    def __init__(self, quantity: object) -> None:
        super().__init__(
            code=ErrorCode.INVALID_QUANTITY,
            message="Quantity must be a whole number between 1 and 100",
        )
        self.quantity = quantity


class EventNotOpenError(DomainError):
    """Raised when registering for an event that is not published."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_OPEN,
            message="Event is not open for registration",
        )
        self.event_id = event_id


class EventFullError(DomainError):
    """Raised when an event has no remaining capacity."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_FULL,
            message="Event is at full capacity",
        )
        self.event_id = event_id
