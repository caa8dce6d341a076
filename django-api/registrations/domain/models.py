"""Domain models representing pricing inputs and persisted registration state.

These are pure domain objects with no API input rules.
Django ORM models are in registrations/models.py (persistence layer).
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Self

from registrations.domain.value_objects import (
    Capacity,
    DiscountId,
    EventId,
    LineItemId,
    Money,
    RegistrationId,
)

logger = logging.getLogger(__name__)


class CalculationMethod(str, Enum):
    """How a line item turns its configuration into an amount."""

    FIXED_AMOUNT = "FIXED_AMOUNT"
    AGE_MULTIPLIER = "AGE_MULTIPLIER"
    PERCENTAGE = "PERCENTAGE"

    @classmethod
    def from_value(cls, raw: str) -> Self:
        """Parse a persisted method, falling back to FIXED_AMOUNT."""
        try:
            return cls(raw)
        except ValueError:
            logger.warning("Unknown calculation method %r, pricing as fixed amount", raw)
            return cls.FIXED_AMOUNT


class LineItemType(str, Enum):
    AGE_BASED = "AGE_BASED"
    FIXED = "FIXED"
    OPTIONAL_FIXED = "OPTIONAL_FIXED"

    @classmethod
    def from_value(cls, raw: str) -> Self:
        """Parse a persisted type, falling back to FIXED."""
        try:
            return cls(raw)
        except ValueError:
            logger.warning("Unknown line item type %r, treating as fixed", raw)
            return cls.FIXED


class DiscountType(str, Enum):
    FIXED_AMOUNT = "FIXED_AMOUNT"
    PERCENTAGE = "PERCENTAGE"


class PaymentStatus(str, Enum):
    UNPAID = "UNPAID"
    DEPOSIT_PAID = "DEPOSIT_PAID"
    FULLY_PAID = "FULLY_PAID"


class EventType(str, Enum):
    FREE = "FREE"
    PAID = "PAID"


class EventStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class RegistrationStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class LineItemDefinition:
    """A priceable component of an event registration.

    ``base_amount`` is a flat fee for FIXED_AMOUNT and a percentage value for
    PERCENTAGE. ``multiplier``, ``min_amount`` and ``max_amount`` are only
    read by AGE_MULTIPLIER. ``is_required`` does not affect pricing.
    """

    name: str
    calculation_method: CalculationMethod
    base_amount: Decimal | None = None
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    multiplier: Decimal | None = None
    is_required: bool = False
    line_item_type: LineItemType = LineItemType.FIXED
    id: LineItemId | None = None
    event_id: EventId | None = None
    description: str = ""
    sort_order: int = 0


@dataclass(frozen=True)
class CalculatedLineItem:
    """Snapshot of one line item's resolved amount on one registration."""

    line_item_id: LineItemId | None
    name: str
    amount: Decimal
    quantity: int = 1
    user_age: int | None = None


@dataclass(frozen=True)
class Discount:
    """A discount as entered; percentages are resolved at total time."""

    name: str
    discount_type: DiscountType
    amount: Decimal
    id: DiscountId | None = None


@dataclass(frozen=True)
class BreakdownEntry:
    name: str
    amount: Decimal


@dataclass(frozen=True)
class Breakdown:
    """Itemized receipt lines for line items and resolved discounts."""

    line_items: tuple[BreakdownEntry, ...] = ()
    discounts: tuple[BreakdownEntry, ...] = ()


@dataclass(frozen=True)
class RegistrationTotals:
    subtotal: Decimal
    discount_total: Decimal
    total: Decimal
    breakdown: Breakdown = field(default_factory=Breakdown)


@dataclass(frozen=True)
class DepositBalanceState:
    deposit_due: Decimal
    balance_due: Decimal
    is_deposit_paid: bool
    is_fully_paid: bool


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    title: str
    event_type: EventType
    start_date: date
    deposit_amount: Money | None = None
    currency: str = "USD"
    status: EventStatus = EventStatus.PUBLISHED
    max_attendees: Capacity | None = None

    @property
    def is_open(self) -> bool:
        return self.status == EventStatus.PUBLISHED

    @property
    def requires_deposit(self) -> bool:
        return self.deposit_amount is not None and self.deposit_amount.amount > 0

    @property
    def deposit_required(self) -> Decimal:
        return self.deposit_amount.amount if self.deposit_amount else Decimal("0")


@dataclass(frozen=True)
class Registration:
    """Domain representation of a Registration and its pricing snapshot."""

    id: RegistrationId
    event_id: EventId
    user_id: str
    status: RegistrationStatus
    total_amount: Money
    deposit_paid: Money
    balance_due: Money
    payment_status: PaymentStatus
    created_at: datetime
    line_items: tuple[CalculatedLineItem, ...] = ()
    discounts: tuple[Discount, ...] = ()
    note: str = ""
