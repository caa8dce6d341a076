from registrations.domain.models import (
    CalculatedLineItem,
    CalculationMethod,
    Discount,
    DiscountType,
    Event,
    EventStatus,
    EventType,
    LineItemDefinition,
    LineItemType,
    PaymentStatus,
    Registration,
    RegistrationStatus,
)
from registrations.domain.value_objects import (
    MAX_AMOUNT,
    MAX_QUANTITY,
    Capacity,
    DiscountId,
    EventId,
    LineItemId,
    Money,
    Quantity,
    RegistrationId,
)

__all__ = [
    "Event",
    "LineItemDefinition",
    "CalculatedLineItem",
    "Discount",
    "Registration",
    "CalculationMethod",
    "DiscountType",
    "EventStatus",
    "EventType",
    "LineItemType",
    "PaymentStatus",
    "RegistrationStatus",
    "EventId",
    "LineItemId",
    "RegistrationId",
    "DiscountId",
    "Money",
    "Quantity",
    "Capacity",
    "MAX_AMOUNT",
    "MAX_QUANTITY",
]
