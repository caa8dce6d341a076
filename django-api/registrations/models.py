"""Django ORM models (persistence layer).

These models handle database concerns. Pricing logic lives in domain/pricing.py.
"""

import uuid

from django.db import models

from registrations.domain.models import (
    CalculationMethod,
    DiscountType,
    EventStatus,
    EventType,
    LineItemType,
    PaymentStatus,
    RegistrationStatus,
)


def _choices(enum_cls) -> list[tuple[str, str]]:
    return [(member.value, member.value.replace("_", " ").title()) for member in enum_cls]


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    event_type = models.CharField(
        max_length=20, choices=_choices(EventType), default=EventType.PAID.value
    )
    start_date = models.DateField()
    deposit_amount = models.DecimalField(
        max_digits=10, decimal_places=2, blank=True, null=True
    )
    currency = models.CharField(max_length=3, default="USD")
    status = models.CharField(
        max_length=20, choices=_choices(EventStatus), default=EventStatus.DRAFT.value
    )
    max_attendees = models.PositiveIntegerField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_date"]
        indexes = [
            models.Index(fields=["start_date"], name="event_start_date_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class LineItem(models.Model):
    """Persistence model for an event's priceable line item definitions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="line_items")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    line_item_type = models.CharField(
        max_length=20, choices=_choices(LineItemType), default=LineItemType.FIXED.value
    )
    calculation_method = models.CharField(
        max_length=20,
        choices=_choices(CalculationMethod),
        default=CalculationMethod.FIXED_AMOUNT.value,
    )
    base_amount = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    min_amount = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    max_amount = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    multiplier = models.DecimalField(max_digits=10, decimal_places=4, blank=True, null=True)
    is_required = models.BooleanField(default=False)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["sort_order"]
        indexes = [
            models.Index(fields=["event", "sort_order"], name="line_item_event_sort_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.event.title} - {self.name}"


class Registration(models.Model):
    """Persistence model for a user's registration to an event."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    user_id = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20,
        choices=_choices(RegistrationStatus),
        default=RegistrationStatus.CONFIRMED.value,
    )
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    deposit_paid = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    balance_due = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    payment_status = models.CharField(
        max_length=20,
        choices=_choices(PaymentStatus),
        default=PaymentStatus.UNPAID.value,
    )
    note = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user_id"], name="unique_registration_per_user"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} - {self.event.title}"


class RegistrationLineItem(models.Model):
    """Snapshot of a line item's calculated amount at registration time."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    registration = models.ForeignKey(
        Registration, on_delete=models.CASCADE, related_name="line_items"
    )
    line_item = models.ForeignKey(
        LineItem, on_delete=models.SET_NULL, null=True, related_name="registration_line_items"
    )
    name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    calculated_amount = models.DecimalField(max_digits=10, decimal_places=2)
    user_age = models.PositiveIntegerField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.name} - {self.calculated_amount}"


class RegistrationDiscount(models.Model):
    """A discount applied to a registration, stored as entered."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    registration = models.ForeignKey(
        Registration, on_delete=models.CASCADE, related_name="discounts"
    )
    name = models.CharField(max_length=255)
    discount_type = models.CharField(max_length=20, choices=_choices(DiscountType))
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.name} ({self.discount_type})"
