"""Pytest configuration and shared fixtures."""

import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from rest_framework.test import APIClient

from registrations.domain import (
    CalculationMethod,
    Capacity,
    DiscountId,
    Event,
    EventId,
    EventStatus,
    EventType,
    LineItemDefinition,
    LineItemId,
    LineItemType,
    Money,
    Registration,
    RegistrationId,
    RegistrationStatus,
)
from registrations.domain.errors import AlreadyRegisteredError, EventFullError
from registrations.services import RegistrationService
from registrations.stores.interfaces import RegistrationStore


class InMemoryRegistrationStore(RegistrationStore):
    """Dict-backed store for service tests."""

    def __init__(self) -> None:
        self.events: dict[EventId, Event] = {}
        self.line_items: dict[EventId, list[LineItemDefinition]] = {}
        self.registrations: dict[RegistrationId, Registration] = {}
        self._lock = threading.RLock()

    def add_event(self, event: Event, line_items=()) -> Event:
        self.events[event.id] = event
        self.line_items[event.id] = list(line_items)
        return event

    def get_event(self, event_id):
        return self.events.get(event_id)

    def list_line_items(self, event_id):
        return sorted(self.line_items.get(event_id, []), key=lambda item: item.sort_order)

    def get_registration(self, registration_id):
        return self.registrations.get(registration_id)

    def find_registration(self, event_id, user_id):
        for registration in self.registrations.values():
            if registration.event_id == event_id and registration.user_id == user_id:
                return registration
        return None

    def create_registration(
        self,
        event_id,
        user_id,
        line_items,
        total_amount,
        deposit_paid,
        balance_due,
        payment_status,
        note="",
        capacity=None,
    ):
        if self.find_registration(event_id, user_id) is not None:
            raise AlreadyRegisteredError(str(event_id), user_id)
        if capacity is not None:
            confirmed = [
                r
                for r in self.registrations.values()
                if r.event_id == event_id and r.status is RegistrationStatus.CONFIRMED
            ]
            if len(confirmed) >= capacity.value:
                raise EventFullError(str(event_id))
        registration = Registration(
            id=RegistrationId(uuid4()),
            event_id=event_id,
            user_id=user_id,
            status=RegistrationStatus.CONFIRMED,
            total_amount=Money(total_amount),
            deposit_paid=Money(deposit_paid),
            balance_due=Money(balance_due),
            payment_status=payment_status,
            created_at=datetime.now(timezone.utc),
            line_items=tuple(line_items),
            note=note,
        )
        self.registrations[registration.id] = registration
        return registration

    @contextmanager
    def registration_for_update(self, registration_id):
        with self._lock:
            snapshot = dict(self.registrations)
            try:
                yield self.registrations.get(registration_id)
            except Exception:
                self.registrations = snapshot
                raise

    def update_payment_state(
        self, registration_id, total_amount, deposit_paid, balance_due, payment_status
    ):
        updated = replace(
            self.registrations[registration_id],
            total_amount=Money(total_amount),
            deposit_paid=Money(deposit_paid),
            balance_due=Money(balance_due),
            payment_status=payment_status,
        )
        self.registrations[registration_id] = updated
        return updated

    def add_discount(self, registration_id, discount):
        stored = replace(discount, id=DiscountId(uuid4()))
        registration = self.registrations[registration_id]
        self.registrations[registration_id] = replace(
            registration, discounts=registration.discounts + (stored,)
        )
        return stored

    def remove_discount(self, registration_id, discount_id):
        registration = self.registrations[registration_id]
        remaining = tuple(d for d in registration.discounts if d.id != discount_id)
        if len(remaining) == len(registration.discounts):
            return False
        self.registrations[registration_id] = replace(registration, discounts=remaining)
        return True

    def set_status(self, registration_id, status):
        updated = replace(self.registrations[registration_id], status=status)
        self.registrations[registration_id] = updated
        return updated


def dues_item(**overrides) -> LineItemDefinition:
    fields = {
        "id": LineItemId(uuid4()),
        "name": "Dues",
        "line_item_type": LineItemType.AGE_BASED,
        "calculation_method": CalculationMethod.AGE_MULTIPLIER,
        "multiplier": Decimal("60"),
        "min_amount": Decimal("1800"),
        "max_amount": Decimal("3600"),
        "is_required": True,
        "sort_order": 1,
    }
    fields.update(overrides)
    return LineItemDefinition(**fields)


def rv_item(**overrides) -> LineItemDefinition:
    fields = {
        "id": LineItemId(uuid4()),
        "name": "RV Supplement",
        "line_item_type": LineItemType.OPTIONAL_FIXED,
        "calculation_method": CalculationMethod.FIXED_AMOUNT,
        "base_amount": Decimal("550"),
        "sort_order": 2,
    }
    fields.update(overrides)
    return LineItemDefinition(**fields)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def store() -> InMemoryRegistrationStore:
    return InMemoryRegistrationStore()


@pytest.fixture
def service(store) -> RegistrationService:
    return RegistrationService(store)


@pytest.fixture
def paid_event(store) -> Event:
    event = Event(
        id=EventId(uuid4()),
        title="Summer Burn",
        event_type=EventType.PAID,
        start_date=date(2025, 6, 1),
        deposit_amount=Money(Decimal("500")),
    )
    store.add_event(event, [rv_item(), dues_item()])
    return event


@pytest.fixture
def free_event(store) -> Event:
    event = Event(
        id=EventId(uuid4()),
        title="Potluck",
        event_type=EventType.FREE,
        start_date=date(2025, 7, 4),
    )
    store.add_event(event)
    return event


@pytest.fixture
def capped_event(store) -> Event:
    """A free event with room for a single attendee."""
    event = Event(
        id=EventId(uuid4()),
        title="Workshop",
        event_type=EventType.FREE,
        start_date=date(2025, 8, 9),
        max_attendees=Capacity(1),
    )
    store.add_event(event)
    return event


@pytest.fixture
def line_items(store, paid_event) -> dict[str, LineItemDefinition]:
    return {item.name: item for item in store.list_line_items(paid_event.id)}


@pytest.fixture
def registration(service, paid_event) -> Registration:
    """A paid-event registration aged 35 at the event: dues of 2100, 500 paid."""
    return service.register(
        str(paid_event.id),
        user_id="user-1",
        date_of_birth="1990-01-15",
        deposit_paid=500,
    )


@pytest.fixture
def db_paid_event(db):
    from registrations import models

    event = models.Event.objects.create(
        title="Summer Burn",
        event_type=EventType.PAID.value,
        start_date=date(2025, 6, 1),
        status=EventStatus.PUBLISHED.value,
        deposit_amount=Decimal("500.00"),
    )
    models.LineItem.objects.create(
        event=event,
        name="Dues",
        line_item_type=LineItemType.AGE_BASED.value,
        calculation_method=CalculationMethod.AGE_MULTIPLIER.value,
        multiplier=Decimal("60"),
        min_amount=Decimal("1800.00"),
        max_amount=Decimal("3600.00"),
        is_required=True,
        sort_order=1,
    )
    models.LineItem.objects.create(
        event=event,
        name="RV Supplement",
        line_item_type=LineItemType.OPTIONAL_FIXED.value,
        calculation_method=CalculationMethod.FIXED_AMOUNT.value,
        base_amount=Decimal("550.00"),
        sort_order=2,
    )
    return event


@pytest.fixture
def db_free_event(db):
    from registrations import models

    return models.Event.objects.create(
        title="Potluck",
        event_type=EventType.FREE.value,
        start_date=date(2025, 7, 4),
        status=EventStatus.PUBLISHED.value,
    )

