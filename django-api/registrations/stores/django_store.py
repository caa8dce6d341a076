"""Django ORM implementation of the RegistrationStore."""

from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal

from django.db import IntegrityError, transaction

from registrations import models
from registrations.domain import (
    CalculatedLineItem,
    CalculationMethod,
    Capacity,
    Discount,
    DiscountId,
    DiscountType,
    Event,
    EventId,
    EventStatus,
    EventType,
    LineItemDefinition,
    LineItemId,
    LineItemType,
    Money,
    PaymentStatus,
    Registration,
    RegistrationId,
    RegistrationStatus,
)
from registrations.domain.errors import AlreadyRegisteredError, EventFullError
from registrations.stores.interfaces import RegistrationStore


def _to_event(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        event_type=EventType(row.event_type),
        start_date=row.start_date,
        deposit_amount=Money(row.deposit_amount) if row.deposit_amount is not None else None,
        currency=row.currency,
        status=EventStatus(row.status),
        max_attendees=Capacity(row.max_attendees) if row.max_attendees is not None else None,
    )


def _to_line_item(row: models.LineItem) -> LineItemDefinition:
    return LineItemDefinition(
        id=LineItemId(row.id),
        event_id=EventId(row.event_id),
        name=row.name,
        description=row.description,
        line_item_type=LineItemType.from_value(row.line_item_type),
        calculation_method=CalculationMethod.from_value(row.calculation_method),
        base_amount=row.base_amount,
        min_amount=row.min_amount,
        max_amount=row.max_amount,
        multiplier=row.multiplier,
        is_required=row.is_required,
        sort_order=row.sort_order,
    )


def _to_discount(row: models.RegistrationDiscount) -> Discount:
    return Discount(
        id=DiscountId(row.id),
        name=row.name,
        discount_type=DiscountType(row.discount_type),
        amount=row.amount,
    )


def _to_registration(row: models.Registration) -> Registration:
    return Registration(
        id=RegistrationId(row.id),
        event_id=EventId(row.event_id),
        user_id=row.user_id,
        status=RegistrationStatus(row.status),
        total_amount=Money(row.total_amount),
        deposit_paid=Money(row.deposit_paid),
        balance_due=Money(row.balance_due),
        payment_status=PaymentStatus(row.payment_status),
        created_at=row.created_at,
        note=row.note,
        line_items=tuple(
            CalculatedLineItem(
                line_item_id=LineItemId(item.line_item_id) if item.line_item_id else None,
                name=item.name,
                amount=item.calculated_amount,
                quantity=item.quantity,
                user_age=item.user_age,
            )
            for item in row.line_items.all()
        ),
        discounts=tuple(_to_discount(d) for d in row.discounts.all()),
    )


class DjangoRegistrationStore(RegistrationStore):
    """PostgreSQL-backed registration store using Django ORM."""

    def _registrations(self):
        return models.Registration.objects.prefetch_related("line_items", "discounts")

    def get_event(self, event_id: EventId) -> Event | None:
        row = models.Event.objects.filter(id=event_id.value).first()
        return _to_event(row) if row else None

    def list_line_items(self, event_id: EventId) -> list[LineItemDefinition]:
        rows = models.LineItem.objects.filter(event_id=event_id.value).order_by("sort_order")
        return [_to_line_item(row) for row in rows]

    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        row = self._registrations().filter(id=registration_id.value).first()
        return _to_registration(row) if row else None

    def find_registration(self, event_id: EventId, user_id: str) -> Registration | None:
        row = self._registrations().filter(event_id=event_id.value, user_id=user_id).first()
        return _to_registration(row) if row else None

    def create_registration(
        self,
        event_id: EventId,
        user_id: str,
        line_items: list[CalculatedLineItem],
        total_amount: Decimal,
        deposit_paid: Decimal,
        balance_due: Decimal,
        payment_status: PaymentStatus,
        note: str = "",
        capacity: Capacity | None = None,
    ) -> Registration:
        try:
            with transaction.atomic():
                if capacity is not None:
                    # Serializes registrations for the event while counting.
                    models.Event.objects.select_for_update().get(id=event_id.value)
                    confirmed = models.Registration.objects.filter(
                        event_id=event_id.value,
                        status=RegistrationStatus.CONFIRMED.value,
                    ).count()
                    if confirmed >= capacity.value:
                        raise EventFullError(str(event_id))

                row = models.Registration.objects.create(
                    event_id=event_id.value,
                    user_id=user_id,
                    status=RegistrationStatus.CONFIRMED.value,
                    total_amount=total_amount,
                    deposit_paid=deposit_paid,
                    balance_due=balance_due,
                    payment_status=payment_status.value,
                    note=note,
                )
                models.RegistrationLineItem.objects.bulk_create(
                    [
                        models.RegistrationLineItem(
                            registration=row,
                            line_item_id=item.line_item_id.value if item.line_item_id else None,
                            name=item.name,
                            quantity=item.quantity,
                            calculated_amount=item.amount,
                            user_age=item.user_age,
                        )
                        for item in line_items
                    ]
                )
        except IntegrityError as exc:
            duplicate = models.Registration.objects.filter(
                event_id=event_id.value, user_id=user_id
            ).exists()
            if not duplicate:
                raise
            raise AlreadyRegisteredError(str(event_id), user_id) from exc
        return self.get_registration(RegistrationId(row.id))

    @contextmanager
    def registration_for_update(
        self, registration_id: RegistrationId
    ) -> Iterator[Registration | None]:
        with transaction.atomic():
            row = (
                self._registrations()
                .select_for_update()
                .filter(id=registration_id.value)
                .first()
            )
            yield _to_registration(row) if row else None

    def update_payment_state(
        self,
        registration_id: RegistrationId,
        total_amount: Decimal,
        deposit_paid: Decimal,
        balance_due: Decimal,
        payment_status: PaymentStatus,
    ) -> Registration:
        models.Registration.objects.filter(id=registration_id.value).update(
            total_amount=total_amount,
            deposit_paid=deposit_paid,
            balance_due=balance_due,
            payment_status=payment_status.value,
        )
        return self.get_registration(registration_id)

    def add_discount(self, registration_id: RegistrationId, discount: Discount) -> Discount:
        row = models.RegistrationDiscount.objects.create(
            registration_id=registration_id.value,
            name=discount.name,
            discount_type=discount.discount_type.value,
            amount=discount.amount,
        )
        return _to_discount(row)

    def remove_discount(self, registration_id: RegistrationId, discount_id: DiscountId) -> bool:
        deleted, _ = models.RegistrationDiscount.objects.filter(
            id=discount_id.value, registration_id=registration_id.value
        ).delete()
        return deleted > 0

    def set_status(
        self, registration_id: RegistrationId, status: RegistrationStatus
    ) -> Registration:
        models.Registration.objects.filter(id=registration_id.value).update(status=status.value)
        return self.get_registration(registration_id)
