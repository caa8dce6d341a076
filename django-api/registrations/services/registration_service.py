"""Registration service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Pricing math is delegated to registrations.domain.pricing; this layer
decides which line items apply, feeds the engine and persists its results.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation

from registrations.domain import (
    MAX_AMOUNT,
    CalculatedLineItem,
    Discount,
    DiscountId,
    DiscountType,
    Event,
    EventId,
    EventType,
    LineItemDefinition,
    LineItemId,
    LineItemType,
    Quantity,
    Registration,
    RegistrationId,
    RegistrationStatus,
)
from registrations.domain.errors import (
    AlreadyRegisteredError,
    CancellationNotAllowedError,
    DiscountNotFoundError,
    DomainError,
    ErrorCode,
    EventNotFoundError,
    EventNotOpenError,
    InvalidAmountError,
    InvalidEventIdError,
    InvalidQuantityError,
    InvalidRegistrationIdError,
    LineItemNotFoundError,
    PermissionDeniedError,
    RegistrationNotFoundError,
)
from registrations.domain.models import DepositBalanceState, RegistrationTotals
from registrations.domain.pricing import (
    calculate_age,
    calculate_deposit_and_balance,
    calculate_line_item_amount,
    calculate_registration_total,
    format_currency,
    get_payment_status,
    round_currency,
    to_decimal,
)
from registrations.stores.interfaces import RegistrationStore

logger = logging.getLogger(__name__)

MAX_PERCENTAGE = Decimal("100")


@dataclass(frozen=True)
class SkippedLineItem:
    """A line item left out of a quote because it could not be priced."""

    line_item_id: LineItemId | None
    name: str
    code: ErrorCode
    message: str


@dataclass(frozen=True)
class Quote:
    event: Event
    age: int | None
    items: tuple[CalculatedLineItem, ...]
    totals: RegistrationTotals
    deposit: DepositBalanceState
    skipped: tuple[SkippedLineItem, ...] = ()


@dataclass(frozen=True)
class Invoice:
    registration: Registration
    event: Event
    totals: RegistrationTotals
    deposit: DepositBalanceState
    formatted: dict[str, str] = field(default_factory=dict)


class RegistrationService:
    """Service for pricing, registering and settling event registrations."""

    def __init__(self, store: RegistrationStore) -> None:
        self._store = store

    def list_line_items(self, event_id: str) -> list[LineItemDefinition]:
        """Return the event's line item definitions.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._get_event(event_id)
        return self._store.list_line_items(event.id)

    def quote(
        self,
        event_id: str,
        date_of_birth: date | str | None = None,
        selections: Mapping[str, int] | None = None,
        discounts: Iterable[Discount] = (),
    ) -> Quote:
        """Price a prospective registration without persisting it.

        Line items that fail to price are logged and reported in
        ``Quote.skipped`` instead of failing the whole quote.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            LineItemNotFoundError: If a selection is not one of the event's items.
            InvalidQuantityError: If a selected quantity is out of range.
            InvalidDateError: If date_of_birth cannot be parsed.
            InvalidAmountError: If a discount amount or the totals are out of range.
        """
        event = self._get_event(event_id)
        checked = [
            self._discount(d.name, d.discount_type, d.amount) for d in discounts
        ]
        age = self._age_at_event(event, date_of_birth)

        items: list[CalculatedLineItem] = []
        skipped: list[SkippedLineItem] = []
        for definition, quantity in self._select(event, selections):
            try:
                items.append(self._price(definition, age, quantity))
            except DomainError as exc:
                logger.warning(
                    "Skipping line item %s in quote for event %s: %s",
                    definition.id,
                    event.id,
                    exc.code.value,
                )
                skipped.append(
                    SkippedLineItem(
                        line_item_id=definition.id,
                        name=definition.name,
                        code=exc.code,
                        message=exc.message,
                    )
                )

        totals = self._totals(items, checked)
        return Quote(
            event=event,
            age=age,
            items=tuple(items),
            totals=totals,
            deposit=calculate_deposit_and_balance(totals.total, event.deposit_required),
            skipped=tuple(skipped),
        )

    def register(
        self,
        event_id: str,
        user_id: str,
        date_of_birth: date | str | None = None,
        selections: Mapping[str, int] | None = None,
        deposit_paid: Decimal | int | str = 0,
        note: str = "",
    ) -> Registration:
        """Create a confirmed registration with a priced line item snapshot.

        Unlike ``quote``, any line item that cannot be priced aborts the
        registration.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            EventNotOpenError: If the event is not published.
            EventFullError: If the event has reached its maximum attendees.
            AlreadyRegisteredError: If the user is already registered.
            LineItemNotFoundError: If a selection is not one of the event's items.
            InvalidQuantityError: If a selected quantity is out of range.
            InvalidAmountError: If deposit_paid or a resulting amount is out of range.
            MissingAgeError: If an age-based item is selected without a date of birth.
            MissingMultiplierError: If an age-based item has no multiplier.
        """
        event = self._get_event(event_id)
        if not event.is_open:
            raise EventNotOpenError(str(event.id))
        paid = self._validate_amount(deposit_paid)
        if self._store.find_registration(event.id, user_id) is not None:
            raise AlreadyRegisteredError(str(event.id), user_id)

        age = self._age_at_event(event, date_of_birth)
        items = [
            self._price(definition, age, quantity)
            for definition, quantity in self._select(event, selections)
        ]

        total = round_currency(self._totals(items).total)
        state = calculate_deposit_and_balance(total, event.deposit_required, paid)
        registration = self._store.create_registration(
            event_id=event.id,
            user_id=user_id,
            line_items=items,
            total_amount=total,
            deposit_paid=paid,
            balance_due=state.balance_due,
            payment_status=get_payment_status(total, paid),
            note=note,
            capacity=event.max_attendees,
        )
        logger.info(
            "Registered user %s for event %s: total=%s paid=%s",
            user_id,
            event.id,
            total,
            paid,
        )
        return registration

    def get_registration(self, registration_id: str) -> Registration:
        """Return a registration by ID.

        Raises:
            InvalidRegistrationIdError: If the registration_id is not a valid UUID.
            RegistrationNotFoundError: If the registration does not exist.
        """
        registration = self._store.get_registration(self._parse_registration_id(registration_id))
        if registration is None:
            raise RegistrationNotFoundError(registration_id)
        return registration

    def apply_discount(
        self,
        registration_id: str,
        name: str,
        discount_type: DiscountType | str,
        amount: Decimal | int | str,
    ) -> Registration:
        """Attach a discount and recompute the registration's totals.

        The insert and the recomputed totals are written together.

        Raises:
            InvalidRegistrationIdError: If the registration_id is not a valid UUID.
            RegistrationNotFoundError: If the registration does not exist.
            InvalidAmountError: If amount is negative, too large, or a percentage over 100.
        """
        discount = self._discount(name, discount_type, amount)
        with self._locked(registration_id) as registration:
            stored = self._store.add_discount(registration.id, discount)
            updated = self._recalculate(registration.id)
        logger.info(
            "Applied %s discount %s to registration %s",
            stored.discount_type.value,
            stored.id,
            registration.id,
        )
        return updated

    def remove_discount(self, registration_id: str, discount_id: str) -> Registration:
        """Remove a discount and recompute the registration's totals.

        Raises:
            InvalidRegistrationIdError: If the registration_id is not a valid UUID.
            RegistrationNotFoundError: If the registration does not exist.
            DiscountNotFoundError: If the discount is not on the registration.
        """
        with self._locked(registration_id) as registration:
            try:
                parsed = DiscountId.from_string(discount_id)
            except (ValueError, TypeError, AttributeError) as exc:
                raise DiscountNotFoundError(discount_id) from exc

            if not self._store.remove_discount(registration.id, parsed):
                raise DiscountNotFoundError(discount_id)
            updated = self._recalculate(registration.id)
        logger.info("Removed discount %s from registration %s", parsed, registration.id)
        return updated

    def record_payment(
        self, registration_id: str, amount: Decimal | int | str
    ) -> Registration:
        """Add a payment to the amount paid and re-derive balance and status.

        The amount already paid is read under the registration lock, so
        concurrent payments accumulate.

        Raises:
            InvalidRegistrationIdError: If the registration_id is not a valid UUID.
            RegistrationNotFoundError: If the registration does not exist.
            InvalidAmountError: If amount is negative or the new paid total is too large.
        """
        value = self._validate_amount(amount)
        with self._locked(registration_id) as registration:
            event = self._event_for(registration)
            total = registration.total_amount.amount
            paid = self._storable(registration.deposit_paid.amount + value)
            state = calculate_deposit_and_balance(total, event.deposit_required, paid)
            updated = self._store.update_payment_state(
                registration.id,
                total_amount=total,
                deposit_paid=paid,
                balance_due=state.balance_due,
                payment_status=get_payment_status(total, paid),
            )
        logger.info(
            "Recorded payment of %s on registration %s (status=%s)",
            value,
            registration.id,
            updated.payment_status.value,
        )
        return updated

    def cancel(self, registration_id: str, user_id: str) -> Registration:
        """Cancel the user's own registration for a free event.

        Raises:
            InvalidRegistrationIdError: If the registration_id is not a valid UUID.
            RegistrationNotFoundError: If the registration does not exist.
            PermissionDeniedError: If the user does not own the registration.
            CancellationNotAllowedError: If the event is a paid event.
        """
        registration = self.get_registration(registration_id)
        if registration.user_id != user_id:
            raise PermissionDeniedError()

        event = self._event_for(registration)
        if event.event_type == EventType.PAID:
            raise CancellationNotAllowedError()

        cancelled = self._store.set_status(registration.id, RegistrationStatus.CANCELLED)
        logger.info("Cancelled registration %s for event %s", registration.id, event.id)
        return cancelled

    def get_invoice(self, registration_id: str) -> Invoice:
        """Return an itemized invoice for a registration.

        Raises:
            InvalidRegistrationIdError: If the registration_id is not a valid UUID.
            RegistrationNotFoundError: If the registration does not exist.
        """
        registration = self.get_registration(registration_id)
        event = self._event_for(registration)
        totals = calculate_registration_total(registration.line_items, registration.discounts)
        deposit = calculate_deposit_and_balance(
            registration.total_amount.amount,
            event.deposit_required,
            registration.deposit_paid.amount,
        )

        amounts = {
            "subtotal": totals.subtotal,
            "discount_total": totals.discount_total,
            "total": registration.total_amount.amount,
            "deposit_paid": registration.deposit_paid.amount,
            "balance_due": registration.balance_due.amount,
            "deposit_due": deposit.deposit_due,
        }
        return Invoice(
            registration=registration,
            event=event,
            totals=totals,
            deposit=deposit,
            formatted={
                key: format_currency(value, event.currency) for key, value in amounts.items()
            },
        )

    def _get_event(self, event_id: str) -> Event:
        try:
            parsed = EventId.from_string(event_id)
        except (ValueError, TypeError, AttributeError) as exc:
            raise InvalidEventIdError() from exc

        event = self._store.get_event(parsed)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def _event_for(self, registration: Registration) -> Event:
        event = self._store.get_event(registration.event_id)
        if event is None:
            raise EventNotFoundError(str(registration.event_id))
        return event

    def _parse_registration_id(self, registration_id: str) -> RegistrationId:
        try:
            return RegistrationId.from_string(registration_id)
        except (ValueError, TypeError, AttributeError) as exc:
            raise InvalidRegistrationIdError() from exc

    @contextmanager
    def _locked(self, registration_id: str) -> Iterator[Registration]:
        parsed = self._parse_registration_id(registration_id)
        with self._store.registration_for_update(parsed) as registration:
            if registration is None:
                raise RegistrationNotFoundError(registration_id)
            yield registration

    def _select(
        self, event: Event, selections: Mapping[str, int] | None
    ) -> list[tuple[LineItemDefinition, Quantity]]:
        """Resolve selections to definitions; required items are always included."""
        wanted = {
            str(key): self._quantity(raw) for key, raw in (selections or {}).items()
        }
        definitions = self._store.list_line_items(event.id)

        known = {str(definition.id) for definition in definitions}
        for line_item_id in wanted:
            if line_item_id not in known:
                raise LineItemNotFoundError(line_item_id)

        chosen = []
        for definition in definitions:
            key = str(definition.id)
            if definition.is_required or key in wanted:
                chosen.append((definition, wanted.get(key, Quantity(1))))
        return chosen

    def _quantity(self, raw: int) -> Quantity:
        try:
            return Quantity(raw)
        except ValueError as exc:
            raise InvalidQuantityError(raw) from exc

    def _age_at_event(self, event: Event, date_of_birth: date | str | None) -> int | None:
        if date_of_birth is None:
            return None
        return calculate_age(date_of_birth, event.start_date)

    def _price(
        self, definition: LineItemDefinition, age: int | None, quantity: Quantity
    ) -> CalculatedLineItem:
        amount = calculate_line_item_amount(definition, age, quantity.value)
        return CalculatedLineItem(
            line_item_id=definition.id,
            name=definition.name,
            amount=self._storable(round_currency(amount)),
            quantity=quantity.value,
            user_age=age if definition.line_item_type == LineItemType.AGE_BASED else None,
        )

    def _totals(
        self, items: Iterable[CalculatedLineItem], discounts: Iterable[Discount] = ()
    ) -> RegistrationTotals:
        totals = calculate_registration_total(items, discounts)
        for value in (totals.subtotal, totals.discount_total, totals.total):
            self._storable(value)
        return totals

    def _discount(
        self, name: str, discount_type: DiscountType | str, amount: Decimal | int | str
    ) -> Discount:
        kind = DiscountType(discount_type)
        value = self._validate_amount(amount)
        if kind == DiscountType.PERCENTAGE and value > MAX_PERCENTAGE:
            raise InvalidAmountError(amount)
        return Discount(name=name, discount_type=kind, amount=value)

    def _validate_amount(self, amount: Decimal | int | str) -> Decimal:
        try:
            value = to_decimal(amount)
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise InvalidAmountError(amount) from exc
        if not value.is_finite():
            raise InvalidAmountError(amount)
        return self._storable(value)

    def _storable(self, value: Decimal) -> Decimal:
        """Return value if a DecimalField(10, 2) column can hold it."""
        if value < 0 or value > MAX_AMOUNT:
            raise InvalidAmountError(value)
        return value

    def _recalculate(self, registration_id: RegistrationId) -> Registration:
        registration = self._store.get_registration(registration_id)
        if registration is None:
            raise RegistrationNotFoundError(str(registration_id))
        event = self._event_for(registration)

        totals = self._totals(registration.line_items, registration.discounts)
        total = round_currency(totals.total)
        paid = registration.deposit_paid.amount
        state = calculate_deposit_and_balance(total, event.deposit_required, paid)
        return self._store.update_payment_state(
            registration.id,
            total_amount=total,
            deposit_paid=paid,
            balance_due=state.balance_due,
            payment_status=get_payment_status(total, paid),
        )
