"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from decimal import Decimal

from registrations.domain import (
    CalculatedLineItem,
    Capacity,
    Discount,
    DiscountId,
    Event,
    EventId,
    LineItemDefinition,
    PaymentStatus,
    Registration,
    RegistrationId,
    RegistrationStatus,
)


class RegistrationStore(ABC):
    """Interface for event, line item and registration persistence."""

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def list_line_items(self, event_id: EventId) -> list[LineItemDefinition]:
        """Return the event's line item definitions ordered by sort_order."""
        ...

    @abstractmethod
    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        """Return a registration with its line items and discounts, or None."""
        ...

    @abstractmethod
    def find_registration(self, event_id: EventId, user_id: str) -> Registration | None:
        """Return the user's registration for an event, or None."""
        ...

    @abstractmethod
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
        """Persist a confirmed registration and its line item snapshot.

        When capacity is given, the count of confirmed registrations for the
        event is checked in the same transaction as the insert.

        Raises:
            AlreadyRegisteredError: If the user already holds a registration.
            EventFullError: If the event already has capacity confirmed registrations.
        """
        ...

    @abstractmethod
    def registration_for_update(
        self, registration_id: RegistrationId
    ) -> AbstractContextManager[Registration | None]:
        """Lock a registration for a read-modify-write.

        Yields the current registration, or None. Writes made inside the block
        commit together and concurrent updates of the same registration wait
        for it to finish. An exception rolls all of them back.
        """
        ...

    @abstractmethod
    def update_payment_state(
        self,
        registration_id: RegistrationId,
        total_amount: Decimal,
        deposit_paid: Decimal,
        balance_due: Decimal,
        payment_status: PaymentStatus,
    ) -> Registration:
        """Overwrite the registration's derived payment fields."""
        ...

    @abstractmethod
    def add_discount(self, registration_id: RegistrationId, discount: Discount) -> Discount:
        """Attach a discount to a registration and return it with its ID."""
        ...

    @abstractmethod
    def remove_discount(self, registration_id: RegistrationId, discount_id: DiscountId) -> bool:
        """Delete a discount. Return False if it is not on the registration."""
        ...

    @abstractmethod
    def set_status(
        self, registration_id: RegistrationId, status: RegistrationStatus
    ) -> Registration:
        """Change the registration status."""
        ...
