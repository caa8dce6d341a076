"""Event pricing and registration-total calculations.

Pure functions over domain value types. Nothing here touches the database,
the cache or the request, so every function is safe to call from anywhere.

Percentages show up in two places and are resolved differently:

- A PERCENTAGE *line item* prices to its raw percentage value. This module
  never decides what that percentage is a percentage of.
- A PERCENTAGE *discount* is resolved against the registration subtotal
  inside ``calculate_registration_total``.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from registrations.domain.errors import (
    InvalidDateError,
    MissingAgeError,
    MissingMultiplierError,
)
from registrations.domain.models import (
    Breakdown,
    BreakdownEntry,
    CalculatedLineItem,
    CalculationMethod,
    DepositBalanceState,
    Discount,
    DiscountType,
    LineItemDefinition,
    PaymentStatus,
    RegistrationTotals,
)

logger = logging.getLogger(__name__)

Number = Decimal | int | float | str

ZERO = Decimal("0")
CENT = Decimal("0.01")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "CA$",
    "AUD": "A$",
    "NZD": "NZ$",
    "JPY": "¥",
    "KRW": "₩",
}

# Currencies without a minor unit.
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "KRW"})


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric input to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_currency(value: Number) -> Decimal:
    """Return the value rounded to cents using half-up rounding."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _to_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(value).date()
        except ValueError as exc:
            raise InvalidDateError(value) from exc
    raise InvalidDateError(value)


def calculate_age(
    date_of_birth: date | datetime | str,
    reference_date: date | datetime | str | None = None,
) -> int:
    """Return age in whole years at ``reference_date`` (today by default).

    Raises:
        InvalidDateError: If either date is not a date or ISO-8601 string.
    """
    dob = _to_date(date_of_birth)
    ref = _to_date(reference_date) if reference_date is not None else date.today()

    age = ref.year - dob.year
    if (ref.month, ref.day) < (dob.month, dob.day):
        age -= 1
    return age


def calculate_line_item_amount(
    line_item: LineItemDefinition,
    age: int | None = None,
    quantity: int = 1,
) -> Decimal:
    """Return the line item's contribution for one subject.

    AGE_MULTIPLIER computes ``age * multiplier`` and clamps it to
    ``[min_amount, max_amount]``, min first. FIXED_AMOUNT and any
    unrecognised method use ``base_amount``. PERCENTAGE returns the raw
    percentage. Absent amounts count as zero. The result is scaled by
    ``quantity``.

    Raises:
        MissingAgeError: If an AGE_MULTIPLIER item is priced without an age.
        MissingMultiplierError: If an AGE_MULTIPLIER item has no multiplier.
    """
    match line_item.calculation_method:
        case CalculationMethod.AGE_MULTIPLIER:
            if age is None:
                raise MissingAgeError(line_item.name)
            if line_item.multiplier is None:
                raise MissingMultiplierError(line_item.name)

            amount = to_decimal(age) * to_decimal(line_item.multiplier)
            if line_item.min_amount is not None:
                amount = max(amount, to_decimal(line_item.min_amount))
            if line_item.max_amount is not None:
                amount = min(amount, to_decimal(line_item.max_amount))
        case CalculationMethod.PERCENTAGE:
            amount = _or_zero(line_item.base_amount)
        case CalculationMethod.FIXED_AMOUNT:
            amount = _or_zero(line_item.base_amount)
        case _:
            amount = _or_zero(line_item.base_amount)

    return amount * to_decimal(quantity)


def _or_zero(value: Number | None) -> Decimal:
    return ZERO if value is None else to_decimal(value)


def resolve_discount(discount: Discount, subtotal: Decimal) -> Decimal:
    """Return the currency amount a discount takes off ``subtotal``.

    Unknown discount types and unparsable amounts resolve to zero so one
    bad entry never blocks an invoice.
    """
    try:
        value = to_decimal(discount.amount)
    except (InvalidOperation, TypeError, ValueError):
        logger.warning("Ignoring discount %r with malformed amount", discount.name)
        return ZERO

    match discount.discount_type:
        case DiscountType.FIXED_AMOUNT:
            return value
        case DiscountType.PERCENTAGE:
            return subtotal * (value / Decimal(100))
        case _:
            logger.warning(
                "Ignoring discount %r with unknown type %r",
                discount.name,
                discount.discount_type,
            )
            return ZERO


def calculate_registration_total(
    line_items: Iterable[CalculatedLineItem],
    discounts: Iterable[Discount] = (),
) -> RegistrationTotals:
    """Aggregate line items and discounts into subtotal, discount and total.

    Every percentage discount is taken off the original subtotal, so
    discounts never compound. The total is floored at zero.
    """
    items = tuple(line_items)
    subtotal = sum((to_decimal(item.amount) for item in items), ZERO)

    discount_entries = tuple(
        BreakdownEntry(name=discount.name, amount=resolve_discount(discount, subtotal))
        for discount in discounts
    )
    discount_total = sum((entry.amount for entry in discount_entries), ZERO)

    return RegistrationTotals(
        subtotal=subtotal,
        discount_total=discount_total,
        total=max(ZERO, subtotal - discount_total),
        breakdown=Breakdown(
            line_items=tuple(
                BreakdownEntry(name=item.name, amount=to_decimal(item.amount))
                for item in items
            ),
            discounts=discount_entries,
        ),
    )


def calculate_deposit_and_balance(
    total_amount: Number,
    deposit_required: Number,
    deposit_paid: Number = 0,
) -> DepositBalanceState:
    """Split what is still owed into deposit due and balance due.

    Inputs are not validated; negative totals or deposits are the caller's
    responsibility.
    """
    total = to_decimal(total_amount)
    required = to_decimal(deposit_required)
    paid = to_decimal(deposit_paid)

    return DepositBalanceState(
        deposit_due=max(ZERO, required - paid),
        balance_due=max(ZERO, total - paid),
        is_deposit_paid=paid >= required,
        is_fully_paid=paid >= total,
    )


def get_payment_status(total_amount: Number, deposit_paid: Number) -> PaymentStatus:
    paid = to_decimal(deposit_paid)
    # Checked before FULLY_PAID so a free registration with nothing paid is UNPAID.
    if paid == 0:
        return PaymentStatus.UNPAID
    if paid >= to_decimal(total_amount):
        return PaymentStatus.FULLY_PAID
    return PaymentStatus.DEPOSIT_PAID


def format_currency(amount: Number, currency: str = "USD") -> str:
    """Format an amount for display, e.g. ``$2,100.00``.

    Zero-decimal currencies round half-up to whole units (``¥2,100``).
    Codes without a known symbol are prefixed with the code itself.
    """
    code = currency.upper()
    if code in ZERO_DECIMAL_CURRENCIES:
        value = to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        digits = f"{abs(value):,.0f}"
    else:
        value = round_currency(amount)
        digits = f"{abs(value):,.2f}"
    sign = "-" if value < 0 else ""

    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {digits}"
    return f"{sign}{symbol}{digits}"
