"""Unit tests for the pricing engine.

Pure functions only; no database or cache involved.
Run with: pytest tests/test_pricing.py -v
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from registrations.domain import (
    CalculatedLineItem,
    CalculationMethod,
    Discount,
    DiscountType,
    LineItemDefinition,
    PaymentStatus,
)
from registrations.domain.errors import (
    InvalidDateError,
    MissingAgeError,
    MissingMultiplierError,
)
from registrations.domain.pricing import (
    calculate_age,
    calculate_deposit_and_balance,
    calculate_line_item_amount,
    calculate_registration_total,
    format_currency,
    get_payment_status,
)


def age_based(**overrides) -> LineItemDefinition:
    fields = {
        "name": "Dues",
        "calculation_method": CalculationMethod.AGE_MULTIPLIER,
        "multiplier": Decimal("60"),
        "min_amount": Decimal("1800"),
        "max_amount": Decimal("3600"),
        "is_required": True,
    }
    fields.update(overrides)
    return LineItemDefinition(**fields)


def item(name: str, amount) -> CalculatedLineItem:
    return CalculatedLineItem(line_item_id=None, name=name, amount=Decimal(amount))


class TestCalculateAge:
    """Tests for calculate_age."""

    def test_birthday_already_passed(self):
        assert calculate_age(date(1990, 1, 15), date(2025, 6, 1)) == 35

    def test_birthday_not_yet_reached(self):
        assert calculate_age(date(1990, 12, 31), date(2025, 6, 1)) == 34

    def test_birthday_on_reference_date(self):
        assert calculate_age(date(1990, 6, 1), date(2025, 6, 1)) == 35

    def test_same_month_day_before_birthday(self):
        assert calculate_age(date(1990, 6, 2), date(2025, 6, 1)) == 34

    def test_string_dates(self):
        assert calculate_age("1990-01-15", "2025-06-01") == 35

    def test_datetime_inputs_use_calendar_date(self):
        assert calculate_age(datetime(1990, 12, 31, 23, 0), "2025-06-01T08:30:00") == 34

    def test_defaults_to_today(self):
        assert calculate_age("1990-01-01") == date.today().year - 1990

    def test_is_deterministic(self):
        first = calculate_age("1975-03-03", "2024-03-02")
        assert first == calculate_age("1975-03-03", "2024-03-02") == 48

    @pytest.mark.parametrize("value", ["not-a-date", "2025-13-40", 19900115, None])
    def test_invalid_date_of_birth(self, value):
        with pytest.raises(InvalidDateError):
            calculate_age(value, "2025-06-01")

    def test_invalid_reference_date(self):
        with pytest.raises(InvalidDateError):
            calculate_age("1990-01-15", "next tuesday")


class TestCalculateLineItemAmount:
    """Tests for calculate_line_item_amount."""

    def test_fixed_amount(self):
        line_item = LineItemDefinition(
            name="Ticket",
            calculation_method=CalculationMethod.FIXED_AMOUNT,
            base_amount=Decimal("250"),
        )
        assert calculate_line_item_amount(line_item) == Decimal("250")

    def test_fixed_amount_scales_with_quantity(self):
        line_item = LineItemDefinition(
            name="Meal",
            calculation_method=CalculationMethod.FIXED_AMOUNT,
            base_amount=Decimal("100"),
        )
        assert calculate_line_item_amount(line_item, quantity=3) == Decimal("300")

    def test_fixed_amount_without_base_is_zero(self):
        line_item = LineItemDefinition(name="Free", calculation_method=CalculationMethod.FIXED_AMOUNT)
        assert calculate_line_item_amount(line_item) == 0

    def test_age_multiplier_mid_range(self):
        assert calculate_line_item_amount(age_based(), age=35) == Decimal("2100")

    def test_age_multiplier_clamps_to_minimum(self):
        assert calculate_line_item_amount(age_based(), age=20) == Decimal("1800")

    def test_age_multiplier_clamps_to_maximum(self):
        assert calculate_line_item_amount(age_based(), age=70) == Decimal("3600")

    def test_age_multiplier_without_bounds(self):
        line_item = age_based(min_amount=None, max_amount=None)
        assert calculate_line_item_amount(line_item, age=70) == Decimal("4200")

    def test_age_multiplier_scales_clamped_amount_by_quantity(self):
        assert calculate_line_item_amount(age_based(), age=20, quantity=2) == Decimal("3600")

    def test_zero_age_is_a_valid_age(self):
        """An infant still gets the minimum dues rather than an error."""
        assert calculate_line_item_amount(age_based(), age=0) == Decimal("1800")

    def test_age_multiplier_requires_age(self):
        with pytest.raises(MissingAgeError):
            calculate_line_item_amount(age_based())

    def test_age_multiplier_requires_multiplier(self):
        with pytest.raises(MissingMultiplierError):
            calculate_line_item_amount(age_based(multiplier=None), age=35)

    def test_percentage_returns_raw_percentage(self):
        """Percentage line items are not resolved against anything here."""
        line_item = LineItemDefinition(
            name="Service charge",
            calculation_method=CalculationMethod.PERCENTAGE,
            base_amount=Decimal("15"),
        )
        assert calculate_line_item_amount(line_item, quantity=2) == Decimal("30")

    def test_unknown_method_prices_as_fixed_amount(self):
        line_item = LineItemDefinition(
            name="Legacy",
            calculation_method="TIERED",
            base_amount=Decimal("75"),
        )
        assert calculate_line_item_amount(line_item, age=40) == Decimal("75")

    def test_accepts_plain_numbers(self):
        line_item = age_based(multiplier=60, min_amount=1800.0, max_amount="3600")
        assert calculate_line_item_amount(line_item, age=35) == Decimal("2100")


class TestCalculateRegistrationTotal:
    """Tests for calculate_registration_total."""

    def test_sums_line_items(self):
        result = calculate_registration_total([item("Dues", 2100), item("RV Supplement", 550)])

        assert result.subtotal == Decimal("2650")
        assert result.discount_total == 0
        assert result.total == Decimal("2650")

    def test_fixed_discount(self):
        discounts = [Discount("Early Bird", DiscountType.FIXED_AMOUNT, Decimal("200"))]
        result = calculate_registration_total([item("Dues", 2100)], discounts)

        assert result.discount_total == Decimal("200")
        assert result.total == Decimal("1900")

    def test_percentage_discount(self):
        discounts = [Discount("10% Discount", DiscountType.PERCENTAGE, Decimal("10"))]
        result = calculate_registration_total([item("Dues", 2000)], discounts)

        assert result.discount_total == Decimal("200")
        assert result.total == Decimal("1800")

    def test_discounts_do_not_compound(self):
        """The percentage is taken off the original subtotal, not the running total."""
        discounts = [
            Discount("Volunteer", DiscountType.FIXED_AMOUNT, Decimal("100")),
            Discount("Member", DiscountType.PERCENTAGE, Decimal("10")),
        ]
        result = calculate_registration_total([item("Dues", 2000)], discounts)

        assert result.discount_total == Decimal("300")
        assert result.total == Decimal("1700")

    def test_total_is_floored_at_zero(self):
        discounts = [Discount("Comp", DiscountType.FIXED_AMOUNT, Decimal("500"))]
        result = calculate_registration_total([item("Ticket", 100)], discounts)

        assert result.discount_total == Decimal("500")
        assert result.total == 0

    def test_unknown_discount_type_resolves_to_zero(self):
        discounts = [
            Discount("Mystery", "BUY_ONE_GET_ONE", Decimal("50")),
            Discount("Early Bird", DiscountType.FIXED_AMOUNT, Decimal("100")),
        ]
        result = calculate_registration_total([item("Dues", 2000)], discounts)

        assert result.discount_total == Decimal("100")
        assert result.breakdown.discounts[0].amount == 0

    def test_malformed_discount_amount_resolves_to_zero(self):
        discounts = [Discount("Typo", DiscountType.FIXED_AMOUNT, "ten")]
        result = calculate_registration_total([item("Dues", 2000)], discounts)

        assert result.total == Decimal("2000")

    def test_breakdown_lists_items_and_resolved_discounts(self):
        discounts = [Discount("Member", DiscountType.PERCENTAGE, Decimal("10"))]
        result = calculate_registration_total(
            [item("Dues", 2100), item("RV Supplement", 550)], discounts
        )

        assert [(e.name, e.amount) for e in result.breakdown.line_items] == [
            ("Dues", Decimal("2100")),
            ("RV Supplement", Decimal("550")),
        ]
        assert [(e.name, e.amount) for e in result.breakdown.discounts] == [
            ("Member", Decimal("265")),
        ]

    def test_empty_registration(self):
        result = calculate_registration_total([])

        assert result.subtotal == 0
        assert result.total == 0
        assert result.breakdown.line_items == ()


class TestCalculateDepositAndBalance:
    """Tests for calculate_deposit_and_balance."""

    def test_nothing_paid(self):
        result = calculate_deposit_and_balance(2100, 500, 0)

        assert result.deposit_due == 500
        assert result.balance_due == 2100
        assert result.is_deposit_paid is False
        assert result.is_fully_paid is False

    def test_deposit_paid(self):
        result = calculate_deposit_and_balance(2100, 500, 500)

        assert result.deposit_due == 0
        assert result.balance_due == 1600
        assert result.is_deposit_paid is True
        assert result.is_fully_paid is False

    def test_fully_paid(self):
        result = calculate_deposit_and_balance(2100, 500, 2100)

        assert result.deposit_due == 0
        assert result.balance_due == 0
        assert result.is_deposit_paid is True
        assert result.is_fully_paid is True

    def test_overpayment_floors_amounts_at_zero(self):
        result = calculate_deposit_and_balance(2100, 500, 2500)

        assert result.deposit_due == 0
        assert result.balance_due == 0

    def test_paid_defaults_to_zero(self):
        assert calculate_deposit_and_balance(2100, 500).deposit_due == 500


class TestGetPaymentStatus:
    """Tests for get_payment_status."""

    @pytest.mark.parametrize(
        ("total", "paid", "expected"),
        [
            (2100, 0, PaymentStatus.UNPAID),
            (2100, 500, PaymentStatus.DEPOSIT_PAID),
            (2100, 2100, PaymentStatus.FULLY_PAID),
            (2100, 2500, PaymentStatus.FULLY_PAID),
            (0, 0, PaymentStatus.UNPAID),
        ],
    )
    def test_status(self, total, paid, expected):
        assert get_payment_status(total, paid) is expected


class TestFormatCurrency:
    """Tests for format_currency."""

    def test_usd(self):
        assert format_currency(2100) == "$2,100.00"
        assert format_currency(550.5) == "$550.50"

    def test_rounds_half_up_to_cents(self):
        assert format_currency(Decimal("0.005")) == "$0.01"

    def test_large_amount_has_separators(self):
        assert format_currency(Decimal("1234567.891")) == "$1,234,567.89"

    def test_negative_amount(self):
        assert format_currency(-5) == "-$5.00"

    def test_known_currency_symbol(self):
        assert format_currency(1234.5, "EUR") == "€1,234.50"
        assert format_currency(10, "gbp") == "£10.00"

    def test_unknown_currency_uses_code(self):
        assert format_currency(10, "CHF") == "CHF 10.00"

    def test_zero_decimal_currency_rounds_to_whole_units(self):
        assert format_currency(2100, "JPY") == "¥2,100"
        assert format_currency(Decimal("1234.5"), "jpy") == "¥1,235"
        assert format_currency(-5, "KRW") == "-₩5"
