"""Serializers for request validation and for rendering domain models.

Output serializers read straight from the frozen domain dataclasses; amounts
render as strings with two decimal places.
"""

from rest_framework import serializers

from registrations.domain import MAX_QUANTITY, DiscountType

AMOUNT = {"max_digits": 12, "decimal_places": 2}


class SelectionSerializer(serializers.Serializer):
    line_item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY, default=1)


class DiscountInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    discount_type = serializers.ChoiceField(choices=[t.value for t in DiscountType])
    amount = serializers.DecimalField(**AMOUNT)


class QuoteRequestSerializer(serializers.Serializer):
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    items = SelectionSerializer(many=True, required=False)
    discounts = DiscountInputSerializer(many=True, required=False)


class RegistrationRequestSerializer(serializers.Serializer):
    user_id = serializers.CharField(max_length=255)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    items = SelectionSerializer(many=True, required=False)
    deposit_paid = serializers.DecimalField(required=False, default=0, **AMOUNT)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class PaymentRequestSerializer(serializers.Serializer):
    amount = serializers.DecimalField(**AMOUNT)


class CancelRequestSerializer(serializers.Serializer):
    user_id = serializers.CharField(max_length=255)


class LineItemSerializer(serializers.Serializer):
    """Serializer for LineItemDefinition domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    description = serializers.CharField()
    line_item_type = serializers.CharField(source="line_item_type.value")
    calculation_method = serializers.CharField(source="calculation_method.value")
    base_amount = serializers.DecimalField(allow_null=True, **AMOUNT)
    min_amount = serializers.DecimalField(allow_null=True, **AMOUNT)
    max_amount = serializers.DecimalField(allow_null=True, **AMOUNT)
    multiplier = serializers.DecimalField(max_digits=12, decimal_places=4, allow_null=True)
    is_required = serializers.BooleanField()
    sort_order = serializers.IntegerField()


class CalculatedLineItemSerializer(serializers.Serializer):
    """Serializer for CalculatedLineItem snapshots."""

    line_item_id = serializers.SerializerMethodField()
    name = serializers.CharField()
    quantity = serializers.IntegerField()
    amount = serializers.DecimalField(**AMOUNT)
    user_age = serializers.IntegerField(allow_null=True)

    def get_line_item_id(self, obj) -> str | None:
        return str(obj.line_item_id) if obj.line_item_id else None


class DiscountSerializer(serializers.Serializer):
    """Serializer for Discount domain model."""

    id = serializers.SerializerMethodField()
    name = serializers.CharField()
    discount_type = serializers.CharField(source="discount_type.value")
    amount = serializers.DecimalField(**AMOUNT)

    def get_id(self, obj) -> str | None:
        return str(obj.id) if obj.id else None


class BreakdownEntrySerializer(serializers.Serializer):
    name = serializers.CharField()
    amount = serializers.DecimalField(**AMOUNT)


class BreakdownSerializer(serializers.Serializer):
    line_items = BreakdownEntrySerializer(many=True)
    discounts = BreakdownEntrySerializer(many=True)


class TotalsSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(**AMOUNT)
    discount_total = serializers.DecimalField(**AMOUNT)
    total = serializers.DecimalField(**AMOUNT)
    breakdown = BreakdownSerializer()


class DepositSerializer(serializers.Serializer):
    deposit_due = serializers.DecimalField(**AMOUNT)
    balance_due = serializers.DecimalField(**AMOUNT)
    is_deposit_paid = serializers.BooleanField()
    is_fully_paid = serializers.BooleanField()


class SkippedLineItemSerializer(serializers.Serializer):
    line_item_id = serializers.SerializerMethodField()
    name = serializers.CharField()
    code = serializers.CharField(source="code.value")
    message = serializers.CharField()

    def get_line_item_id(self, obj) -> str | None:
        return str(obj.line_item_id) if obj.line_item_id else None


class QuoteSerializer(serializers.Serializer):
    """Serializer for a registration Quote."""

    event_id = serializers.UUIDField(source="event.id.value")
    age = serializers.IntegerField(allow_null=True)
    items = CalculatedLineItemSerializer(many=True)
    skipped = SkippedLineItemSerializer(many=True)
    totals = TotalsSerializer()
    deposit = DepositSerializer()


class RegistrationSerializer(serializers.Serializer):
    """Serializer for Registration domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    user_id = serializers.CharField()
    status = serializers.CharField(source="status.value")
    total_amount = serializers.DecimalField(source="total_amount.amount", **AMOUNT)
    deposit_paid = serializers.DecimalField(source="deposit_paid.amount", **AMOUNT)
    balance_due = serializers.DecimalField(source="balance_due.amount", **AMOUNT)
    payment_status = serializers.CharField(source="payment_status.value")
    note = serializers.CharField()
    created_at = serializers.DateTimeField()
    line_items = CalculatedLineItemSerializer(many=True)
    discounts = DiscountSerializer(many=True)


class InvoiceSerializer(serializers.Serializer):
    """Serializer for an itemized registration Invoice."""

    registration = RegistrationSerializer()
    event_title = serializers.CharField(source="event.title")
    currency = serializers.CharField(source="event.currency")
    totals = TotalsSerializer()
    deposit = DepositSerializer()
    formatted = serializers.DictField(child=serializers.CharField())
