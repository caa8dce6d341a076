from django.contrib import admin

from registrations.models import (
    Event,
    LineItem,
    Registration,
    RegistrationDiscount,
    RegistrationLineItem,
)


class LineItemInline(admin.TabularInline):
    model = LineItem
    extra = 1


class RegistrationLineItemInline(admin.TabularInline):
    model = RegistrationLineItem
    extra = 0
    readonly_fields = ["line_item", "name", "quantity", "calculated_amount", "user_age"]


class RegistrationDiscountInline(admin.TabularInline):
    model = RegistrationDiscount
    extra = 0


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "event_type",
        "status",
        "start_date",
        "deposit_amount",
        "max_attendees",
    ]
    list_filter = ["status", "event_type"]
    search_fields = ["title"]
    inlines = [LineItemInline]


@admin.register(LineItem)
class LineItemAdmin(admin.ModelAdmin):
    list_display = ["name", "event", "calculation_method", "is_required", "sort_order"]
    list_filter = ["event", "calculation_method"]


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["user_id", "event", "status", "total_amount", "payment_status"]
    list_filter = ["event", "status", "payment_status"]
    search_fields = ["user_id"]
    inlines = [RegistrationLineItemInline, RegistrationDiscountInline]
