from django.urls import path

from registrations.handlers import (
    CancelView,
    DiscountDetailView,
    DiscountListView,
    InvoiceView,
    LineItemListView,
    PaymentView,
    QuoteView,
    RegistrationCreateView,
    RegistrationDetailView,
)

urlpatterns = [
    path(
        "events/<str:event_id>/line-items",
        LineItemListView.as_view(),
        name="line-item-list",
    ),
    path("events/<str:event_id>/quote", QuoteView.as_view(), name="quote"),
    path(
        "events/<str:event_id>/registrations",
        RegistrationCreateView.as_view(),
        name="registration-create",
    ),
    path(
        "registrations/<str:registration_id>",
        RegistrationDetailView.as_view(),
        name="registration-detail",
    ),
    path(
        "registrations/<str:registration_id>/invoice",
        InvoiceView.as_view(),
        name="registration-invoice",
    ),
    path(
        "registrations/<str:registration_id>/discounts",
        DiscountListView.as_view(),
        name="discount-list",
    ),
    path(
        "registrations/<str:registration_id>/discounts/<str:discount_id>",
        DiscountDetailView.as_view(),
        name="discount-detail",
    ),
    path(
        "registrations/<str:registration_id>/payments",
        PaymentView.as_view(),
        name="registration-payment",
    ),
    path(
        "registrations/<str:registration_id>/cancel",
        CancelView.as_view(),
        name="registration-cancel",
    ),
]
