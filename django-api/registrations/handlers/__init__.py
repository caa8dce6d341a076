from registrations.handlers.views import (
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

__all__ = [
    "LineItemListView",
    "QuoteView",
    "RegistrationCreateView",
    "RegistrationDetailView",
    "InvoiceView",
    "DiscountListView",
    "DiscountDetailView",
    "PaymentView",
    "CancelView",
]
