"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from registrations.cache_keys import line_items_key
from registrations.domain import Discount, DiscountType
from registrations.domain.errors import DomainError, ErrorCode
from registrations.handlers.serializers import (
    CancelRequestSerializer,
    DiscountInputSerializer,
    InvoiceSerializer,
    LineItemSerializer,
    PaymentRequestSerializer,
    QuoteRequestSerializer,
    QuoteSerializer,
    RegistrationRequestSerializer,
    RegistrationSerializer,
)
from registrations.services import RegistrationService
from registrations.stores import DjangoRegistrationStore

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.LINE_ITEM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REGISTRATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DISCOUNT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ALREADY_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
}


def get_service() -> RegistrationService:
    return RegistrationService(DjangoRegistrationStore())


def error_response(error: DomainError) -> Response:
    """Map a domain error to a response carrying only its code and safe message."""
    return Response(
        {"error": {"code": error.code.value, "message": error.message}},
        status=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def _selections(items: list[dict]) -> dict[str, int]:
    return {str(item["line_item_id"]): item["quantity"] for item in items}


class LineItemListView(APIView):
    """Handler for GET /api/events/{event_id}/line-items"""

    def get(self, request: Request, event_id: str) -> Response:
        key = line_items_key(event_id)
        data = cache.get(key)
        if data is None:
            try:
                line_items = get_service().list_line_items(event_id)
            except DomainError as exc:
                return error_response(exc)
            data = LineItemSerializer(line_items, many=True).data
            cache.set(key, data, settings.CACHE_TTL_SECONDS)
        return Response({"line_items": data})


class QuoteView(APIView):
    """Handler for POST /api/events/{event_id}/quote"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = QuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        discounts = [
            Discount(
                name=d["name"],
                discount_type=DiscountType(d["discount_type"]),
                amount=d["amount"],
            )
            for d in data.get("discounts", [])
        ]
        try:
            quote = get_service().quote(
                event_id,
                date_of_birth=data.get("date_of_birth"),
                selections=_selections(data.get("items", [])),
                discounts=discounts,
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(QuoteSerializer(quote).data)


class RegistrationCreateView(APIView):
    """Handler for POST /api/events/{event_id}/registrations"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = RegistrationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            registration = get_service().register(
                event_id,
                user_id=data["user_id"],
                date_of_birth=data.get("date_of_birth"),
                selections=_selections(data.get("items", [])),
                deposit_paid=data["deposit_paid"],
                note=data["note"],
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(
            RegistrationSerializer(registration).data, status=status.HTTP_201_CREATED
        )


class RegistrationDetailView(APIView):
    """Handler for GET /api/registrations/{registration_id}"""

    def get(self, request: Request, registration_id: str) -> Response:
        try:
            registration = get_service().get_registration(registration_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(RegistrationSerializer(registration).data)


class InvoiceView(APIView):
    """Handler for GET /api/registrations/{registration_id}/invoice"""

    def get(self, request: Request, registration_id: str) -> Response:
        try:
            invoice = get_service().get_invoice(registration_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(InvoiceSerializer(invoice).data)


class DiscountListView(APIView):
    """Handler for POST /api/registrations/{registration_id}/discounts"""

    def post(self, request: Request, registration_id: str) -> Response:
        serializer = DiscountInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            registration = get_service().apply_discount(
                registration_id,
                name=data["name"],
                discount_type=data["discount_type"],
                amount=data["amount"],
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(
            RegistrationSerializer(registration).data, status=status.HTTP_201_CREATED
        )


class DiscountDetailView(APIView):
    """Handler for DELETE /api/registrations/{registration_id}/discounts/{discount_id}"""

    def delete(self, request: Request, registration_id: str, discount_id: str) -> Response:
        try:
            registration = get_service().remove_discount(registration_id, discount_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(RegistrationSerializer(registration).data)


class PaymentView(APIView):
    """Handler for POST /api/registrations/{registration_id}/payments"""

    def post(self, request: Request, registration_id: str) -> Response:
        serializer = PaymentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            registration = get_service().record_payment(
                registration_id, serializer.validated_data["amount"]
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(RegistrationSerializer(registration).data)


class CancelView(APIView):
    """Handler for POST /api/registrations/{registration_id}/cancel"""

    def post(self, request: Request, registration_id: str) -> Response:
        serializer = CancelRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            registration = get_service().cancel(
                registration_id, serializer.validated_data["user_id"]
            )
        except DomainError as exc:
            logger.info("Cancellation refused for %s: %s", registration_id, exc.code.value)
            return error_response(exc)
        return Response(RegistrationSerializer(registration).data)
