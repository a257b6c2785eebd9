"""
Renewal request API views.

Requesters raise renewal requests, resellers quote them and TOP
organizations approve or reject them.
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.authentication import get_actor
from api.v1.requests.serializers import (
    ApprovalResultSerializer,
    CreateRenewalRequestSerializer,
    QuoteSerializer,
    RenewalRequestSerializer,
    RespondWithQuoteSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from organizations.infrastructure.repositories.django_organization_repository import (
    DjangoOrganizationRepository,
)
from renewals.application.commands.renewal_commands import (
    ApproveRenewalRequestCommand,
    CreateRenewalRequestCommand,
    RejectRenewalRequestCommand,
    RespondWithQuoteCommand,
)
from renewals.application.handlers.renewal_request_handlers import (
    ApproveRenewalRequestHandler,
    CreateRenewalRequestHandler,
    GetQuoteHandler,
    ListRenewalRequestsHandler,
    RejectRenewalRequestHandler,
    RespondWithQuoteHandler,
)
from renewals.application.queries.renewal_queries import GetQuoteQuery, ListRenewalRequestsQuery
from renewals.infrastructure.repositories.django_renewal_request_repository import (
    DjangoRenewalRequestRepository,
)

_device_repo = DjangoDeviceRepository()
_organization_repo = DjangoOrganizationRepository()
_renewal_request_repo = DjangoRenewalRequestRepository()

tracer = get_tracer(__name__)


class RenewalRequestListCreateView(APIView):
    """View for raising and listing renewal requests."""

    @extend_schema(
        operation_id="create_renewal_request",
        summary="Create Renewal Request",
        description=(
            "Raise a PENDING renewal request. Without `device_ids` the request covers every "
            "device that needs renewal. UNIT and reseller managed TOP organizations only."
        ),
        tags=["Renewal Requests"],
        request=CreateRenewalRequestSerializer,
        responses={201: RenewalRequestSerializer, 403: {"description": "Forbidden"}},
    )
    def post(self, request: Request) -> Response:
        """Create a renewal request."""
        actor = get_actor(request)
        with tracer.start_as_current_span("create_renewal_request") as span:
            span.set_attribute("actor", str(actor))

            serializer = CreateRenewalRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = CreateRenewalRequestHandler(_renewal_request_repo, _organization_repo)
            result = handler.handle(
                CreateRenewalRequestCommand(
                    actor=actor,
                    device_ids=serializer.validated_data["device_ids"],
                    notes=serializer.validated_data["notes"],
                )
            )

            span.set_attribute("request.id", str(result.id))
            span.set_status(Status(StatusCode.OK))
            return Response(RenewalRequestSerializer(result).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="list_renewal_requests",
        summary="List Renewal Requests",
        description=(
            "TOP organizations see the requests of their UNITs and their own; "
            "RESELLER organizations see their clients' PENDING requests."
        ),
        tags=["Renewal Requests"],
        responses={200: RenewalRequestSerializer(many=True), 403: {"description": "Forbidden"}},
    )
    def get(self, request: Request) -> Response:
        """List renewal requests."""
        actor = get_actor(request)
        with tracer.start_as_current_span("list_renewal_requests") as span:
            span.set_attribute("actor", str(actor))
            handler = ListRenewalRequestsHandler(_renewal_request_repo, _organization_repo)
            requests = handler.handle(ListRenewalRequestsQuery(actor=actor))
            return Response(RenewalRequestSerializer(requests, many=True).data)


class QuoteView(APIView):
    """View for posting and reading a reseller quote."""

    @extend_schema(
        operation_id="quote_renewal_request",
        summary="Quote Renewal Request",
        description="Attach a quote to a client's PENDING request. RESELLER organizations only.",
        tags=["Renewal Requests"],
        request=RespondWithQuoteSerializer,
        responses={
            200: RenewalRequestSerializer,
            403: {"description": "Forbidden"},
            404: {"description": "Request not found"},
            409: {"description": "Request is not PENDING"},
        },
    )
    def post(self, request: Request, request_id) -> Response:
        """Quote a renewal request."""
        actor = get_actor(request)
        with tracer.start_as_current_span("quote_renewal_request") as span:
            span.set_attribute("actor", str(actor))
            span.set_attribute("request.id", str(request_id))

            serializer = RespondWithQuoteSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = RespondWithQuoteHandler(_renewal_request_repo, _organization_repo)
            result = handler.handle(
                RespondWithQuoteCommand(
                    actor=actor,
                    request_id=request_id,
                    quote_pdf_data=serializer.validated_data["quote_pdf_data"],
                    response_message=serializer.validated_data["response_message"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(RenewalRequestSerializer(result).data)

    @extend_schema(
        operation_id="get_renewal_quote",
        summary="Get Quote",
        description="Read the quote of a request: the requester, its parent TOP or its reseller.",
        tags=["Renewal Requests"],
        responses={
            200: QuoteSerializer,
            403: {"description": "Forbidden"},
            404: {"description": "Request or quote not found"},
        },
    )
    def get(self, request: Request, request_id) -> Response:
        """Read a quote."""
        actor = get_actor(request)
        with tracer.start_as_current_span("get_renewal_quote") as span:
            span.set_attribute("actor", str(actor))
            span.set_attribute("request.id", str(request_id))
            handler = GetQuoteHandler(_renewal_request_repo, _organization_repo)
            quote = handler.handle(GetQuoteQuery(actor=actor, request_id=request_id))
            return Response(QuoteSerializer(quote).data)


class ApproveRenewalRequestView(APIView):
    """View for approving a renewal request."""

    @extend_schema(
        operation_id="approve_renewal_request",
        summary="Approve Renewal Request",
        description="Approve a request and renew its devices in one transaction. TOP organizations only.",
        tags=["Renewal Requests"],
        request=None,
        responses={
            200: ApprovalResultSerializer,
            403: {"description": "Forbidden"},
            404: {"description": "Request not found"},
            409: {"description": "Request cannot be approved in its current status"},
        },
    )
    def post(self, request: Request, request_id) -> Response:
        """Approve a renewal request."""
        actor = get_actor(request)
        with tracer.start_as_current_span("approve_renewal_request") as span:
            span.set_attribute("actor", str(actor))
            span.set_attribute("request.id", str(request_id))

            handler = ApproveRenewalRequestHandler(
                _renewal_request_repo, _organization_repo, _device_repo
            )
            result = handler.handle(ApproveRenewalRequestCommand(actor=actor, request_id=request_id))

            span.set_attribute("devices.renewed", result.renewed_count)
            span.set_status(Status(StatusCode.OK))
            return Response(ApprovalResultSerializer(result).data)


class RejectRenewalRequestView(APIView):
    """View for rejecting a renewal request."""

    @extend_schema(
        operation_id="reject_renewal_request",
        summary="Reject Renewal Request",
        description="Reject a request. TOP organizations only.",
        tags=["Renewal Requests"],
        request=None,
        responses={
            200: RenewalRequestSerializer,
            403: {"description": "Forbidden"},
            404: {"description": "Request not found"},
            409: {"description": "Request cannot be rejected in its current status"},
        },
    )
    def post(self, request: Request, request_id) -> Response:
        """Reject a renewal request."""
        actor = get_actor(request)
        with tracer.start_as_current_span("reject_renewal_request") as span:
            span.set_attribute("actor", str(actor))
            span.set_attribute("request.id", str(request_id))
            handler = RejectRenewalRequestHandler(_renewal_request_repo, _organization_repo)
            result = handler.handle(RejectRenewalRequestCommand(actor=actor, request_id=request_id))
            span.set_status(Status(StatusCode.OK))
            return Response(RenewalRequestSerializer(result).data)
