"""
Device API views.

These endpoints let operators and resellers:
- Renew devices in bulk
- Co-term devices to one expiry date
- Issue grace tokens
- List the devices they manage
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.authentication import get_actor
from api.v1.devices.serializers import (
    BatchRenewalResultSerializer,
    BulkRenewRequestSerializer,
    CoTermRequestSerializer,
    DeviceListParamsSerializer,
    DeviceSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from devices.application.commands.bulk_renew import BulkRenewCommand
from devices.application.commands.co_term import CoTermCommand
from devices.application.commands.issue_grace_token import IssueGraceTokenCommand
from devices.application.handlers.device_query_handlers import ListDevicesHandler
from devices.application.handlers.device_renewal_handlers import (
    BulkRenewHandler,
    CoTermHandler,
    IssueGraceTokenHandler,
)
from devices.application.queries.dashboard import ListDevicesQuery
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from organizations.infrastructure.repositories.django_organization_repository import (
    DjangoOrganizationRepository,
)
from renewals.infrastructure.repositories.django_renewal_request_repository import (
    DjangoRenewalRequestRepository,
)

_device_repo = DjangoDeviceRepository()
_organization_repo = DjangoOrganizationRepository()
_renewal_request_repo = DjangoRenewalRequestRepository()

tracer = get_tracer(__name__)


class BulkRenewView(APIView):
    """View for renewing a batch of devices."""

    @extend_schema(
        operation_id="bulk_renew_devices",
        summary="Bulk Renew Devices",
        description=(
            "Extend each listed device by `years` from its current expiry. "
            "Devices that do not exist or are not managed by the caller are skipped. "
            "TOP and RESELLER organizations only."
        ),
        tags=["Devices"],
        request=BulkRenewRequestSerializer,
        responses={
            200: BatchRenewalResultSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Unauthorized - Missing or invalid API key"},
            403: {"description": "Forbidden"},
        },
    )
    def post(self, request: Request) -> Response:
        """Renew devices in bulk."""
        actor = get_actor(request)
        with tracer.start_as_current_span("bulk_renew") as span:
            span.set_attribute("actor", str(actor))

            serializer = BulkRenewRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            span.set_attribute("devices.requested", len(serializer.validated_data["device_ids"]))

            handler = BulkRenewHandler(_device_repo, _organization_repo)
            result = handler.handle(
                BulkRenewCommand(
                    actor=actor,
                    device_ids=serializer.validated_data["device_ids"],
                    years=serializer.validated_data["years"],
                )
            )

            span.set_attribute("devices.updated", result.updated_count)
            span.set_status(Status(StatusCode.OK))
            return Response(BatchRenewalResultSerializer(result).data, status=status.HTTP_200_OK)


class CoTermView(APIView):
    """View for aligning devices to one expiry date."""

    @extend_schema(
        operation_id="co_term_devices",
        summary="Co-term Devices",
        description=(
            "Set every listed device's expiry to `target_date` "
            "(default: 31 December 23:59:59.999 of the current year). TOP organizations only."
        ),
        tags=["Devices"],
        request=CoTermRequestSerializer,
        responses={
            200: BatchRenewalResultSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "Forbidden"},
        },
    )
    def post(self, request: Request) -> Response:
        """Co-term devices."""
        actor = get_actor(request)
        with tracer.start_as_current_span("co_term") as span:
            span.set_attribute("actor", str(actor))

            serializer = CoTermRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = CoTermHandler(_device_repo, _organization_repo)
            result = handler.handle(
                CoTermCommand(
                    actor=actor,
                    device_ids=serializer.validated_data["device_ids"],
                    target_date=serializer.validated_data.get("target_date"),
                )
            )

            span.set_attribute("devices.updated", result.updated_count)
            span.set_status(Status(StatusCode.OK))
            return Response(BatchRenewalResultSerializer(result).data, status=status.HTTP_200_OK)


class GraceTokenView(APIView):
    """View for issuing a grace token to one device."""

    @extend_schema(
        operation_id="issue_grace_token",
        summary="Issue Grace Token",
        description="Grant a seven day grace token to an EXPIRED device. TOP organizations only.",
        tags=["Devices"],
        request=None,
        responses={
            200: DeviceSerializer,
            403: {"description": "Forbidden"},
            404: {"description": "Device not found"},
            409: {"description": "Device is not EXPIRED"},
        },
    )
    def post(self, request: Request, device_id) -> Response:
        """Issue a grace token."""
        actor = get_actor(request)
        with tracer.start_as_current_span("issue_grace_token") as span:
            span.set_attribute("actor", str(actor))
            span.set_attribute("device.id", str(device_id))

            handler = IssueGraceTokenHandler(_device_repo, _organization_repo)
            device = handler.handle(IssueGraceTokenCommand(actor=actor, device_id=device_id))

            span.set_status(Status(StatusCode.OK))
            return Response(DeviceSerializer(device).data, status=status.HTTP_200_OK)


class DeviceListView(APIView):
    """View for listing the devices an organization manages."""

    @extend_schema(
        operation_id="list_devices",
        summary="List Devices",
        description=(
            "List devices in the caller's scope ordered by expiry date. "
            "Resellers may pass `client_id` to narrow the list to one client."
        ),
        tags=["Devices"],
        parameters=[
            OpenApiParameter(
                name="client_id",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Reseller client organization ID",
            ),
        ],
        responses={200: DeviceSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        """List devices."""
        actor = get_actor(request)
        with tracer.start_as_current_span("list_devices") as span:
            span.set_attribute("actor", str(actor))

            params = DeviceListParamsSerializer(data=request.query_params)
            params.is_valid(raise_exception=True)

            handler = ListDevicesHandler(_device_repo, _organization_repo, _renewal_request_repo)
            devices = handler.handle(
                ListDevicesQuery(actor=actor, client_id=params.validated_data.get("client_id"))
            )

            span.set_attribute("devices.count", len(devices))
            return Response(DeviceSerializer(devices, many=True).data)
