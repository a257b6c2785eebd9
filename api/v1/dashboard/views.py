"""
Dashboard API views.
"""

from drf_spectacular.utils import extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.authentication import get_actor
from api.v1.dashboard.serializers import DashboardStatsSerializer, ResellerClientSerializer
from core.instrumentation import get_tracer
from devices.application.handlers.device_query_handlers import (
    DashboardStatsHandler,
    ResellerClientsHandler,
)
from devices.application.queries.dashboard import GetDashboardStatsQuery, ListResellerClientsQuery
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from organizations.infrastructure.repositories.django_organization_repository import (
    DjangoOrganizationRepository,
)

_device_repo = DjangoDeviceRepository()
_organization_repo = DjangoOrganizationRepository()

tracer = get_tracer(__name__)


class DashboardStatsView(APIView):
    """View for device status counts and the upcoming expiry timeline."""

    @extend_schema(
        operation_id="dashboard_stats",
        summary="Dashboard Stats",
        description="Device counts by status and expiries over the next six months.",
        tags=["Dashboard"],
        responses={200: DashboardStatsSerializer},
    )
    def get(self, request: Request) -> Response:
        """Return dashboard stats."""
        actor = get_actor(request)
        with tracer.start_as_current_span("dashboard_stats") as span:
            span.set_attribute("actor", str(actor))
            stats = DashboardStatsHandler(_device_repo, _organization_repo).handle(
                GetDashboardStatsQuery(actor=actor)
            )
            return Response(DashboardStatsSerializer(stats).data)


class ResellerClientsView(APIView):
    """View for a reseller's client overview."""

    @extend_schema(
        operation_id="reseller_clients",
        summary="Reseller Clients",
        description="Device totals and at-risk counts per client. RESELLER organizations only.",
        tags=["Dashboard"],
        responses={200: ResellerClientSerializer(many=True), 403: {"description": "Forbidden"}},
    )
    def get(self, request: Request) -> Response:
        """Return the reseller's clients."""
        actor = get_actor(request)
        with tracer.start_as_current_span("reseller_clients") as span:
            span.set_attribute("actor", str(actor))
            clients = ResellerClientsHandler(_device_repo, _organization_repo).handle(
                ListResellerClientsQuery(actor=actor)
            )
            return Response(ResellerClientSerializer(clients, many=True).data)
