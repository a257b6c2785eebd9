"""
Dashboard queries.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import Actor


@dataclass
class GetDashboardStatsQuery:
    """Query for device counts and the upcoming expiry timeline."""

    actor: Actor


@dataclass
class ListDevicesQuery:
    """Query for the devices visible to an actor; resellers may narrow to one client."""

    actor: Actor
    client_id: Optional[uuid.UUID] = None


@dataclass
class ListResellerClientsQuery:
    """Query for a reseller's client organizations with device totals."""

    actor: Actor
