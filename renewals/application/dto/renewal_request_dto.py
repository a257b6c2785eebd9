"""
Renewal request DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from devices.application.dto.device_dto import DeviceDTO
from renewals.domain.renewal_request import RenewalRequest


@dataclass
class RenewalRequestDTO:
    """DTO for renewal request information."""

    id: uuid.UUID
    requester_org_id: uuid.UUID
    status: str
    device_ids: List[uuid.UUID]
    notes: str
    has_quote: bool
    response_message: Optional[str]
    responded_at: Optional[datetime]
    created_at: datetime
    requester_org_name: Optional[str] = None

    @classmethod
    def from_entity(cls, request: RenewalRequest, requester_org_name: Optional[str] = None):
        """Build a DTO from a RenewalRequest entity."""
        return cls(
            id=request.id,
            requester_org_id=request.requester_org_id,
            status=request.status.value,
            device_ids=list(request.device_ids),
            notes=request.notes,
            has_quote=request.has_quote,
            response_message=request.response_message,
            responded_at=request.responded_at,
            created_at=request.created_at,
            requester_org_name=requester_org_name,
        )


@dataclass
class ApprovalResultDTO:
    """DTO for an approval: the request and the devices it renewed."""

    request: RenewalRequestDTO
    renewed_count: int
    renewed: List[DeviceDTO] = field(default_factory=list)


@dataclass
class QuoteDTO:
    """DTO for a reseller quote."""

    request_id: uuid.UUID
    quote_pdf_data: str
    response_message: Optional[str]
    responded_at: Optional[datetime]
