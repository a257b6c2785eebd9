"""
Renewal request domain entity.

A renewal request moves PENDING -> QUOTED -> APPROVED/REJECTED or
straight from PENDING to APPROVED/REJECTED. APPROVED and REJECTED are
terminal.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from core.domain.exceptions import InvalidRequestStatusError
from core.domain.value_objects import RequestStatus, can_transition


@dataclass(frozen=True)
class RenewalRequest:
    """
    Renewal request domain entity.

    An empty ``device_ids`` means the request covers every device of the
    requester that needs renewal.
    """

    id: uuid.UUID
    requester_org_id: uuid.UUID
    status: RequestStatus
    device_ids: Tuple[uuid.UUID, ...] = field(default_factory=tuple)
    notes: str = ""
    quote_pdf_data: Optional[str] = None
    response_message: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate renewal request entity."""
        if not self.requester_org_id:
            raise ValueError("Requester organization ID is required")
        if not isinstance(self.status, RequestStatus):
            raise ValueError(f"Invalid request status: {self.status}")

    @classmethod
    def create(
        cls,
        requester_org_id: uuid.UUID,
        device_ids: Optional[Iterable[uuid.UUID]] = None,
        notes: str = "",
        created_at: Optional[datetime] = None,
        request_id: Optional[uuid.UUID] = None,
    ) -> "RenewalRequest":
        """
        Create a new PENDING renewal request.

        Args:
            requester_org_id: Requesting organization UUID
            device_ids: Optional explicit device scope
            notes: Free-text notes
            created_at: Creation instant
            request_id: Optional UUID (generated if not provided)

        Returns:
            RenewalRequest entity instance
        """
        unique_ids = tuple(dict.fromkeys(device_ids or ()))
        return cls(
            id=request_id or uuid.uuid4(),
            requester_org_id=requester_org_id,
            status=RequestStatus.PENDING,
            device_ids=unique_ids,
            notes=notes or "",
            created_at=created_at or datetime.now(timezone.utc),
        )

    @property
    def is_org_wide(self) -> bool:
        """True when the request names no explicit devices."""
        return not self.device_ids

    @property
    def has_quote(self) -> bool:
        """True once a reseller has attached a quote document."""
        return self.quote_pdf_data is not None

    def _transition(self, target: RequestStatus, **changes) -> "RenewalRequest":
        if not can_transition(self.status, target):
            raise InvalidRequestStatusError()
        return replace(self, status=target, **changes)

    def quote(self, pdf_data: str, message: str, now: datetime) -> "RenewalRequest":
        """
        Attach a reseller quote. Only PENDING requests can be quoted.

        Args:
            pdf_data: Quote document payload
            message: Response message for the requester
            now: Response instant

        Returns:
            QUOTED RenewalRequest instance

        Raises:
            InvalidRequestStatusError: If the request is not PENDING
        """
        if self.status != RequestStatus.PENDING:
            raise InvalidRequestStatusError()
        return self._transition(
            RequestStatus.QUOTED,
            quote_pdf_data=pdf_data,
            response_message=message,
            responded_at=now,
        )

    def approve(self) -> "RenewalRequest":
        """Mark the request APPROVED."""
        return self._transition(RequestStatus.APPROVED)

    def reject(self) -> "RenewalRequest":
        """Mark the request REJECTED."""
        return self._transition(RequestStatus.REJECTED)
