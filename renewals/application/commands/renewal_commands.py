"""
Renewal request commands.
"""
import uuid
from dataclasses import dataclass, field
from typing import List

from core.domain.value_objects import Actor


@dataclass
class CreateRenewalRequestCommand:
    """Command to raise a renewal request; no device IDs means organization-wide."""

    actor: Actor
    device_ids: List[uuid.UUID] = field(default_factory=list)
    notes: str = ""


@dataclass
class RespondWithQuoteCommand:
    """Command for a reseller to quote a PENDING request."""

    actor: Actor
    request_id: uuid.UUID
    quote_pdf_data: str
    response_message: str = ""


@dataclass
class ApproveRenewalRequestCommand:
    """Command to approve a request and renew its devices."""

    actor: Actor
    request_id: uuid.UUID


@dataclass
class RejectRenewalRequestCommand:
    """Command to reject a request."""

    actor: Actor
    request_id: uuid.UUID
