"""
BulkRenewCommand.

Command to extend a batch of device licenses by whole years.
"""
import uuid
from dataclasses import dataclass, field
from typing import List

from core.domain.value_objects import Actor

MAX_RENEWAL_YEARS = 10


@dataclass
class BulkRenewCommand:
    """Command to renew devices by ``years`` from their current expiry."""

    actor: Actor
    device_ids: List[uuid.UUID] = field(default_factory=list)
    years: int = 1
