"""
CoTermCommand.

Command to align a batch of devices to a single expiry date.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from core.domain.value_objects import Actor


@dataclass
class CoTermCommand:
    """Command to co-term devices; ``target_date`` defaults to the end of the year."""

    actor: Actor
    device_ids: List[uuid.UUID] = field(default_factory=list)
    target_date: Optional[datetime] = None
