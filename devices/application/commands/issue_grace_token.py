"""
IssueGraceTokenCommand.
"""
import uuid
from dataclasses import dataclass

from core.domain.value_objects import Actor


@dataclass
class IssueGraceTokenCommand:
    """Command to grant a seven day grace token to one EXPIRED device."""

    actor: Actor
    device_id: uuid.UUID
