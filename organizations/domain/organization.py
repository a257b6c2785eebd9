"""
Organization domain entity.

Organizations form a two-level operator tree (TOP -> UNIT) plus an
orthogonal RESELLER -> TOP management relation.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import BillingMode, OrgKind


@dataclass(frozen=True)
class Organization:
    """
    Organization domain entity.

    The kind is fixed at creation time. ``parent_id`` is only present on
    UNIT organizations and ``reseller_id`` only on TOP organizations.
    """

    id: uuid.UUID
    name: str
    kind: OrgKind
    parent_id: Optional[uuid.UUID]
    reseller_id: Optional[uuid.UUID]
    billing_mode: BillingMode
    created_at: datetime

    def __post_init__(self):
        """Validate organization entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Organization name cannot be empty")
        if len(self.name) > 255:
            raise ValueError("Organization name too long")
        if self.kind == OrgKind.UNIT and not self.parent_id:
            raise ValueError("A UNIT organization requires a parent")
        if self.kind != OrgKind.UNIT and self.parent_id:
            raise ValueError("Only UNIT organizations can have a parent")
        if self.kind != OrgKind.TOP and self.reseller_id:
            raise ValueError("Only TOP organizations can be reseller managed")

    @classmethod
    def create(
        cls,
        name: str,
        kind: OrgKind,
        parent_id: Optional[uuid.UUID] = None,
        reseller_id: Optional[uuid.UUID] = None,
        billing_mode: BillingMode = BillingMode.SELF_PAY,
        org_id: Optional[uuid.UUID] = None,
    ) -> "Organization":
        """
        Create a new Organization entity.

        Args:
            name: Display name
            kind: TOP, UNIT or RESELLER
            parent_id: Parent TOP (UNIT only)
            reseller_id: Managing reseller (TOP only)
            billing_mode: SELF_PAY or RESELLER_ONLY
            org_id: Optional UUID (generated if not provided)

        Returns:
            Organization entity instance
        """
        return cls(
            id=org_id or uuid.uuid4(),
            name=name,
            kind=kind,
            parent_id=parent_id,
            reseller_id=reseller_id,
            billing_mode=billing_mode,
            created_at=datetime.now(timezone.utc),
        )

    @property
    def is_reseller_managed(self) -> bool:
        """True when renewals go through a reseller instead of direct billing."""
        return self.billing_mode == BillingMode.RESELLER_ONLY or self.reseller_id is not None

    def can_request_renewal(self) -> bool:
        """
        Check whether this organization renews by raising a request.

        UNITs always ask their parent. A TOP only asks when it does not
        pay for itself; a self-pay TOP renews directly.

        Returns:
            True if the organization may create renewal requests
        """
        if self.kind == OrgKind.UNIT:
            return True
        if self.kind == OrgKind.TOP:
            return self.is_reseller_managed
        return False
