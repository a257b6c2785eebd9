"""
License lifecycle engine.

The sweep advances device licenses through
ACTIVE -> EXPIRING_SOON -> EXPIRED -> SUSPENDED as time passes and hands
out one automatic grace token per expiry. Every rule is a pure function
of the stored dates and a reference instant, so running the sweep again
with the same instant changes nothing and a late sweep still lands on
the right state.

Rules run in a fixed order. Each rule only sees devices still eligible
after the rules before it in the same pass.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, FrozenSet, Optional, Tuple

from core.domain.value_objects import DeviceStatus
from devices.domain.device import GRACE_PERIOD, Device

logger = logging.getLogger(__name__)

WARNING_WINDOW = timedelta(days=60)
SUSPENSION_CUTOFF = timedelta(days=14)

WARN_EXPIRING = "warn_expiring"
MARK_EXPIRED = "mark_expired"
GRANT_GRACE = "grant_grace"
SUSPEND = "suspend"


@dataclass(frozen=True)
class SweepRule:
    """
    One ordered transition of the lifecycle sweep.

    A device matches when its status is in ``from_statuses``, its expiry
    date lies in ``(now + expiry_after, now + expiry_until]`` and, when
    ``requires_no_grace_token`` is set, it has no grace token yet.
    """

    name: str
    from_statuses: FrozenSet[DeviceStatus]
    expiry_until: timedelta
    expiry_after: Optional[timedelta] = None
    requires_no_grace_token: bool = False
    to_status: Optional[DeviceStatus] = None
    grace_period: Optional[timedelta] = None

    def bounds(self, now: datetime) -> Tuple[Optional[datetime], datetime]:
        """Return the (exclusive lower, inclusive upper) expiry bounds at ``now``."""
        lower = now + self.expiry_after if self.expiry_after is not None else None
        return lower, now + self.expiry_until

    def changes(self, now: datetime) -> Dict[str, Any]:
        """Return the device attributes this rule sets at ``now``."""
        updates: Dict[str, Any] = {}
        if self.to_status is not None:
            updates["status"] = self.to_status
        if self.grace_period is not None:
            updates["grace_token_expiry"] = now + self.grace_period
        return updates

    def matches(self, device: Device, now: datetime) -> bool:
        """
        Check whether the rule selects a device.

        Args:
            device: Device entity
            now: Reference instant

        Returns:
            True if the rule applies
        """
        if device.status not in self.from_statuses:
            return False
        lower, upper = self.bounds(now)
        if device.expiry_date > upper:
            return False
        if lower is not None and device.expiry_date <= lower:
            return False
        if self.requires_no_grace_token and device.grace_token_expiry is not None:
            return False
        return True

    def apply(self, device: Device, now: datetime) -> Device:
        """Return the device with this rule's changes applied."""
        updates = self.changes(now)
        if "status" in updates:
            device = device.with_status(updates["status"])
        if "grace_token_expiry" in updates:
            device = device.with_grace_token(updates["grace_token_expiry"])
        return device


@dataclass
class SweepResult:
    """Outcome of one sweep: number of devices each rule touched."""

    swept_at: datetime
    counts: Dict[str, int] = field(default_factory=dict)
    dry_run: bool = False

    @property
    def total(self) -> int:
        """Total number of rule applications."""
        return sum(self.counts.values())

    def as_dict(self) -> Dict[str, Any]:
        """Serialize for logging and task results."""
        return {
            "swept_at": self.swept_at.isoformat(),
            "counts": dict(self.counts),
            "total": self.total,
            "dry_run": self.dry_run,
        }


class LicenseLifecycleEngine:
    """Domain service holding the ordered sweep rules."""

    def __init__(
        self,
        warning_window: timedelta = WARNING_WINDOW,
        grace_period: timedelta = GRACE_PERIOD,
        suspension_cutoff: timedelta = SUSPENSION_CUTOFF,
    ):
        """
        Build the rule set.

        Args:
            warning_window: How far ahead of expiry a device is flagged
            grace_period: Length of the automatic grace token
            suspension_cutoff: How long after expiry a device is suspended
        """
        self.rules: Tuple[SweepRule, ...] = (
            SweepRule(
                name=WARN_EXPIRING,
                from_statuses=frozenset({DeviceStatus.ACTIVE}),
                expiry_after=timedelta(0),
                expiry_until=warning_window,
                to_status=DeviceStatus.EXPIRING_SOON,
            ),
            SweepRule(
                name=MARK_EXPIRED,
                from_statuses=frozenset({DeviceStatus.ACTIVE, DeviceStatus.EXPIRING_SOON}),
                expiry_until=timedelta(0),
                to_status=DeviceStatus.EXPIRED,
            ),
            SweepRule(
                name=GRANT_GRACE,
                from_statuses=frozenset({DeviceStatus.EXPIRED}),
                expiry_until=timedelta(0),
                requires_no_grace_token=True,
                grace_period=grace_period,
            ),
            SweepRule(
                name=SUSPEND,
                from_statuses=frozenset(
                    {DeviceStatus.ACTIVE, DeviceStatus.EXPIRING_SOON, DeviceStatus.EXPIRED}
                ),
                expiry_until=-suspension_cutoff,
                to_status=DeviceStatus.SUSPENDED,
            ),
        )

    def advance(self, device: Device, now: datetime) -> Device:
        """
        Run every rule in order against a single device.

        Args:
            device: Device entity
            now: Reference instant

        Returns:
            Device after one sweep pass
        """
        for rule in self.rules:
            if rule.matches(device, now):
                device = rule.apply(device, now)
        return device

    def sweep(self, repository: "DeviceRepository", now: datetime) -> SweepResult:  # noqa: F821
        """
        Apply the rules to every stored device, one bulk update per rule.

        The caller owns the transaction.

        Args:
            repository: Device repository
            now: Reference instant

        Returns:
            SweepResult with per-rule counts
        """
        result = SweepResult(swept_at=now)
        for rule in self.rules:
            count = repository.apply_sweep_rule(rule, now)
            result.counts[rule.name] = count
            logger.info("Sweep rule %s updated %d device(s)", rule.name, count)
        return result
