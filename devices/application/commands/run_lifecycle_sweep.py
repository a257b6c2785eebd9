"""
RunLifecycleSweepCommand.
"""
from dataclasses import dataclass


@dataclass
class RunLifecycleSweepCommand:
    """Command to run one lifecycle sweep; a dry run rolls back its writes."""

    dry_run: bool = False
