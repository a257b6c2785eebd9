"""
Unit of work port.

Handlers open a unit of work around every mutation so that all reads
made for update and all writes commit or roll back together.
"""
from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    Abstract transaction boundary.

    Usage:
        with uow:
            # reads and writes
            pass
    """

    @abstractmethod
    def __enter__(self) -> "UnitOfWork":
        """Open the transaction."""

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> bool:
        """Commit on success, roll back when an exception escapes."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard the work done so far once the block exits."""
