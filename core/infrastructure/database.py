"""
Database utilities and transaction management.
"""
from django.db import transaction

from core.ports.unit_of_work import UnitOfWork


class DjangoUnitOfWork(UnitOfWork):
    """
    Unit of work backed by ``transaction.atomic()``.

    Nested units become savepoints, so a handler may run inside a test
    transaction or inside another handler's unit of work.
    """

    def __init__(self, using=None):
        self._using = using
        self._atomic = None

    def __enter__(self) -> "DjangoUnitOfWork":
        self._atomic = transaction.atomic(using=self._using)
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        atomic, self._atomic = self._atomic, None
        atomic.__exit__(exc_type, exc, tb)
        return False

    def rollback(self) -> None:
        if self._atomic is None:
            raise RuntimeError("rollback() called outside of a unit of work")
        transaction.set_rollback(True, using=self._using)
