"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from wms.config import get_settings
from wms.domain.clock import Clock, SystemClock
from wms.domain.repository.unit_of_work import UnitOfWorkFactory
from wms.infrastructure.persistence.json_store import JsonStore
from wms.infrastructure.persistence.locking import RowLockManager
from wms.infrastructure.persistence.memory_store import MemoryUnitOfWork


@lru_cache()
def store() -> JsonStore:
    """One store per process, so every unit of work shares its row locks."""
    settings = get_settings()
    locks = RowLockManager(
        timeout=settings.lock_timeout_seconds,
        attempts=settings.lock_retry_attempts,
        backoff=settings.lock_retry_backoff_seconds,
    )
    return JsonStore(
        settings.data_dir,
        lock_manager=locks,
        file_lock_timeout=settings.file_lock_timeout_seconds,
    )


def unit_of_work() -> MemoryUnitOfWork:
    return MemoryUnitOfWork(store())


def uow_factory() -> UnitOfWorkFactory:
    return unit_of_work


def clock() -> Clock:
    return SystemClock()
