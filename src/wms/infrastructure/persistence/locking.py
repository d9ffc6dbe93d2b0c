"""Per-row locks with a bounded wait.

Keys are acquired in the order the caller passes them; callers sort them
canonically (units by serial) so two transactions can never wait on each
other in a cycle. Waiting is bounded: after the retry budget is spent the
caller gets Contention instead of blocking forever.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Hashable, Sequence

from wms.domain.exceptions import Contention
from wms.logging_config import get_logger

logger = get_logger(__name__)


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class RowLockManager:
    """Locks exist only while some transaction holds or waits for them."""

    def __init__(
        self,
        timeout: float = 2.0,
        attempts: int = 3,
        backoff: float = 0.05,
    ) -> None:
        self._timeout = timeout
        self._attempts = attempts
        self._backoff = backoff
        self._guard = threading.Lock()
        self._locks: dict[Hashable, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _checkout(self, key: Hashable) -> _Entry:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _Entry()
            entry.users += 1
            return entry

    def _checkin(self, key: Hashable) -> None:
        with self._guard:
            entry = self._locks[key]
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    def acquire(self, keys: Sequence[Hashable]) -> list[Hashable]:
        """Acquire every key or none. Returns the keys now held."""
        for attempt in range(1, self._attempts + 1):
            held: list[Hashable] = []
            for key in keys:
                if not self._checkout(key).lock.acquire(timeout=self._timeout):
                    self._checkin(key)
                    break
                held.append(key)
            else:
                return held

            self.release(held)
            logger.warning(
                "Row lock attempt failed",
                extra={"attempt": attempt, "keys": [str(k) for k in keys]},
            )
            if attempt < self._attempts:
                time.sleep(self._backoff * attempt)

        raise Contention(list(keys), self._attempts)

    def release(self, keys: Sequence[Hashable]) -> None:
        for key in reversed(keys):
            with self._guard:
                entry = self._locks[key]
            entry.lock.release()
            self._checkin(key)
