"""Per-key mutual exclusion for request workers sharing one process."""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock


@dataclass
class _Slot:
    lock: Lock = field(default_factory=Lock)
    waiters: int = 0


class KeyedLock:
    """Registry of locks keyed by an arbitrary hashable value.

    Slots are created on first use and dropped once no worker holds or waits
    on them, so the registry only ever contains keys that are in flight.
    """

    def __init__(self) -> None:
        self._guard = Lock()
        self._slots: dict[Hashable, _Slot] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Block until ``key`` is free, then hold it for the enclosed block."""
        with self._guard:
            slot = self._slots.get(key)
            if slot is None:
                slot = self._slots[key] = _Slot()
            slot.waiters += 1

        slot.lock.acquire()
        try:
            yield
        finally:
            slot.lock.release()
            with self._guard:
                slot.waiters -= 1
                if slot.waiters == 0:
                    self._slots.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._slots)


# Shared by every gateway in the process.
comment_locks = KeyedLock()
like_locks = KeyedLock()
