"""Per-game mutual exclusion, shared by the repository implementations."""

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class KeyedLocks:
    """
    One lock per key, alive only while someone holds or waits for it.

    Holding the lock for one game never blocks requests for another game.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}
        self._users: dict[Hashable, int] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] = self._users.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[key] -= 1
                if not self._users[key]:
                    del self._users[key]
                    del self._locks[key]
