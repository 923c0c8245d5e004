import threading
from typing import Dict, Hashable


class KeyedLocks:
    """Hands out one re-entrant lock per key (flight id, promo code, PNR...)"""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.RLock] = {}

    def lock_for(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    def __call__(self, key: Hashable) -> threading.RLock:
        return self.lock_for(key)
