"""
locks.py
--------
In-process mutual exclusion for the check-then-insert sequence, keyed by
resource: ("staff", id) around the overlap check, ("client", id) around the
appointment-limit count.

SQLite ignores SELECT ... FOR UPDATE, so two requests in the same process
could both read "no overlap" (or "under the limit") before either inserts.
BookingManager holds these locks around its transaction; on row-locking
databases the Staff and ClientProfile row locks do the same job across
processes.
"""

import threading
from contextlib import contextmanager


def staff_key(staff_id):
    return ("staff", staff_id)


def client_key(client_id):
    return ("client", client_id)


class SchedulingLockRegistry:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}

    def _lock_for(self, key):
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())

    @contextmanager
    def hold(self, *keys):
        # Sorted acquisition so two callers locking overlapping sets can't deadlock.
        locks = [self._lock_for(key) for key in sorted(set(keys))]
        for lock in locks:
            lock.acquire()
        try:
            yield
        finally:
            for lock in reversed(locks):
                lock.release()
