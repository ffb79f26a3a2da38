"""
ConsoleState — in-flight actions and view lifetimes.

Save/delete/enroll actions must not be submitted twice while the first call
is still running: the enrollment read-modify-write is not idempotent against
interleaved writes. Views hold a token; a result whose view has been closed
or replaced is dropped instead of applied.
"""

import itertools
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field

from .errors import OperationInProgress


@dataclass
class ConsoleState:
    in_flight: set = field(default_factory=set)
    _views: dict = field(default_factory=dict)
    _tokens: itertools.count = field(default_factory=lambda: itertools.count(1))
    _lock: threading.Lock = field(default_factory=threading.Lock)

    # ── Duplicate-submission guard ────────────────────────────

    def is_busy(self, action) -> bool:
        with self._lock:
            return action in self.in_flight

    @contextmanager
    def running(self, action):
        """Mark `action` in flight for the duration of the block."""
        with self._lock:
            if action in self.in_flight:
                raise OperationInProgress(f"{action!r} already in progress")
            self.in_flight.add(action)
        try:
            yield
        finally:
            with self._lock:
                self.in_flight.discard(action)

    # ── View lifetimes ────────────────────────────────────────

    def open_view(self, name) -> int:
        """Start (or restart) view `name`. Older tokens for it become stale."""
        with self._lock:
            token = next(self._tokens)
            self._views[name] = token
            return token

    def close_view(self, name):
        with self._lock:
            self._views.pop(name, None)

    def is_current(self, name, token) -> bool:
        with self._lock:
            return self._views.get(name) == token
