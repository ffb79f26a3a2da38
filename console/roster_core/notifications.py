"""
User-facing notifications and the rate-limit advisory gate.

The presentation layer drains NotificationCenter.active and calls dismiss().
CooldownNotifier lets at most one advisory through per cooldown window, no
matter how many threads hit a 429 at once.
"""

import itertools
import threading
import time
from dataclasses import dataclass

from .constants import (
    RATE_LIMIT_COOLDOWN_SEC, RATE_LIMIT_ADVISORY_TITLE,
    RATE_LIMIT_ADVISORY_MESSAGE, RATE_LIMIT_ADVISORY_DURATION_MS,
)
from .config import log, safe_print


@dataclass(frozen=True)
class Notification:
    id: int
    title: str
    message: str
    variant: str = "default"   # "default" | "warning" | "destructive"
    duration_ms: int = 5000


class NotificationCenter:
    def __init__(self, echo=False):
        self._items = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._echo = echo

    def push(self, title, message, variant="default", duration_ms=5000):
        with self._lock:
            note = Notification(next(self._ids), title, message, variant, duration_ms)
            self._items.append(note)
        log.info("Notification [%s] %s: %s", variant, title, message)
        if self._echo:
            safe_print(f"[{title}] {message}")
        return note

    def dismiss(self, note_id):
        with self._lock:
            self._items = [n for n in self._items if n.id != note_id]

    @property
    def active(self):
        with self._lock:
            return list(self._items)


class CooldownNotifier:
    """
    Fires `emit` at most once per `cooldown` seconds.

    `clock` is injectable (defaults to time.monotonic) so the window can be
    driven by tests without sleeping.
    """

    def __init__(self, emit, cooldown=RATE_LIMIT_COOLDOWN_SEC, clock=time.monotonic):
        self._emit = emit
        self._cooldown = cooldown
        self._clock = clock
        self._last_fired = None
        self._lock = threading.Lock()

    def notify(self) -> bool:
        """Returns True if the advisory was emitted, False if suppressed."""
        with self._lock:
            now = self._clock()
            if self._last_fired is not None and now - self._last_fired < self._cooldown:
                return False
            self._last_fired = now
        self._emit()
        return True

    def reset(self):
        with self._lock:
            self._last_fired = None


def rate_limit_notifier(center, clock=time.monotonic):
    """Cooldown-gated advisory that posts the demo rate-limit warning to `center`."""
    def emit():
        center.push(
            RATE_LIMIT_ADVISORY_TITLE,
            RATE_LIMIT_ADVISORY_MESSAGE,
            variant="warning",
            duration_ms=RATE_LIMIT_ADVISORY_DURATION_MS,
        )
    return CooldownNotifier(emit, clock=clock)
