"""CooldownGate: per-subject and global last-use timestamps.

Timestamps are monotonic milliseconds. ``remaining`` is read-and-arm: when
no record exists, or the previous use is at least ``duration`` old, it
stamps *now* and returns 0 (the cooldown is consumed). Otherwise it returns
the whole seconds left and leaves the record untouched. ``peek`` runs the
same computation and never writes.

Concurrency: per-subject stores are created with an atomic
``dict.setdefault``; each store owns a lock so read-and-arm is atomic for
that subject. No lock is ever held across two subjects. Stores are never
removed from the table; clearing empties a store under its lock, so a
concurrent read-and-arm never writes into a store the gate has let go of.

State lives for the life of the gate; nothing expires on its own.
Call :meth:`CooldownGate.clear_everything` at shutdown.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


def monotonic_millis() -> int:
    return time.monotonic_ns() // 1_000_000


def format_remaining(seconds: int) -> str:
    """Format remaining seconds for humans.

    Examples:
        >>> format_remaining(45)
        '45s'
        >>> format_remaining(125)
        '2m 5s'
        >>> format_remaining(3780)
        '1h 3m'
    """
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


@dataclass
class _Store:
    lock: threading.Lock = field(default_factory=threading.Lock)
    stamps: dict[str, int] = field(default_factory=dict)


def _left(last_use: int | None, duration_seconds: int, now: int) -> int:
    if last_use is None:
        return 0
    window = duration_seconds * 1000
    if now - last_use >= window:
        return 0
    return (last_use + window - now) // 1000


class CooldownGate:
    """Thread-safe cooldown bookkeeping.

    Parameters:
        clock: Returns the current time in monotonic milliseconds.
            Injected by tests to control elapsed time.
    """

    def __init__(self, clock: Callable[[], int] = monotonic_millis) -> None:
        self._clock = clock
        self._subjects: dict[str, _Store] = {}
        self._global = _Store()

    def _store(self, subject: str) -> _Store:
        store = self._subjects.get(subject)
        if store is None:
            store = self._subjects.setdefault(subject, _Store())
        return store

    @staticmethod
    def _read_and_arm(store: _Store, key: str, duration_seconds: int, now: int) -> int:
        with store.lock:
            left = _left(store.stamps.get(key), duration_seconds, now)
            if left == 0:
                store.stamps[key] = now
            return left

    # ------------------------------------------------------------------
    # Per-subject cooldowns
    # ------------------------------------------------------------------

    def remaining(self, subject: str, key: str, duration_seconds: int) -> int:
        """Seconds left on *key* for *subject*; arms the cooldown when 0."""
        left = self._read_and_arm(self._store(subject), key, duration_seconds, self._clock())
        if left:
            logger.debug("Cooldown %s active for %s: %ss left", key, subject, left)
        return left

    def peek(self, subject: str, key: str, duration_seconds: int) -> int:
        """Seconds left on *key* for *subject*, without arming."""
        store = self._subjects.get(subject)
        if store is None:
            return 0
        with store.lock:
            last_use = store.stamps.get(key)
        return _left(last_use, duration_seconds, self._clock())

    def is_on_cooldown(
        self,
        subject: str,
        key: str,
        duration_seconds: int,
        *,
        bypass: bool = False,
    ) -> bool:
        """Read-and-arm check that honours a bypass grant.

        A bypassing subject is never blocked and never armed.
        """
        if bypass:
            return False
        return self.remaining(subject, key, duration_seconds) > 0

    def arm(self, subject: str, key: str) -> None:
        """Stamp *now* as the last use of *key* for *subject*."""
        store = self._store(subject)
        now = self._clock()
        with store.lock:
            store.stamps[key] = now

    def last_use(self, subject: str, key: str) -> int | None:
        """Raw stored timestamp, or None."""
        store = self._subjects.get(subject)
        if store is None:
            return None
        with store.lock:
            return store.stamps.get(key)

    def clear(self, subject: str, key: str) -> None:
        store = self._subjects.get(subject)
        if store is None:
            return
        with store.lock:
            store.stamps.pop(key, None)

    def clear_subject(self, subject: str) -> None:
        store = self._subjects.get(subject)
        if store is None:
            return
        with store.lock:
            store.stamps.clear()

    def clear_all(self) -> None:
        """Drop every per-subject record."""
        for store in list(self._subjects.values()):
            with store.lock:
                store.stamps.clear()

    def subjects(self) -> list[str]:
        """Subjects holding at least one record."""
        active = []
        for subject, store in list(self._subjects.items()):
            with store.lock:
                if store.stamps:
                    active.append(subject)
        return active

    # ------------------------------------------------------------------
    # Global cooldowns (shared by every subject)
    # ------------------------------------------------------------------

    def remaining_global(self, key: str, duration_seconds: int) -> int:
        return self._read_and_arm(self._global, key, duration_seconds, self._clock())

    def peek_global(self, key: str, duration_seconds: int) -> int:
        with self._global.lock:
            last_use = self._global.stamps.get(key)
        return _left(last_use, duration_seconds, self._clock())

    def is_global_cooldown(self, key: str, duration_seconds: int) -> bool:
        return self.remaining_global(key, duration_seconds) > 0

    def arm_global(self, key: str) -> None:
        now = self._clock()
        with self._global.lock:
            self._global.stamps[key] = now

    def clear_global(self, key: str) -> None:
        with self._global.lock:
            self._global.stamps.pop(key, None)

    def clear_all_global(self) -> None:
        with self._global.lock:
            self._global.stamps.clear()

    def clear_everything(self) -> None:
        """Shutdown hook: drop per-subject and global records."""
        self.clear_all()
        self.clear_all_global()
