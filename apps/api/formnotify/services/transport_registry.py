"""Process-wide table of staged custom transport profiles.

Each profile id has its own lock, so staging for one mailer never blocks
another. Staging identical values twice is a no-op.
"""

from __future__ import annotations

import logging
import threading

from formnotify.schemas.notifications import TransportProfile

logger = logging.getLogger(__name__)


class TransportRegistry:
    def __init__(self) -> None:
        self._profiles: dict[str, TransportProfile] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, mailer: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(mailer)
            if lock is None:
                lock = threading.Lock()
                self._locks[mailer] = lock
            return lock

    def stage(self, profile: TransportProfile) -> str:
        """Make ``profile`` available to the send step under its mailer id."""
        with self._lock_for(profile.mailer):
            current = self._profiles.get(profile.mailer)
            if current != profile:
                self._profiles[profile.mailer] = profile
                logger.debug("Staged transport profile %s (host=%s)", profile.mailer, profile.host)
        return profile.mailer

    def get(self, mailer: str) -> TransportProfile | None:
        with self._lock_for(mailer):
            return self._profiles.get(mailer)

    def clear(self) -> None:
        """Drop staged profiles. Per-key locks are kept so holders stay valid."""
        with self._guard:
            mailers = list(self._locks)
        for mailer in mailers:
            with self._lock_for(mailer):
                self._profiles.pop(mailer, None)


transport_registry = TransportRegistry()
