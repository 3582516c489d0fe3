"""Single-slot, time-bounded cache for league metadata."""

import logging
import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .constants import METADATA_TTL
from .models import LeagueMetadata

logger = logging.getLogger('coachbot.cache')

Clock = Callable[[], datetime]
Fetch = Callable[[], LeagueMetadata]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MetadataCache:
    """
    Holds the one LeagueMetadata snapshot the bot keeps in memory.

    Refreshes are single-flight: callers that find the snapshot stale queue
    on a refresh lock, and whoever gets it first performs the upstream fetch.
    The rest re-check the snapshot once they get the lock and return the
    freshly stored one, so each expiry costs exactly one fetch. If the fetch
    that was in flight failed, the next caller in the queue tries again.

    Readers of a fresh snapshot only take the short state lock; the snapshot
    itself is frozen, so handing it out is safe.
    """

    def __init__(self, ttl: timedelta = METADATA_TTL, clock: Optional[Clock] = None):
        self.ttl = ttl
        self._clock = clock or utc_now
        self._snapshot: Optional[LeagueMetadata] = None
        self._state_lock = threading.Lock()
        self._refresh_lock = threading.Lock()

    def peek(self) -> Optional[LeagueMetadata]:
        """Return the cached snapshot without refreshing (may be stale or None)."""
        with self._state_lock:
            return self._snapshot

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        return self._is_stale(self.peek(), now or self._clock())

    def _is_stale(self, snapshot: Optional[LeagueMetadata], now: datetime) -> bool:
        if snapshot is None or snapshot.last_updated is None:
            return True
        return now - snapshot.last_updated > self.ttl

    def get_metadata(self, fetch: Fetch) -> LeagueMetadata:
        """
        Return the cached snapshot, refreshing it through fetch() when stale.

        Args:
            fetch: Zero-argument callable returning a fresh LeagueMetadata

        Returns:
            The current LeagueMetadata snapshot

        Raises:
            Whatever fetch() raises. The previous snapshot is left untouched.
        """
        snapshot = self.peek()
        if not self._is_stale(snapshot, self._clock()):
            return snapshot

        with self._refresh_lock:
            snapshot = self.peek()
            now = self._clock()
            if not self._is_stale(snapshot, now):
                return snapshot

            fresh = fetch()
            if snapshot is not None and snapshot.last_updated is not None:
                now = max(now, snapshot.last_updated)
            fresh = replace(fresh, last_updated=now)

            with self._state_lock:
                self._snapshot = fresh
            logger.info(f'League metadata refreshed: week {fresh.current_week}')
            return fresh

    def get_current_week(self, fetch: Fetch) -> int:
        """Current matchup week, refreshing the snapshot when stale."""
        return self.get_metadata(fetch).current_week

    def invalidate(self) -> None:
        """Drop the snapshot so the next read refreshes."""
        with self._state_lock:
            self._snapshot = None
