"""Near-supermarket detection with edge-triggered entry notifications."""

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from freshcart.domain.geo import Coordinate, StoreRecord
from freshcart.domain.location import ProximityEvaluation, ProximityState
from freshcart.services.stores import LookupFailure, StoreLookup, rank

EnterNotifier = Callable[[Coordinate, list[StoreRecord]], Awaitable[None]]

NEAR_STORE_TITLE = "Supermarket Detected!"
NEAR_STORE_MESSAGE = "You're near a supermarket. Ready to start shopping?"

_logger = logging.getLogger(__name__)


async def log_store_entry(coordinate: Coordinate, stores: list[StoreRecord]) -> None:
    """Entry notifier that records the event in the application log."""
    _logger.info(
        "%s %s nearest=%s at (%s, %s)",
        NEAR_STORE_TITLE,
        NEAR_STORE_MESSAGE,
        stores[0].name,
        coordinate.latitude,
        coordinate.longitude,
    )


@dataclass
class ProximityMonitor:
    """Tracks whether a session is near a supermarket.

    Each fix asks the lookup for stores within ``detection_radius_km`` and
    checks whether any of them lies within ``very_close_radius_km``. Moving
    from FAR to NEAR fires the notifier once; moving back to FAR only flips
    the state. Lookup failures leave the state untouched.
    """

    lookup: StoreLookup
    state: ProximityState = field(default_factory=ProximityState)
    notifier: EnterNotifier | None = None
    detection_radius_km: float = 1.0
    very_close_radius_km: float = 0.5
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def evaluate_proximity(self, coordinate: Coordinate) -> ProximityEvaluation:
        """Apply a location fix and report the resulting state."""
        async with self._lock:
            try:
                stores = await self.lookup.find_nearby(
                    coordinate, self.detection_radius_km
                )
            except LookupFailure as exc:
                _logger.warning("Nearby lookup failed, keeping state: %s", exc)
                return ProximityEvaluation(
                    state=self.state.status, changed=False, lookup_failed=True
                )

            # Lookup distances can be rounded, so measure again.
            very_close = rank(stores, coordinate, self.very_close_radius_km)
            was_near = self.state.is_near
            self.state.is_near = bool(very_close)
            self.state.last_coordinate = coordinate
            self.state.last_evaluated_at = datetime.now(tz=UTC)

            changed = was_near != self.state.is_near
            notified = False
            if changed and self.state.is_near:
                _logger.info("Entered near-supermarket area: %s", very_close[0].name)
                notified = await self._notify(coordinate, very_close)
            elif changed:
                _logger.info("Left near-supermarket area")
            return ProximityEvaluation(
                state=self.state.status, changed=changed, notified=notified
            )

    async def _notify(self, coordinate: Coordinate, stores: list[StoreRecord]) -> bool:
        if self.notifier is None:
            return False
        try:
            await self.notifier(coordinate, stores)
        except Exception:
            _logger.exception("Near-supermarket notifier failed")
            return False
        return True


@dataclass
class _Session:
    monitor: ProximityMonitor
    last_seen: datetime


@dataclass
class ProximityRegistry:
    """Holds one proximity monitor per client session.

    Sessions idle for longer than ``idle_ttl_seconds`` are dropped, and once
    ``max_sessions`` is reached the least recently used session is evicted.
    """

    lookup: StoreLookup
    detection_radius_km: float = 1.0
    very_close_radius_km: float = 0.5
    notifier: EnterNotifier | None = None
    max_sessions: int = 1024
    idle_ttl_seconds: int = 3600
    _sessions: OrderedDict[str, _Session] = field(
        default_factory=OrderedDict, init=False, repr=False
    )

    def get(self, session_id: str) -> ProximityMonitor:
        """Return the monitor for a session, creating it on first use."""
        now = datetime.now(tz=UTC)
        self._evict_idle(now)
        session = self._sessions.pop(session_id, None)
        if session is None:
            monitor = ProximityMonitor(
                lookup=self.lookup,
                notifier=self.notifier,
                detection_radius_km=self.detection_radius_km,
                very_close_radius_km=self.very_close_radius_km,
            )
            session = _Session(monitor=monitor, last_seen=now)
        session.last_seen = now
        self._sessions[session_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            _logger.info("Evicted proximity session %s", evicted)
        return session.monitor

    def peek(self, session_id: str) -> ProximityState | None:
        """Return the state for a session without creating one."""
        self._evict_idle(datetime.now(tz=UTC))
        session = self._sessions.get(session_id)
        return session.monitor.state if session else None

    def _evict_idle(self, now: datetime) -> None:
        cutoff = now - timedelta(seconds=self.idle_ttl_seconds)
        while self._sessions:
            session_id, session = next(iter(self._sessions.items()))
            if session.last_seen > cutoff:
                break
            del self._sessions[session_id]

    def __len__(self) -> int:
        return len(self._sessions)
