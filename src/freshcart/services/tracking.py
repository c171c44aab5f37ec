"""Location refresh feeding the proximity monitor."""

from dataclasses import dataclass

from freshcart.config import Settings
from freshcart.domain.geo import Coordinate
from freshcart.domain.location import (
    LocationError,
    LocationErrorKind,
    ProximityEvaluation,
)
from freshcart.services.location import LocationProvider, LocationService
from freshcart.services.proximity import ProximityMonitor


@dataclass(frozen=True)
class TrackingUpdate:
    """Outcome of one location refresh."""

    coordinate: Coordinate | None
    evaluation: ProximityEvaluation | None
    error_kind: LocationErrorKind | None = None

    @property
    def recoverable(self) -> bool:
        return self.error_kind is not None


@dataclass
class LocationTracker:
    """Acquires a fix and applies it to a proximity monitor."""

    location_service: LocationService
    monitor: ProximityMonitor

    @classmethod
    def from_settings(
        cls,
        provider: LocationProvider,
        monitor: ProximityMonitor,
        settings: Settings,
    ) -> "LocationTracker":
        """Create a tracker whose acquisition policy follows the settings."""
        return cls(
            location_service=LocationService.from_settings(provider, settings),
            monitor=monitor,
        )

    async def refresh(self) -> TrackingUpdate:
        """Run one acquisition and proximity evaluation.

        Fatal location errors propagate; transient ones are returned as an
        update the caller can retry later.
        """
        try:
            coordinate = await self.location_service.acquire()
        except LocationError as exc:
            if exc.fatal:
                raise
            return TrackingUpdate(coordinate=None, evaluation=None, error_kind=exc.kind)
        evaluation = await self.monitor.evaluate_proximity(coordinate)
        return TrackingUpdate(coordinate=coordinate, evaluation=evaluation)
