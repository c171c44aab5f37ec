"""Location acquisition with a low-accuracy fallback."""

import logging
from dataclasses import dataclass
from typing import Protocol

from freshcart.config import Settings
from freshcart.domain.geo import Coordinate
from freshcart.domain.location import (
    LocationError,
    LocationErrorKind,
    PositionUnavailableError,
)

_FALLBACK_KINDS = {
    LocationErrorKind.POSITION_UNAVAILABLE,
    LocationErrorKind.TIMEOUT,
}

_logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    """Interface for the platform location capability."""

    async def get_current_position(
        self, *, high_accuracy: bool, timeout_ms: int, max_age_ms: int
    ) -> Coordinate:
        """Return a position fix or raise a LocationError."""


@dataclass
class LocationService:
    """Obtains a fix, retrying once in low-accuracy mode on transient errors."""

    provider: LocationProvider
    high_accuracy_timeout_ms: int = 8000
    high_accuracy_max_age_ms: int = 60000
    low_accuracy_timeout_ms: int = 15000
    low_accuracy_max_age_ms: int = 300000

    @classmethod
    def from_settings(
        cls, provider: LocationProvider, settings: Settings
    ) -> "LocationService":
        """Create a service using the configured timeouts and max ages."""
        return cls(
            provider=provider,
            high_accuracy_timeout_ms=settings.high_accuracy_timeout_ms,
            high_accuracy_max_age_ms=settings.high_accuracy_max_age_ms,
            low_accuracy_timeout_ms=settings.low_accuracy_timeout_ms,
            low_accuracy_max_age_ms=settings.low_accuracy_max_age_ms,
        )

    async def acquire(self) -> Coordinate:
        """Return the current coordinate.

        Permission and capability errors are raised immediately. Unavailable
        and timeout errors trigger one low-accuracy attempt; if that also
        fails transiently a recoverable PositionUnavailableError is raised.
        """
        try:
            return await self.provider.get_current_position(
                high_accuracy=True,
                timeout_ms=self.high_accuracy_timeout_ms,
                max_age_ms=self.high_accuracy_max_age_ms,
            )
        except LocationError as exc:
            if exc.kind not in _FALLBACK_KINDS:
                raise
            _logger.info("High accuracy fix failed (%s), trying fallback", exc.kind)

        try:
            coordinate = await self.provider.get_current_position(
                high_accuracy=False,
                timeout_ms=self.low_accuracy_timeout_ms,
                max_age_ms=self.low_accuracy_max_age_ms,
            )
        except LocationError as exc:
            if exc.kind not in _FALLBACK_KINDS:
                raise
            _logger.warning("Low accuracy location failed: %s", exc.kind)
            raise PositionUnavailableError("Location unavailable") from exc
        _logger.info("Using approximate location")
        return coordinate
