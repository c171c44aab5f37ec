"""Location and proximity domain models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from freshcart.domain.geo import Coordinate


class LocationErrorKind(str, Enum):
    """Failure classes reported by a location provider."""

    PERMISSION_DENIED = "PERMISSION_DENIED"
    POSITION_UNAVAILABLE = "POSITION_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
    NOT_SUPPORTED = "NOT_SUPPORTED"


class LocationError(Exception):
    """Base error for location acquisition failures."""

    kind: LocationErrorKind = LocationErrorKind.POSITION_UNAVAILABLE
    fatal: bool = False


class PermissionDeniedError(LocationError):
    """The user denied location access."""

    kind = LocationErrorKind.PERMISSION_DENIED
    fatal = True


class PositionUnavailableError(LocationError):
    """The platform could not determine a position."""

    kind = LocationErrorKind.POSITION_UNAVAILABLE


class LocationTimeoutError(LocationError):
    """The position request timed out."""

    kind = LocationErrorKind.TIMEOUT


class NotSupportedError(LocationError):
    """The platform has no location capability."""

    kind = LocationErrorKind.NOT_SUPPORTED
    fatal = True


class ProximityStatus(str, Enum):
    """Whether the user is near a supermarket."""

    FAR = "FAR"
    NEAR = "NEAR"


@dataclass
class ProximityState:
    """Mutable near-supermarket state for one session."""

    is_near: bool = False
    last_evaluated_at: datetime | None = None
    last_coordinate: Coordinate | None = None

    @property
    def status(self) -> ProximityStatus:
        return ProximityStatus.NEAR if self.is_near else ProximityStatus.FAR


@dataclass(frozen=True)
class ProximityEvaluation:
    """Result of applying one location fix."""

    state: ProximityStatus
    changed: bool
    notified: bool = False
    lookup_failed: bool = False
