"""Search request, result, and URL state models."""

import math
from typing import Optional

from pydantic import BaseModel, Field

from app.models.earthquake import Earthquake

DEFAULT_LATITUDE = 37.7749
DEFAULT_LONGITUDE = -122.4194
DEFAULT_RADIUS_KM = 10.0
DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 20
MIN_RADIUS_KM = 1.0
MAX_RADIUS_KM = 1000.0


def clamp_limit(limit: int) -> int:
    """Clamp a result limit into the supported range."""
    return min(max(limit, MIN_LIMIT), MAX_LIMIT)


def _parse_float(
    raw: Optional[str], default: float, lower: float, upper: float
) -> float:
    """Parse a float, falling back to the default outside lower..upper."""
    try:
        value = float(raw) if raw not in (None, "") else default
    except ValueError:
        return default
    if not math.isfinite(value) or not lower <= value <= upper:
        return default
    return value


def _parse_int(raw: Optional[str], default: int) -> int:
    try:
        return int(raw) if raw not in (None, "") else default
    except ValueError:
        return default


class Center(BaseModel):
    """Coordinate the search was centred on."""

    latitude: float
    longitude: float


class PlaceSearchResult(BaseModel):
    """Outcome of a place-name search."""

    latitude: float
    longitude: float
    earthquakes: list[Earthquake]


class SearchState(BaseModel):
    """Search parameters carried in the UI's URL query string."""

    lat: float = DEFAULT_LATITUDE
    lng: float = DEFAULT_LONGITUDE
    radius: float = DEFAULT_RADIUS_KM
    limit: int = DEFAULT_LIMIT
    place: str = ""

    @classmethod
    def from_query(cls, params) -> "SearchState":
        """Build a state from raw query parameters.

        Missing, unparseable, non-finite or out-of-range numbers fall back to
        their defaults and the limit is clamped rather than rejected.

        Args:
            params: Mapping of query parameter names to raw string values.

        Returns:
            A populated SearchState.
        """
        return cls(
            lat=_parse_float(params.get("lat"), DEFAULT_LATITUDE, -90, 90),
            lng=_parse_float(params.get("lng"), DEFAULT_LONGITUDE, -180, 180),
            radius=_parse_float(
                params.get("radius"), DEFAULT_RADIUS_KM, MIN_RADIUS_KM, MAX_RADIUS_KM
            ),
            limit=clamp_limit(_parse_int(params.get("limit"), DEFAULT_LIMIT)),
            place=(params.get("place") or "").strip(),
        )

    @property
    def mode(self) -> str:
        return "place" if self.place else "coordinates"

    def to_query(self) -> dict:
        """Render the state as the query parameters the UI pushes to its URL."""
        if self.mode == "place":
            return {
                "place": self.place,
                "radius": str(self.radius),
                "limit": str(self.limit),
            }
        return {
            "lat": str(self.lat),
            "lng": str(self.lng),
            "radius": str(self.radius),
            "limit": str(self.limit),
        }


class SearchResponse(BaseModel):
    """Response for a search seeded from URL state."""

    state: SearchState
    query: dict[str, str]
    center: Center
    earthquakes: list[Earthquake] = Field(default_factory=list)
