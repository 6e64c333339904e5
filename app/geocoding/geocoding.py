"""Forward and reverse geocoding against Nominatim."""

import asyncio
from typing import Optional

import httpx
from pydantic import ValidationError

from app import config
from app.logging_config import logger
from app.models.earthquake import LocationDetails
from app.upstream.client import (
    ExternalAPIError,
    LocationNotFoundError,
    get_json,
)


async def geocode_place(client: httpx.AsyncClient, place: str) -> tuple[float, float]:
    """Resolve a place name to coordinates.

    Args:
        client: Client to issue the request with.
        place: Free-form place, address, or landmark.

    Returns:
        A (latitude, longitude) tuple for the best match.

    Raises:
        LocationNotFoundError: If the geocoder returns no matches.
        ExternalAPIError: If the request fails or the payload is invalid.
    """
    data = await get_json(
        client,
        url=f"{config.NOMINATIM_URL}/search",
        params={"format": "json", "q": place, "limit": 1},
        event_prefix="GEOCODE_SEARCH",
        log_context={"place": place},
        error_message="Place lookup failed",
    )
    if not data:
        raise LocationNotFoundError(f"Location not found: {place}")
    try:
        location = data[0]
        return float(location["lat"]), float(location["lon"])
    except (TypeError, KeyError, IndexError, ValueError) as exc:
        logger.error("GEOCODE_SEARCH_BAD_PAYLOAD", place=place, error=str(exc))
        raise ExternalAPIError("Place lookup failed") from exc


async def get_location_details(
    client: httpx.AsyncClient, latitude: float, longitude: float
) -> Optional[LocationDetails]:
    """Reverse geocode a coordinate into location details.

    A short delay precedes each call to stay friendly with Nominatim's usage
    policy. Failures are logged and reported as None.

    Args:
        client: Client to issue the request with.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.

    Returns:
        LocationDetails for the coordinate, or None if the lookup failed.
    """
    if config.REVERSE_GEOCODE_DELAY_S > 0:
        await asyncio.sleep(config.REVERSE_GEOCODE_DELAY_S)

    log_context = {"latitude": latitude, "longitude": longitude}
    try:
        data = await get_json(
            client,
            url=f"{config.NOMINATIM_URL}/reverse",
            params={"format": "json", "lat": latitude, "lon": longitude},
            event_prefix="GEOCODE_REVERSE",
            log_context=log_context,
            error_message="Reverse geocoding failed",
        )
    except ExternalAPIError:
        return None

    if isinstance(data, dict) and "error" in data:
        logger.info("GEOCODE_REVERSE_NO_MATCH", **log_context, error=data["error"])
        return None

    try:
        details = LocationDetails(
            display_name=data.get("display_name"),
            address=data.get("address"),
            lat=data.get("lat"),
            lon=data.get("lon"),
        )
    except (AttributeError, ValidationError) as exc:
        logger.error("GEOCODE_REVERSE_BAD_PAYLOAD", **log_context, error=str(exc))
        return None

    logger.debug(
        "GEOCODE_REVERSE_DETAILS",
        **log_context,
        display_name=details.display_name,
        address_keys=sorted(details.address.filled()) if details.address else [],
    )
    return details
