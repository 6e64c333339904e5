"""Earthquake search orchestration: USGS query, geocoding, enrichment."""

import asyncio
from typing import Optional

import httpx
from pydantic import ValidationError

from app import config
from app.geocoding.geocoding import geocode_place, get_location_details
from app.logging_config import logger
from app.models.earthquake import Earthquake
from app.models.search import DEFAULT_LIMIT, PlaceSearchResult
from app.upstream.client import ExternalAPIError, SearchServiceError, get_json


async def fetch_earthquakes(
    client: httpx.AsyncClient,
    latitude: float,
    longitude: float,
    max_radius_km: float,
    limit: int = DEFAULT_LIMIT,
) -> list[Earthquake]:
    """Query the USGS event service for earthquakes around a point.

    Args:
        client: Client to issue the request with.
        latitude: Centre latitude in decimal degrees.
        longitude: Centre longitude in decimal degrees.
        max_radius_km: Search radius in kilometres.
        limit: Maximum number of events to return.

    Returns:
        Earthquakes in the order USGS returned them; malformed features are
        skipped.

    Raises:
        ExternalAPIError: If the request fails or the payload has no feature
            list.
    """
    data = await get_json(
        client,
        url=f"{config.USGS_API_URL}/query",
        params={
            "format": "geojson",
            "latitude": latitude,
            "longitude": longitude,
            "maxradiuskm": max_radius_km,
            "limit": limit,
        },
        event_prefix="USGS_QUERY",
        log_context={"latitude": latitude, "longitude": longitude},
        error_message="Earthquake lookup failed",
    )
    features = data.get("features") if isinstance(data, dict) else None
    if not isinstance(features, list):
        logger.error("USGS_QUERY_BAD_PAYLOAD", latitude=latitude, longitude=longitude)
        raise ExternalAPIError("Earthquake lookup failed")

    earthquakes = []
    for feature in features:
        try:
            earthquakes.append(Earthquake.model_validate(feature))
        except ValidationError as exc:
            # Only the malformed feature is dropped.
            logger.error(
                "USGS_QUERY_BAD_FEATURE",
                earthquake_id=feature.get("id") if isinstance(feature, dict) else None,
                error=str(exc),
            )
    return earthquakes


async def enrich_earthquake(client: httpx.AsyncClient, quake: Earthquake) -> Earthquake:
    """Attach reverse-geocoded location details to an earthquake.

    Args:
        client: Client to issue the request with.
        quake: Event to enrich.

    Returns:
        The enriched event, or the original one if enrichment failed.
    """
    try:
        details = await get_location_details(client, quake.latitude, quake.longitude)
    except Exception as exc:
        logger.error("ENRICH_FAILED", earthquake_id=quake.id, error=str(exc))
        return quake
    if details is None:
        return quake
    return quake.with_location_details(details)


async def search_earthquakes(
    client: httpx.AsyncClient,
    latitude: float,
    longitude: float,
    max_radius_km: float,
    limit: int = DEFAULT_LIMIT,
) -> list[Earthquake]:
    """Search earthquakes around a coordinate and enrich each result.

    Args:
        client: Client to issue the requests with.
        latitude: Centre latitude in decimal degrees.
        longitude: Centre longitude in decimal degrees.
        max_radius_km: Search radius in kilometres.
        limit: Maximum number of events to return.

    Returns:
        Enriched earthquakes, or an empty list if the search failed.
    """
    try:
        earthquakes = await fetch_earthquakes(
            client, latitude, longitude, max_radius_km, limit
        )
    except SearchServiceError as exc:
        logger.error(
            "EARTHQUAKE_SEARCH_FAILED",
            latitude=latitude,
            longitude=longitude,
            error=str(exc),
        )
        return []

    enriched = await asyncio.gather(
        *(enrich_earthquake(client, quake) for quake in earthquakes)
    )
    if enriched:
        first = enriched[0]
        logger.info(
            "EARTHQUAKE_SEARCH_RESULTS",
            count=len(enriched),
            first_id=first.id,
            first_has_location_details=first.properties.location_details is not None,
        )
    return list(enriched)


async def search_by_place(
    client: httpx.AsyncClient,
    place: str,
    max_radius_km: float,
    limit: int = DEFAULT_LIMIT,
) -> Optional[PlaceSearchResult]:
    """Geocode a place name and search earthquakes around it.

    Args:
        client: Client to issue the requests with.
        place: Free-form place, address, or landmark.
        max_radius_km: Search radius in kilometres.
        limit: Maximum number of events to return.

    Returns:
        The geocoded centre and its earthquakes, or None if the place could
        not be resolved.
    """
    try:
        latitude, longitude = await geocode_place(client, place)
    except SearchServiceError as exc:
        logger.error("PLACE_SEARCH_FAILED", place=place, error=str(exc))
        return None

    earthquakes = await search_earthquakes(
        client, latitude, longitude, max_radius_km, limit
    )
    return PlaceSearchResult(
        latitude=latitude, longitude=longitude, earthquakes=earthquakes
    )
