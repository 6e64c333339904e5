"""Health checks for the USGS and Nominatim APIs."""

from typing import Optional

import httpx

from app import config
from app.logging_config import logger
from app.models.health import ServiceStatus
from app.upstream.client import http_client


async def _probe(url: str, name: str, params: Optional[dict] = None) -> ServiceStatus:
    try:
        async with http_client() as client:
            response = await client.get(url, params=params)
    except httpx.HTTPError as exc:
        logger.error(f"{name}_UNAVAILABLE", error=str(exc))
        return ServiceStatus.not_available
    if response.status_code != 200:
        logger.error(f"{name}_UNAVAILABLE", status=response.status_code)
        return ServiceStatus.not_available
    return ServiceStatus.available


async def is_usgs_available() -> ServiceStatus:
    """Check the USGS event service.

    Returns:
        ServiceStatus.available when the version endpoint answers 200.
    """
    return await _probe(f"{config.USGS_API_URL}/version", "USGS")


async def is_geocoding_available() -> ServiceStatus:
    """Check the Nominatim geocoder.

    Returns:
        ServiceStatus.available when the status endpoint answers 200.
    """
    return await _probe(
        f"{config.NOMINATIM_URL}/status", "GEOCODING", params={"format": "json"}
    )
