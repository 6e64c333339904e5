"""Shared HTTP plumbing for the USGS and Nominatim APIs."""

import httpx
from prometheus_client import Counter

from app.config import HTTP_TIMEOUT_S, HTTP_USER_AGENT
from app.logging_config import logger

UPSTREAM_REQUESTS = Counter(
    "upstream_requests_total",
    "Requests made to external APIs",
    ["upstream", "outcome"],
)


class SearchServiceError(Exception):
    """Base exception for earthquake search failures."""
    pass


class LocationNotFoundError(SearchServiceError):
    """Raised when a place name geocodes to no results."""
    pass


class ExternalAPIError(SearchServiceError):
    """Raised when an external API call fails or returns garbage."""
    pass


def http_client() -> httpx.AsyncClient:
    """Build the async client used for one search.

    Returns:
        An AsyncClient carrying the configured timeout and User-Agent.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(HTTP_TIMEOUT_S),
        headers={"User-Agent": HTTP_USER_AGENT},
        follow_redirects=True,
    )


async def get_json(
    client: httpx.AsyncClient,
    *,
    url: str,
    params: dict,
    event_prefix: str,
    log_context: dict,
    error_message: str,
):
    """Execute a single HTTP GET and decode the JSON body.

    Args:
        client: Client to issue the request with.
        url: The URL to call.
        params: Query parameters to include in the request.
        event_prefix: Log event prefix for consistent names.
        log_context: Extra log fields for all events.
        error_message: Error message to wrap in ExternalAPIError.

    Returns:
        The decoded JSON payload.

    Raises:
        ExternalAPIError: When the request fails, returns a non-2xx status,
            or the body is not JSON.
    """
    upstream = event_prefix.split("_")[0].lower()
    try:
        response = await client.get(url, params=params)
        logger.info(
            f"{event_prefix}_RESPONSE", **log_context, status=response.status_code
        )
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as exc:
        logger.error(
            f"{event_prefix}_BAD_STATUS",
            **log_context,
            status=exc.response.status_code,
        )
        UPSTREAM_REQUESTS.labels(upstream=upstream, outcome="bad_status").inc()
        raise ExternalAPIError(error_message) from exc
    except httpx.RequestError as exc:
        logger.error(f"{event_prefix}_REQUEST_FAILED", **log_context, error=str(exc))
        UPSTREAM_REQUESTS.labels(upstream=upstream, outcome="request_failed").inc()
        raise ExternalAPIError(error_message) from exc
    except ValueError as exc:
        logger.error(f"{event_prefix}_BAD_PAYLOAD", **log_context, error=str(exc))
        UPSTREAM_REQUESTS.labels(upstream=upstream, outcome="bad_payload").inc()
        raise ExternalAPIError(error_message) from exc

    UPSTREAM_REQUESTS.labels(upstream=upstream, outcome="ok").inc()
    return payload
