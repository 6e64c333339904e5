"""FastAPI application routes, middleware, and metrics."""

import time
import uuid

from fastapi import FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from structlog.contextvars import bind_contextvars, clear_contextvars

from app.earthquake_service.earthquakes import search_by_place, search_earthquakes
from app.health.health_check import is_geocoding_available, is_usgs_available
from app.logging_config import logger
from app.models.earthquake import Earthquake
from app.models.health import Dependencies, HealthResponse
from app.models.search import (
    DEFAULT_LIMIT,
    DEFAULT_RADIUS_KM,
    MAX_RADIUS_KM,
    MIN_RADIUS_KM,
    Center,
    PlaceSearchResult,
    SearchResponse,
    SearchState,
    clamp_limit,
)
from app.upstream.client import (
    ExternalAPIError,
    LocationNotFoundError,
    SearchServiceError,
    http_client,
)

app = FastAPI(title="Earthquake Search")

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "path", "status_code"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request duration in seconds", ["path"]
)


@app.middleware("http")
async def request_logging(request: Request, call_next):
    """Log request details, attach a request ID, and record metrics.

    Args:
        request: Incoming HTTP request.
        call_next: FastAPI handler for the next middleware/app.

    Returns:
        The response produced by the downstream handler.
    """
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    bind_contextvars(request_id=request_id)
    start = time.perf_counter()
    response = None
    try:
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response
    finally:
        duration_s = time.perf_counter() - start
        duration_ms = round(duration_s * 1000, 2)
        status_code = getattr(response, "status_code", 500)
        logger.info(
            "HTTP_REQUEST",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
        REQUEST_COUNT.labels(
            method=request.method, path=request.url.path, status_code=status_code
        ).inc()
        REQUEST_LATENCY.labels(path=request.url.path).observe(duration_s)
        clear_contextvars()


@app.exception_handler(LocationNotFoundError)
async def location_not_found_handler(request: Request, exc: LocationNotFoundError):
    """Convert place lookup misses into 404 responses."""
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ExternalAPIError)
async def external_api_error_handler(request: Request, exc: ExternalAPIError):
    """Convert external API errors into 502 responses."""
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(SearchServiceError)
async def search_service_error_handler(request: Request, exc: SearchServiceError):
    """Convert unexpected search errors into 500 responses."""
    return JSONResponse(status_code=500, content={"detail": "Unexpected error"})


@app.get("/")
async def root():
    """Return a basic liveness response."""
    return {"message": "Earthquake search is running"}


@app.get("/earthquakes")
async def get_earthquakes(
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
    radius: float = Query(DEFAULT_RADIUS_KM, ge=MIN_RADIUS_KM, le=MAX_RADIUS_KM),
    limit: int = DEFAULT_LIMIT,
) -> list[Earthquake]:
    """Search earthquakes around a coordinate.

    Args:
        latitude: Centre latitude.
        longitude: Centre longitude.
        radius: Search radius in kilometres.
        limit: Maximum number of results, clamped to 1..20.

    Returns:
        Enriched earthquakes; empty when the upstream search failed.
    """
    async with http_client() as client:
        return await search_earthquakes(
            client, latitude, longitude, radius, clamp_limit(limit)
        )


@app.get("/earthquakes/place")
async def get_earthquakes_by_place(
    place: str,
    radius: float = Query(DEFAULT_RADIUS_KM, ge=MIN_RADIUS_KM, le=MAX_RADIUS_KM),
    limit: int = DEFAULT_LIMIT,
) -> PlaceSearchResult:
    """Search earthquakes around a geocoded place name.

    Args:
        place: Place, address, or landmark to search around.
        radius: Search radius in kilometres.
        limit: Maximum number of results, clamped to 1..20.

    Returns:
        The geocoded centre and the earthquakes found around it.

    Raises:
        LocationNotFoundError: When the place could not be resolved.
    """
    place = place.strip()
    if not place:
        raise HTTPException(status_code=422, detail="place must not be blank")
    async with http_client() as client:
        result = await search_by_place(client, place, radius, clamp_limit(limit))
    if result is None:
        raise LocationNotFoundError(f"Location not found: {place}")
    return result


@app.get("/search")
async def search_from_url_state(request: Request) -> SearchResponse:
    """Run the search described by the UI's URL query string.

    Args:
        request: Incoming request carrying lat, lng, radius, limit, place.

    Returns:
        The normalised state, its canonical query, the map centre, and the
        earthquakes found.
    """
    state = SearchState.from_query(request.query_params)
    center = Center(latitude=state.lat, longitude=state.lng)
    earthquakes = []
    async with http_client() as client:
        if state.mode == "place":
            result = await search_by_place(client, state.place, state.radius, state.limit)
            if result is not None:
                center = Center(latitude=result.latitude, longitude=result.longitude)
                earthquakes = result.earthquakes
        else:
            earthquakes = await search_earthquakes(
                client, state.lat, state.lng, state.radius, state.limit
            )
    return SearchResponse(
        state=state, query=state.to_query(), center=center, earthquakes=earthquakes
    )


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report API health and dependency availability.

    Returns:
        A HealthResponse containing dependency status.
    """
    return HealthResponse(
        status="ok",
        dependencies=Dependencies(
            usgs_api=await is_usgs_available(),
            geocoding_api=await is_geocoding_available(),
        ),
    )


@app.get("/metrics")
async def metrics():
    """Expose Prometheus metrics for scraping."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
