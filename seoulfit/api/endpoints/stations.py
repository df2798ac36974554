"""
API Endpoints for Cache-backed Station Data

This module defines the FastAPI route handlers that serve subway and bike
rental stations from the in-memory dataset cache.

Key Responsibilities:
---------------------
- Validate query parameters of the nearby bike station search.
- Delegate to the cache-backed services, which initialize a cold cache on demand.
- Wrap results in the `{"success": true, "data": ...}` envelope used by the frontend.
- Convert unexpected failures into a 500 JSON error body.

Error Responses:
----------------
- 400 `{"error": ...}`: missing or invalid `lat`/`lng`/`radius`.
- 503 `{"error": ...}`: dataset never loaded in this process (see `register_exception_handlers`).
- 500 `{"error": ...}`: any other failure, including a failed on-demand initialization.

Typical Use:
------------
    GET /api/bike-stations?lat=37.5665&lng=126.9780&radius=1.5
    GET /api/subway
"""

import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from seoulfit.core.config import DEFAULT_BIKE_RADIUS_KM
from seoulfit.data.cache_guard import DatasetUnavailableError
from seoulfit.services.bike_station import search_nearby_bike_stations, validate_search_params
from seoulfit.services.models import BikeStationSearchResult, CamelModel, SubwayStationListResult
from seoulfit.services.subway import fetch_all_subway_stations

logger = logging.getLogger(__name__)
router = APIRouter()


class BikeStationsResponse(CamelModel):
    success: bool
    data: BikeStationSearchResult


class SubwayStationsResponse(CamelModel):
    success: bool
    data: SubwayStationListResult


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/bike-stations", response_model=BikeStationsResponse)
async def get_bike_stations(
    request: Request,
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    radius: Optional[str] = None
):
    """
    Lists bike rental stations within `radius` km (default 1.5) of the given position.

    Args:
        request (Request): FastAPI request object carrying the cache and scheduler in app state.
        lat (Optional[str]): Latitude of the search center.
        lng (Optional[str]): Longitude of the search center.
        radius (Optional[str]): Search radius in kilometers.

    Returns:
        BikeStationsResponse | JSONResponse: Matching stations or an error body.
    """
    coords = validate_search_params(lat, lng)
    if not coords:
        return error_response("Valid latitude (lat) and longitude (lng) parameters are required.", 400)

    try:
        search_radius = float(radius) if radius else DEFAULT_BIKE_RADIUS_KM
    except ValueError:
        return error_response("radius must be a number of kilometers.", 400)
    if not search_radius > 0:
        return error_response("radius must be a number of kilometers.", 400)

    try:
        result = await search_nearby_bike_stations(
            request.app.state.cache,
            request.app.state.scheduler,
            lat=coords[0],
            lng=coords[1],
            radius=search_radius,
        )
    except DatasetUnavailableError:
        raise
    except Exception as e:
        logger.error(f"Bike station lookup failed: {e}", exc_info=True)
        return error_response(str(e) or "Internal server error.", 500)

    logger.info(f"Found {result.count} bike stations within {search_radius} km of {coords}.")
    return BikeStationsResponse(success=True, data=result)


@router.get("/subway", response_model=SubwayStationsResponse)
async def get_subway_stations(request: Request):
    """
    Lists every subway station in the cached station master.

    Returns:
        SubwayStationsResponse | JSONResponse: All stations or an error body.
    """
    try:
        result = await fetch_all_subway_stations(
            request.app.state.cache,
            request.app.state.scheduler,
        )
    except DatasetUnavailableError:
        raise
    except Exception as e:
        logger.error(f"Subway station lookup failed: {e}", exc_info=True)
        return error_response(str(e) or "Internal server error.", 500)

    return SubwayStationsResponse(success=True, data=result)
