"""
Nearby Bike Rental Station Search

Filters the cached bike station feed down to the stations within a radius of
a map position, nearest first.

Key Functions:
--------------
- `validate_search_params`: Parses the `lat`/`lng` query parameters.
- `calculate_distance`: Great-circle distance between two points (haversine, km).
- `search_nearby_bike_stations`: Cache-backed radius search.

Notes:
------
Rows whose coordinates are not numeric are dropped before filtering.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from seoulfit.core.cache import CacheStore, format_timestamp
from seoulfit.core.config import BIKE_STATIONS_KEY, DEFAULT_BIKE_RADIUS_KM, EARTH_RADIUS_KM
from seoulfit.core.data_types import BikeStationRow
from seoulfit.data.cache_guard import require_dataset
from seoulfit.data.scheduler import DataScheduler
from seoulfit.services.models import BikeStation, BikeStationSearchResult, Coordinates

logger = logging.getLogger(__name__)


def validate_search_params(
    lat: Optional[str],
    lng: Optional[str]
) -> Optional[Tuple[float, float]]:
    """
    Parses latitude and longitude query parameters.

    Returns:
        Optional[Tuple[float, float]]: (lat, lng), or None if either is missing or not numeric.
    """
    if not lat or not lng:
        return None
    try:
        parsed_lat, parsed_lng = float(lat), float(lng)
    except ValueError:
        return None
    if np.isnan(parsed_lat) or np.isnan(parsed_lng):
        return None
    return parsed_lat, parsed_lng


def calculate_distance(lat1, lng1, lat2, lng2):
    """
    Haversine distance in kilometers. Works on scalars and numpy arrays alike.
    """
    lat1, lng1, lat2, lng2 = map(np.radians, (lat1, lng1, lat2, lng2))
    d_lat = lat2 - lat1
    d_lng = lng2 - lng1
    a = np.sin(d_lat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(d_lng / 2) ** 2
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def filter_stations_within(
    rows: List[BikeStationRow],
    lat: float,
    lng: float,
    radius: float
) -> pd.DataFrame:
    """
    Selects the stations within `radius` km of (lat, lng), sorted by distance.

    Args:
        rows (List[BikeStationRow]): Raw cached rows.
        lat (float): Search center latitude.
        lng (float): Search center longitude.
        radius (float): Search radius in kilometers.

    Returns:
        pd.DataFrame: Matching rows with parsed `lat`, `lng` and `distance` columns.
    """
    df = pd.DataFrame(rows)
    if df.empty or not {"stationLatitude", "stationLongitude"}.issubset(df.columns):
        return pd.DataFrame(columns=["lat", "lng", "distance"])

    df["lat"] = pd.to_numeric(df["stationLatitude"], errors="coerce")
    df["lng"] = pd.to_numeric(df["stationLongitude"], errors="coerce")
    df = df.dropna(subset=["lat", "lng"]).copy()

    df["distance"] = calculate_distance(lat, lng, df["lat"].to_numpy(), df["lng"].to_numpy())
    df = df[df["distance"] <= radius]
    return df.sort_values("distance", kind="stable")


def transform_bike_station(row: dict) -> BikeStation:
    return BikeStation(
        code=str(row["stationId"]),
        name=str(row["stationName"]),
        lat=float(row["lat"]),
        lng=float(row["lng"]),
        distance=float(row["distance"]),
        station_id=str(row["stationId"]),
        rack_tot_cnt=str(row["rackTotCnt"]),
        parking_bike_tot_cnt=str(row["parkingBikeTotCnt"]),
        shared=str(row["shared"]),
    )


async def search_nearby_bike_stations(
    cache: CacheStore,
    scheduler: DataScheduler,
    lat: float,
    lng: float,
    radius: float = DEFAULT_BIKE_RADIUS_KM
) -> BikeStationSearchResult:
    """
    Finds the cached bike rental stations within a radius, nearest first.

    Args:
        cache (CacheStore): Dataset cache.
        scheduler (DataScheduler): Used to initialize a cold cache.
        lat (float): Search center latitude.
        lng (float): Search center longitude.
        radius (float): Search radius in kilometers (default 1.5).

    Returns:
        BikeStationSearchResult: Matching stations and the time the feed was cached.

    Raises:
        DatasetUnavailableError: If the bike feed has never been loaded.
    """
    rows: List[BikeStationRow] = await require_dataset(BIKE_STATIONS_KEY, cache, scheduler)
    info = cache.get_info(BIKE_STATIONS_KEY)
    logger.debug(f"Searching {len(rows)} cached bike stations within {radius} km.")

    nearby = filter_stations_within(rows, lat, lng, radius)
    stations = [transform_bike_station(row) for row in nearby.to_dict(orient="records")]

    return BikeStationSearchResult(
        center=Coordinates(lat=lat, lng=lng),
        radius=radius,
        count=len(stations),
        stations=stations,
        cached=True,
        fetch_time=format_timestamp(info["timestamp"] if info else None),
    )
