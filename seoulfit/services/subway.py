"""
Subway Station Listing

Serves the full subway station list from the static cache entry, converting
upstream rows into map-ready stations.
"""

import logging
from typing import List

from seoulfit.core.cache import CacheStore, format_timestamp
from seoulfit.core.config import SUBWAY_STATIONS_KEY
from seoulfit.core.data_types import SubwayStationRow
from seoulfit.data.cache_guard import require_dataset
from seoulfit.data.scheduler import DataScheduler
from seoulfit.services.models import SubwayStation, SubwayStationListResult

logger = logging.getLogger(__name__)


def transform_subway_station(station: SubwayStationRow) -> SubwayStation:
    return SubwayStation(
        code=f"SUBWAY_{station['BLDN_ID']}",
        name=f"{station['BLDN_NM']}역",
        lat=float(station["LAT"]),
        lng=float(station["LOT"]),
        station_id=station["BLDN_ID"],
        route=station["ROUTE"],
    )


async def fetch_all_subway_stations(
    cache: CacheStore,
    scheduler: DataScheduler
) -> SubwayStationListResult:
    """
    Returns every cached subway station.

    Args:
        cache (CacheStore): Dataset cache.
        scheduler (DataScheduler): Used to initialize a cold cache.

    Returns:
        SubwayStationListResult: Stations plus the time the list was cached.

    Raises:
        DatasetUnavailableError: If the station list could not be loaded.
    """
    rows: List[SubwayStationRow] = await require_dataset(SUBWAY_STATIONS_KEY, cache, scheduler)
    info = cache.get_info(SUBWAY_STATIONS_KEY)

    stations: List[SubwayStation] = []
    skipped = 0
    for row in rows:
        try:
            stations.append(transform_subway_station(row))
        except (KeyError, TypeError, ValueError):
            skipped += 1

    if skipped:
        logger.warning(f"Skipped {skipped} subway rows with missing or invalid coordinates.")
    logger.debug(f"Serving {len(stations)} subway stations from cache.")

    return SubwayStationListResult(
        count=len(stations),
        stations=stations,
        cached=True,
        fetch_time=format_timestamp(info["timestamp"] if info else None),
    )
