"""
Typed Data Structures for the Dataset Cache

This module defines the `TypedDict`-based data contracts shared by the cache
store, the dataset loaders and the refresh scheduler.

Key Structures:
---------------
- `SubwayStationRow` / `BikeStationRow`: Raw rows as returned by the Seoul Open Data API.
- `CacheEntry`: One cached dataset snapshot with its write time and refresh policy.
- `CacheInfo`: Entry metadata without the payload (used for "data as of" reporting).
- `CacheStatusEntry`: Entry metadata plus payload size (used by the status endpoint).
- `SchedulerStatus`: Scheduler flag combined with the cache status.

Usage:
------
    from seoulfit.core.data_types import BikeStationRow
    rows: List[BikeStationRow] = cache.get(BIKE_STATIONS_KEY) or []

Notes:
------
- These are used as **non-enforced typing helpers** and will not raise at runtime.
- Upstream rows keep the upstream field names and string-typed values untouched.
"""


from typing import Any, Dict, TypedDict


class SubwayStationRow(TypedDict):
    """
    Row of the `subwayStationMaster` service.

    Attributes:
        BLDN_ID (str): Station identifier.
        BLDN_NM (str): Station name without the "역" suffix.
        ROUTE (str): Line name.
        LAT (str): Latitude (WGS84) as text.
        LOT (str): Longitude (WGS84) as text.
    """
    BLDN_ID: str
    BLDN_NM: str
    ROUTE: str
    LAT: str
    LOT: str


class BikeStationRow(TypedDict):
    """
    Row of the `bikeList` (Ttareungyi rental status) service.

    Attributes:
        rackTotCnt (str): Number of docks.
        stationName (str): Display name of the rental station.
        parkingBikeTotCnt (str): Bikes currently available.
        shared (str): Occupancy ratio in percent.
        stationLatitude (str): Latitude (WGS84) as text.
        stationLongitude (str): Longitude (WGS84) as text.
        stationId (str): Station identifier.
    """
    rackTotCnt: str
    stationName: str
    parkingBikeTotCnt: str
    shared: str
    stationLatitude: str
    stationLongitude: str
    stationId: str


class CacheEntry(TypedDict):
    """
    Latest snapshot of one dataset.

    Attributes:
        data (Any): Dataset payload, opaque to the cache.
        timestamp (int): Epoch milliseconds of the last successful write.
        is_static (bool): True if loaded once, False if refreshed periodically.
    """
    data: Any
    timestamp: int
    is_static: bool


class CacheInfo(TypedDict):
    timestamp: int
    is_static: bool


class CacheStatusEntry(TypedDict):
    timestamp: int
    is_static: bool
    data_size: int


class SchedulerStatus(TypedDict):
    """
    Scheduler introspection result.

    Attributes:
        initialized (bool): Whether `initialize()` has completed.
        cache_status (Dict[str, CacheStatusEntry]): Per-key cache metadata.
    """
    initialized: bool
    cache_status: Dict[str, CacheStatusEntry]
