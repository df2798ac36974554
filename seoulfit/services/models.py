"""
Response Models for Cache-backed Services

Pydantic models describing what the cache consumers hand back to the API
layer. Field names are snake_case in Python and camelCase on the wire, which
is what the map frontend expects.

Main Components:
----------------
- `SubwayStation` / `SubwayStationListResult`: Full subway station listing.
- `BikeStation` / `BikeStationSearchResult`: Nearby bike rental station search.
- `CacheStatusModel` / `SchedulerStatusModel`: Scheduler and cache introspection.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubwayStation(CamelModel):
    """
    Subway station as shown on the map.

    Attributes:
        code (str): Marker code, "SUBWAY_" + station id.
        name (str): Station name with the "역" suffix.
        lat (float): Latitude.
        lng (float): Longitude.
        station_id (str): Upstream station id.
        route (str): Line name.
    """
    code: str
    name: str
    lat: float
    lng: float
    station_id: str
    route: str


class SubwayStationListResult(CamelModel):
    count: int
    stations: List[SubwayStation]
    cached: bool
    fetch_time: str


class Coordinates(CamelModel):
    lat: float
    lng: float


class BikeStation(CamelModel):
    """
    Bike rental station as shown on the map.

    Availability counts are passed through as the upstream strings.
    """
    code: str
    name: str
    lat: float
    lng: float
    distance: Optional[float] = None
    station_id: str
    rack_tot_cnt: str
    parking_bike_tot_cnt: str
    shared: str


class BikeStationSearchResult(CamelModel):
    center: Coordinates
    radius: float
    count: int
    stations: List[BikeStation]
    cached: bool
    fetch_time: str


class CacheStatusModel(CamelModel):
    timestamp: int
    is_static: bool
    data_size: int


class SchedulerStatusModel(CamelModel):
    initialized: bool
    cache_status: Dict[str, CacheStatusModel]
