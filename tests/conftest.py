import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from seoulfit.api.endpoints.init import router as init_router
from seoulfit.api.endpoints.stations import router as stations_router
from seoulfit.core.config import API_PREFIX
from seoulfit.core.middleware import register_exception_handlers
from seoulfit.lifecycle.shutdown import bind_shutdown_event


SUBWAY_ROWS = [
    {"BLDN_ID": "0150", "BLDN_NM": "서울", "ROUTE": "1호선", "LAT": "37.55659", "LOT": "126.972307"},
    {"BLDN_ID": "0151", "BLDN_NM": "시청", "ROUTE": "1호선", "LAT": "37.565715", "LOT": "126.977088"},
    {"BLDN_ID": "0152", "BLDN_NM": "종각", "ROUTE": "1호선", "LAT": "37.570161", "LOT": "126.982923"},
    {"BLDN_ID": "0153", "BLDN_NM": "종로3가", "ROUTE": "1호선", "LAT": "37.571607", "LOT": "126.991806"},
    {"BLDN_ID": "0154", "BLDN_NM": "종로5가", "ROUTE": "1호선", "LAT": "37.570926", "LOT": "127.001849"},
]


def bike_row(station_id, name, lat, lng, bikes="5"):
    return {
        "rackTotCnt": "10",
        "stationName": name,
        "parkingBikeTotCnt": bikes,
        "shared": "50",
        "stationLatitude": lat,
        "stationLongitude": lng,
        "stationId": station_id,
    }


BIKE_ROWS = [
    # ~0.1 km from City Hall
    bike_row("ST-1", "102. 시청역 1번출구", "37.5657", "126.9780"),
    # ~0.5 km
    bike_row("ST-2", "103. 광화문역", "37.5710", "126.9768"),
    # ~1.3 km
    bike_row("ST-3", "104. 서울역", "37.5560", "126.9720"),
    # ~12 km, outside the default radius
    bike_row("ST-4", "500. 잠실역", "37.5133", "127.1001"),
    bike_row("ST-5", "999. 좌표 없음", "", "126.9780"),
]

CITY_HALL = (37.5665, 126.9780)


class FakeLoader:
    """Async dataset loader returning fixed rows or raising, counting its calls."""

    def __init__(self, rows=None, error=None, delay=0.0):
        self.rows = rows if rows is not None else []
        self.error = error
        self.delay = delay
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.rows)


@pytest.fixture
def make_loader():
    return FakeLoader


@pytest.fixture
def subway_rows():
    return [dict(row) for row in SUBWAY_ROWS]


@pytest.fixture
def bike_rows():
    return [dict(row) for row in BIKE_ROWS]


@pytest.fixture
def no_grace_period(monkeypatch):
    monkeypatch.setattr("seoulfit.data.cache_guard.CACHE_GRACE_PERIOD", 0.0)


@pytest.fixture
def make_client():
    """
    Builds a TestClient over an app exposing the API routes with the given
    cache and scheduler in app state. Use it as a context manager so the
    scheduler is stopped on exit.
    """
    def factory(cache, scheduler):
        app = FastAPI()
        register_exception_handlers(app)
        app.include_router(stations_router, prefix=API_PREFIX)
        app.include_router(init_router, prefix=API_PREFIX)
        bind_shutdown_event(app)
        app.state.cache = cache
        app.state.scheduler = scheduler
        return TestClient(app)
    return factory
