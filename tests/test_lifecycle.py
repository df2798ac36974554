from fastapi import FastAPI
from fastapi.testclient import TestClient

from seoulfit.api.endpoints.init import router as init_router
from seoulfit.api.endpoints.stations import router as stations_router
from seoulfit.core.cache import CacheStore
from seoulfit.core.config import API_PREFIX, FRONTEND, SUBWAY_STATIONS_KEY
from seoulfit.core.middleware import register_exception_handlers, register_middleware
from seoulfit.data.scheduler import DataScheduler
from seoulfit.data.seoul_api import SeoulApiError
from seoulfit.lifecycle.shutdown import bind_shutdown_event
from seoulfit.lifecycle.startup import bind_startup_event


def build_app(monkeypatch, cache, scheduler):
    monkeypatch.setattr("seoulfit.lifecycle.startup.server_cache", cache)
    monkeypatch.setattr("seoulfit.lifecycle.startup.data_scheduler", scheduler)

    app = FastAPI()
    register_middleware(app)
    register_exception_handlers(app)
    app.include_router(stations_router, prefix=API_PREFIX)
    app.include_router(init_router, prefix=API_PREFIX)
    bind_startup_event(app)
    bind_shutdown_event(app)
    return app


def test_startup_warms_cache_and_shutdown_stops_refresh(monkeypatch, make_loader, subway_rows, bike_rows):
    cache = CacheStore()
    scheduler = DataScheduler(cache, make_loader(subway_rows), make_loader(bike_rows), refresh_interval=3600)
    app = build_app(monkeypatch, cache, scheduler)

    with TestClient(app) as client:
        assert app.state.cache is cache
        assert app.state.scheduler is scheduler
        assert scheduler.initialized is True
        assert scheduler.refresh_running is True
        response = client.get("/api/subway")

    assert response.status_code == 200
    assert response.json()["data"]["count"] == len(subway_rows)
    assert scheduler.refresh_running is False


def test_startup_survives_failed_initialization(monkeypatch, make_loader, bike_rows):
    class FailingOnce(DataScheduler):
        attempts = 0

        async def initialize(self):
            self.attempts += 1
            if self.attempts == 1:
                raise SeoulApiError("upstream down")
            await super().initialize()

    cache = CacheStore()
    scheduler = FailingOnce(cache, make_loader(), make_loader(bike_rows), refresh_interval=3600)
    app = build_app(monkeypatch, cache, scheduler)

    with TestClient(app) as client:
        assert scheduler.initialized is False
        response = client.post("/api/init")
        retried = client.get("/api/init")

    assert response.status_code == 200
    assert response.json()["status"]["initialized"] is False
    assert retried.status_code == 200
    assert SUBWAY_STATIONS_KEY in retried.json()["status"]["cacheStatus"]


def test_cors_allows_frontend_origin(monkeypatch, make_loader):
    scheduler = DataScheduler(CacheStore(), make_loader(), make_loader(), refresh_interval=3600)
    app = build_app(monkeypatch, scheduler.cache, scheduler)

    with TestClient(app) as client:
        response = client.post("/api/init", headers={"Origin": FRONTEND})

    assert response.headers["access-control-allow-origin"] == FRONTEND
