"""
Main Application Entry Point

This script initializes the FastAPI application serving Seoul public-data
datasets (subway stations, bike rental stations) to the Seoul Fit map frontend.

Key Responsibilities:
---------------------
- Sets up unified structured logging.
- Instantiates the FastAPI app and registers API routes.
- Configures CORS middleware for the map frontend and per-request logging.
- Maps cold-cache failures to 503 responses.

Application Lifecycle:
-----------------------
- @startup: load the subway station list once, load bike stations, start the 60 s refresh.
- @shutdown: cancel the refresh task.

Typical Use:
------------
This module should be specified as the app entry point when running the FastAPI server,
e.g., using `uvicorn`:

    uvicorn main:app --reload
"""
from fastapi import FastAPI

from seoulfit.api.endpoints.init import router as init_router
from seoulfit.api.endpoints.stations import router as stations_router
from seoulfit.core.config import API_PREFIX, ROOT_PATH
from seoulfit.core.logger import setup_logging
from seoulfit.core.middleware import register_exception_handlers, register_middleware
from seoulfit.lifecycle.startup import bind_startup_event
from seoulfit.lifecycle.shutdown import bind_shutdown_event

setup_logging()

app = FastAPI(root_path=ROOT_PATH)
register_middleware(app)
register_exception_handlers(app)
app.include_router(stations_router, prefix=API_PREFIX, tags=["stations"])
app.include_router(init_router, prefix=API_PREFIX, tags=["cache"])

bind_startup_event(app)
bind_shutdown_event(app)
