"""
Startup Logic for the Seoul Fit Data Service

This module defines startup routines that are executed once when the FastAPI app launches.

Responsibilities:
-----------------
- Publish the process-wide cache and scheduler on `app.state` for route handlers.
- Eagerly initialize the dataset cache so requests rarely hit a cold cache.

Functions:
----------
- `bind_startup_event(app: FastAPI)`: Registers the startup hook with a FastAPI app.

Usage:
------
    from seoulfit.lifecycle.startup import bind_startup_event
    bind_startup_event(app)
"""

import logging
from fastapi import FastAPI

from seoulfit.core.cache import server_cache
from seoulfit.data.scheduler import data_scheduler

logger = logging.getLogger(__name__)

def bind_startup_event(app: FastAPI) -> None:
    """
    Registers a startup event handler on the given FastAPI app.

    Args:
        app (FastAPI): The FastAPI application instance.

    Returns:
        None
    """

    @app.on_event("startup")
    async def startup_event() -> None:
        """
        Wires the cache and scheduler into app state and warms the cache.

        A failed initialization is logged but does not abort startup; the
        request-time cache guard retries it on the first request that needs data.

        Returns:
            None
        """
        app.state.cache = server_cache
        app.state.scheduler = data_scheduler

        logger.info("Starting up: Initializing dataset cache...")
        try:
            await data_scheduler.initialize()
            logger.info("Dataset cache ready.")
        except Exception as e:
            logger.error(f"Dataset cache initialization failed at startup: {e}")
