"""
Shutdown Logic for the Seoul Fit Data Service

This module defines cleanup routines for FastAPI shutdown events.

Responsibilities:
-----------------
- Cancel the periodic bike station refresh task so no timer outlives the app.

Functions:
----------
- `bind_shutdown_event(app: FastAPI)`: Registers the shutdown hook with a FastAPI app.

Usage:
------
    from seoulfit.lifecycle.shutdown import bind_shutdown_event
    bind_shutdown_event(app)
"""

import logging
from fastapi import FastAPI

logger = logging.getLogger(__name__)

def bind_shutdown_event(app: FastAPI) -> None:
    """
    Registers a shutdown event handler on the given FastAPI app.

    Args:
        app (FastAPI): The FastAPI application instance.

    Returns:
        None
    """

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        """
        Stops the scheduler owned by this app.

        Returns:
            None
        """
        scheduler = getattr(app.state, "scheduler", None)
        if scheduler is None:
            return
        logger.info("Shutting down: Stopping dataset refresh...")
        await scheduler.stop()
        logger.info("Dataset refresh stopped.")
