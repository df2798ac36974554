"""
API Endpoints for Cache Initialization and Status

- `GET /api/init`: Runs scheduler initialization (a no-op once ready) and returns the status.
- `POST /api/init`: Returns the scheduler and cache status without side effects.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from seoulfit.services.models import CamelModel, SchedulerStatusModel

logger = logging.getLogger(__name__)
router = APIRouter()


class InitResponse(CamelModel):
    success: bool
    message: str
    status: SchedulerStatusModel


class StatusResponse(CamelModel):
    success: bool
    status: SchedulerStatusModel


@router.get("/init", response_model=InitResponse)
async def initialize_cache(request: Request):
    """
    Initializes the dataset cache and starts the periodic refresh.

    Returns:
        InitResponse | JSONResponse: Scheduler status, or a 500 body if initialization failed.
    """
    scheduler = request.app.state.scheduler
    logger.info("Cache initialization requested.")
    try:
        await scheduler.initialize()
    except Exception as e:
        logger.error(f"Cache initialization failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Server initialization failed",
                "message": str(e) or "Unknown error",
            },
        )

    return InitResponse(
        success=True,
        message="Server initialization complete",
        status=SchedulerStatusModel.model_validate(scheduler.get_status()),
    )


@router.post("/init", response_model=StatusResponse)
async def get_cache_status(request: Request) -> StatusResponse:
    status = request.app.state.scheduler.get_status()
    return StatusResponse(success=True, status=SchedulerStatusModel.model_validate(status))
