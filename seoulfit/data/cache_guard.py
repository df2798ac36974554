"""
Request-time Cache Guard

Cache-backed routes call into this module before reading a dataset so that a
request arriving on a cold process (e.g. before or after a failed boot-time
initialization) still gets data instead of a cache miss.

Algorithm:
----------
1. If the dataset is cached, read it.
2. Otherwise wait a short grace period for an in-flight initialization.
3. If still cold, run `scheduler.initialize()` and await it.
4. If the dataset is still absent, raise `DatasetUnavailableError`.

Usage:
------
    rows = await require_dataset(BIKE_STATIONS_KEY, cache, scheduler)
"""


import asyncio
import logging
from typing import Any, Optional

from seoulfit.core.cache import CacheStore
from seoulfit.core.config import CACHE_GRACE_PERIOD
from seoulfit.data.scheduler import DataScheduler

logger = logging.getLogger(__name__)


class DatasetUnavailableError(Exception):
    """
    Raised when a dataset has never been loaded in this process and could not be loaded on demand.

    Attributes:
        key (str): Dataset key that was requested.
        message (str): User-facing explanation.
    """
    def __init__(self, key: str, message: str = "") -> None:
        self.key = key
        self.message = message or f"Dataset '{key}' is temporarily unavailable."
        super().__init__(self.message)


async def ensure_dataset(
    key: str,
    cache: CacheStore,
    scheduler: DataScheduler,
    grace_period: Optional[float] = None
) -> None:
    """
    Makes sure the dataset is cached, initializing the scheduler if needed.

    The grace-period wait always runs to completion; it is only paid by the
    first request(s) of a cold process.

    Args:
        key (str): Dataset key.
        cache (CacheStore): Cache to check.
        scheduler (DataScheduler): Scheduler to initialize on a cold cache.
        grace_period (Optional[float]): Seconds to wait before forcing initialization
            (defaults to `CACHE_GRACE_PERIOD`).

    Raises:
        Exception: Any error raised by `scheduler.initialize()`.
    """
    if cache.has(key):
        return

    if grace_period is None:
        grace_period = CACHE_GRACE_PERIOD
    logger.info(f"Cache miss for '{key}', waiting {grace_period:g}s for initialization...")
    await asyncio.sleep(grace_period)

    if not cache.has(key):
        logger.warning(f"'{key}' still not cached, initializing on demand.")
        await scheduler.initialize()


async def require_dataset(
    key: str,
    cache: CacheStore,
    scheduler: DataScheduler,
    grace_period: Optional[float] = None
) -> Any:
    """
    Returns the cached dataset, loading it on demand if the cache is cold.

    Raises:
        DatasetUnavailableError: If the dataset is still absent after initialization.
    """
    await ensure_dataset(key, cache, scheduler, grace_period)

    data = cache.get(key)
    if data is None:
        raise DatasetUnavailableError(key)
    return data
