"""
Dataset Refresh Scheduler

This module owns the lifecycle of the dataset cache: a one-time load of the
static subway station list, an initial load of the bike station feed, and a
background task that reloads the bike feed on a fixed interval.

Responsibilities:
-----------------
- Populate the cache exactly once per process, even under concurrent callers.
- Degrade to an empty static dataset when its loader fails.
- Keep the last successfully loaded bike data when a refresh fails.
- Own the single periodic refresh task and cancel it on shutdown.

States:
-------
    uninitialized -> initializing -> ready

A failed initialization returns to `uninitialized` so a later call can retry.

Usage:
------
    from seoulfit.data.scheduler import data_scheduler
    await data_scheduler.initialize()
    status = data_scheduler.get_status()
    await data_scheduler.stop()
"""


import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional

from seoulfit.core.cache import CacheStore, server_cache
from seoulfit.core.config import BIKE_REFRESH_INTERVAL, BIKE_STATIONS_KEY, SUBWAY_STATIONS_KEY
from seoulfit.core.data_types import SchedulerStatus
from seoulfit.core.logger import reset_dataset_context, set_dataset_context
from seoulfit.data.seoul_api import load_all_bike_stations, load_all_subway_stations

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[List[Any]]]


class DataScheduler:
    """
    Populates and refreshes the dataset cache.

    Attributes:
        cache (CacheStore): Store written by the scheduler.
        static_loader (Loader): Loads the static dataset (subway stations).
        dynamic_loader (Loader): Loads the dynamic dataset (bike stations).
        refresh_interval (float): Seconds between dynamic refreshes.
        static_key (str): Cache key of the static dataset.
        dynamic_key (str): Cache key of the dynamic dataset.
    """

    def __init__(
        self,
        cache: CacheStore,
        static_loader: Loader = load_all_subway_stations,
        dynamic_loader: Loader = load_all_bike_stations,
        refresh_interval: float = BIKE_REFRESH_INTERVAL,
        static_key: str = SUBWAY_STATIONS_KEY,
        dynamic_key: str = BIKE_STATIONS_KEY
    ) -> None:
        self.cache = cache
        self.static_loader = static_loader
        self.dynamic_loader = dynamic_loader
        self.refresh_interval = refresh_interval
        self.static_key = static_key
        self.dynamic_key = dynamic_key

        self.initialized: bool = False
        self.initializing: bool = False
        self._init_lock = asyncio.Lock()
        self._refresh_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> str:
        if self.initialized:
            return "ready"
        return "initializing" if self.initializing else "uninitialized"

    @property
    def refresh_running(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    async def initialize(self) -> None:
        """
        Loads both datasets once and starts the periodic refresh.

        Concurrent callers queue on a lock; the first one performs the load and
        the rest return as soon as it completes, without fetching again.

        Raises:
            Exception: Re-raised if initialization fails before completing;
                the scheduler is then back in `uninitialized`.
        """
        if self.initialized:
            logger.debug("Scheduler already initialized, skipping.")
            return

        async with self._init_lock:
            if self.initialized:
                logger.debug("Scheduler initialized by a concurrent caller, skipping.")
                return

            self.initializing = True
            logger.info("Initializing dataset cache...")
            try:
                await self._load_static()
                await self._load_dynamic()
                self.start_periodic_refresh()
                self.initialized = True
                logger.info("Dataset cache initialized.")
            except Exception as e:
                logger.error(f"Scheduler initialization failed: {e}", exc_info=True)
                raise
            finally:
                self.initializing = False

    async def _load_static(self) -> None:
        token = set_dataset_context(self.static_key)
        try:
            rows = await self.static_loader()
            self.cache.set_static(self.static_key, rows)
            logger.info(f"Cached {len(rows)} rows.")
        except Exception as e:
            logger.error(f"Static dataset load failed, caching empty list: {e}")
            self.cache.set_static(self.static_key, [])
        finally:
            reset_dataset_context(token)

    async def _load_dynamic(self) -> bool:
        token = set_dataset_context(self.dynamic_key)
        try:
            rows = await self.dynamic_loader()
            self.cache.set_dynamic(self.dynamic_key, rows)
            logger.info(f"Cached {len(rows)} rows.")
            return True
        except Exception as e:
            kept = self.cache.get_status().get(self.dynamic_key, {}).get("data_size", 0)
            logger.error(f"Dynamic dataset load failed, keeping previous entry ({kept} rows): {e}")
            return False
        finally:
            reset_dataset_context(token)

    async def refresh_dynamic(self) -> bool:
        """
        Reloads the dynamic dataset, keeping the previous entry on failure.

        Returns:
            bool: True if the cache entry was replaced.
        """
        return await self._load_dynamic()

    async def _refresh_loop(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            await self.refresh_dynamic()

    def start_periodic_refresh(self) -> None:
        """
        Starts the background refresh task, replacing any running one.

        Must be called from within a running event loop.
        """
        if self._refresh_task is not None:
            self._refresh_task.cancel()

        logger.info(f"Starting '{self.dynamic_key}' refresh every {self.refresh_interval:g}s.")
        self._refresh_task = asyncio.get_running_loop().create_task(self._refresh_loop())

    async def stop(self) -> None:
        """
        Cancels the periodic refresh task and waits for it to finish.
        """
        task, self._refresh_task = self._refresh_task, None
        if task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Periodic refresh stopped.")

    def get_status(self) -> SchedulerStatus:
        return {
            "initialized": self.initialized,
            "cache_status": self.cache.get_status(),
        }


data_scheduler: DataScheduler = DataScheduler(server_cache)
