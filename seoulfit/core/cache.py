"""
Process-wide Dataset Cache

This module provides the `CacheStore` class, holding the most recently fetched
snapshot of each named dataset in memory for the lifetime of the process.

Location:
---------
- seoulfit.core.cache

Responsibilities:
-----------------
- Store one entry per dataset key, overwriting on every write.
- Tag entries as static (loaded once) or dynamic (refreshed periodically).
- Record the write time of each entry for freshness reporting.
- Report per-key metadata for the status endpoint.

Key Components:
---------------
- `CacheStore`: Key/value store of `CacheEntry` records.
- `server_cache`: Process-wide instance, published on `app.state.cache` at startup.

Usage:
------
Typical use pattern in the application:

    from seoulfit.core.cache import server_cache
    server_cache.set_dynamic("bike_stations", rows)
    rows = server_cache.get("bike_stations")

Notes:
------
- All operations are synchronous. The service runs a single event loop per
  process, so writes never interleave and no locking is required.
"""


import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from seoulfit.core.data_types import CacheEntry, CacheInfo, CacheStatusEntry

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def format_timestamp(timestamp_ms: Optional[int]) -> str:
    """
    Formats an epoch-milliseconds timestamp as an ISO 8601 UTC string (e.g. "2025-07-02T09:00:00.000Z").

    A missing timestamp formats as the epoch.
    """
    moment = datetime.fromtimestamp((timestamp_ms or 0) / 1000, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CacheStore:
    """
    In-memory store of the latest dataset snapshots.

    Attributes:
        entries (Dict[str, CacheEntry]): Backing mapping of dataset key to entry.
            Passing an existing mapping lets a new store share storage with a
            previous one.
    """

    def __init__(self, entries: Optional[Dict[str, CacheEntry]] = None) -> None:
        self.entries: Dict[str, CacheEntry] = entries if entries is not None else {}

    def _write(self, key: str, data: Any, is_static: bool) -> None:
        self.entries[key] = {
            "data": data,
            "timestamp": now_ms(),
            "is_static": is_static,
        }

    def set_static(self, key: str, data: Any) -> None:
        """
        Stores a dataset that is loaded once and never refreshed automatically.

        Args:
            key (str): Dataset key.
            data (Any): Dataset payload.
        """
        self._write(key, data, is_static=True)
        logger.info(f"Stored static dataset '{key}' ({_size_of(data)} rows).")

    def set_dynamic(self, key: str, data: Any) -> None:
        """
        Stores a dataset that is subject to periodic refresh.

        Args:
            key (str): Dataset key.
            data (Any): Dataset payload.
        """
        self._write(key, data, is_static=False)
        logger.info(f"Refreshed dynamic dataset '{key}' ({_size_of(data)} rows).")

    def get(self, key: str) -> Optional[Any]:
        entry = self.entries.get(key)
        return entry["data"] if entry else None

    def has(self, key: str) -> bool:
        return key in self.entries

    def get_info(self, key: str) -> Optional[CacheInfo]:
        """
        Returns entry metadata without the payload.

        Args:
            key (str): Dataset key.

        Returns:
            Optional[CacheInfo]: Timestamp and static flag, or None if the key was never written.
        """
        entry = self.entries.get(key)
        if not entry:
            return None
        return {"timestamp": entry["timestamp"], "is_static": entry["is_static"]}

    def get_status(self) -> Dict[str, CacheStatusEntry]:
        """
        Summarizes every cached dataset.

        Returns:
            Dict[str, CacheStatusEntry]: Per-key timestamp, static flag and payload size.
                The size is the row count for list-shaped payloads, otherwise 1.
        """
        return {
            key: {
                "timestamp": entry["timestamp"],
                "is_static": entry["is_static"],
                "data_size": _size_of(entry["data"]),
            }
            for key, entry in self.entries.items()
        }


def _size_of(data: Any) -> int:
    return len(data) if isinstance(data, (list, tuple)) else 1


server_cache: CacheStore = CacheStore()
