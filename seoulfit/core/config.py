"""
Project Configuration and Constants

This module centralizes configuration settings, paths, and constants
used across the Seoul Fit data service.

Contents:
---------
- Seoul Open Data API settings (key, base URL, timeouts)
- Dataset keys under which cached datasets are stored
- Paging parameters for the bike station feed
- Refresh cadence and cold-cache grace period
- Directory and file path structure for logs

Usage:
------
Import any constant from this module for use in the application:

    from seoulfit.core.config import BIKE_STATIONS_KEY, BIKE_REFRESH_INTERVAL

Environment Variables:
----------------------
- `.env` file used for loading the Seoul API key and tuning values.
- Every numeric setting can be overridden through the variable of the same name.

Notes:
------
- Constants use `Final` from `typing` to indicate immutability.
- Directory creation ensures all required data paths exist on startup.
"""

from dotenv import load_dotenv
import os

from pathlib import Path
from typing import Final

# === General API Settings ===

load_dotenv()
SEOUL_API_KEY: Final[str] = os.getenv("SEOUL_API_KEY", "") # Seoul Open Data API key
SEOUL_API_BASE_URL: Final[str] = os.getenv("SEOUL_API_BASE_URL", "http://openapi.seoul.go.kr:8088")
SEOUL_API_TIMEOUT: Final[float] = float(os.getenv("SEOUL_API_TIMEOUT", "10")) # seconds per upstream call

API_PREFIX: Final[str] = "/api"
ROOT_PATH: Final[str] = os.getenv("ROOT_PATH", "")
FRONTEND: Final[str] = os.getenv("FRONTEND", "http://localhost:3000") # Location of the map frontend

# === Datasets ===

SUBWAY_STATIONS_KEY: Final[str] = "subway_stations" # loaded once per process
BIKE_STATIONS_KEY: Final[str] = "bike_stations" # refreshed periodically

SUBWAY_FETCH_LIMIT: Final[int] = int(os.getenv("SUBWAY_FETCH_LIMIT", "800")) # whole station master fits in one page

# The bike feed caps a single request at 1000 rows
BIKE_BATCH_SIZE: Final[int] = int(os.getenv("BIKE_BATCH_SIZE", "1000"))
BIKE_BATCH_COUNT: Final[int] = int(os.getenv("BIKE_BATCH_COUNT", "2"))

# === Scheduling ===

BIKE_REFRESH_INTERVAL: Final[float] = float(os.getenv("BIKE_REFRESH_INTERVAL", "60")) # seconds
CACHE_GRACE_PERIOD: Final[float] = float(os.getenv("CACHE_GRACE_PERIOD", "2.0")) # wait for boot-time init before forcing one

# === Search Defaults ===

DEFAULT_BIKE_RADIUS_KM: Final[float] = 1.5
EARTH_RADIUS_KM: Final[float] = 6371.0

# === Directories ===

ROOT_DIR: Final[Path] = Path(__file__).resolve().parents[2]
DATA_PATH: Final[Path] = Path(os.getenv("DATA_PATH", str(ROOT_DIR / "data")))
LOG_PATH: Final[Path] = DATA_PATH / "logs"

# Ensure required directories exist
for path in [DATA_PATH, LOG_PATH]:
    path.mkdir(parents=True, exist_ok=True)

LOG_FILE: Final[Path] = LOG_PATH / "debug.log"
