"""
Seoul Open Data API Dataset Loaders

This module fetches full datasets from the Seoul Open Data REST API
(`openapi.seoul.go.kr`) and returns them as ordered lists of raw rows.

Responsibilities:
-----------------
- Build service URLs of the form `{base}/{key}/json/{service}/{start}/{end}/`.
- Dispatch blocking HTTP calls through a thread pool so the event loop stays free.
- Validate the response envelope and surface any failure as `SeoulApiError`.
- Page through the bike station feed in fixed-size batches and concatenate them.

Key Functions:
--------------
- `load_all_subway_stations`: Full subway station master list (single call).
- `fetch_bike_batch`: One page of the bike rental station feed.
- `load_all_bike_stations`: All bike rental stations (concurrent pages).

Notes:
------
Loaders neither retry nor cache. Both are the scheduler's responsibility.
"""


import asyncio
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Tuple

import requests

from seoulfit.core.config import (
    BIKE_BATCH_COUNT,
    BIKE_BATCH_SIZE,
    SEOUL_API_BASE_URL,
    SEOUL_API_KEY,
    SEOUL_API_TIMEOUT,
    SUBWAY_FETCH_LIMIT,
)
from seoulfit.core.data_types import BikeStationRow, SubwayStationRow

logger = logging.getLogger(__name__)
executor = ThreadPoolExecutor(max_workers=4)

SUCCESS_CODE = "INFO-000"


class SeoulApiError(Exception):
    """Raised when an upstream Seoul Open Data call fails or returns an unusable body."""


def build_url(service: str, start: int, end: int) -> str:
    return f"{SEOUL_API_BASE_URL}/{SEOUL_API_KEY}/json/{service}/{start}/{end}/"


async def fetch_text(url: str) -> Tuple[str, int]:
    """
    Sends a GET request asynchronously and returns the raw body.

    The synchronous `requests` call runs inside a thread pool so a slow
    upstream never blocks other requests on the event loop.

    Args:
        url (str): Fully built service URL.

    Returns:
        Tuple[str, int]: Response body as text and HTTP status code.

    Raises:
        SeoulApiError: If the request cannot be sent or times out.
    """
    def blocking_get() -> Tuple[str, int]:
        response = requests.get(
            url,
            headers={"Content-Type": "application/json"},
            timeout=SEOUL_API_TIMEOUT,
        )
        return response.text, response.status_code

    try:
        return await asyncio.get_running_loop().run_in_executor(executor, blocking_get)
    except requests.RequestException as e:
        raise SeoulApiError(f"Request to Seoul API failed: {e}") from e


def parse_rows(service: str, text: str, status: int) -> List[Dict[str, Any]]:
    """
    Validates a Seoul Open Data response body and extracts its rows.

    Args:
        service (str): Service name, which is also the envelope key (e.g. "rentBikeStatus").
        text (str): Raw response body.
        status (int): HTTP status code.

    Returns:
        List[Dict[str, Any]]: Rows of the envelope, in upstream order.

    Raises:
        SeoulApiError: On non-2xx status, HTML or non-JSON bodies, upstream error
            results or an unexpected envelope structure.
    """
    if not 200 <= status < 300:
        raise SeoulApiError(f"{service}: HTTP {status}")

    if text.strip().startswith("<"):
        logger.error(f"{service}: received HTML instead of JSON: {text[:300]}")
        raise SeoulApiError(f"{service}: received an HTML response, check the API key and URL")

    try:
        data = json.loads(text)
    except ValueError as e:
        raise SeoulApiError(f"{service}: response is not valid JSON") from e

    if not isinstance(data, dict):
        raise SeoulApiError(f"{service}: unexpected response structure")

    # Errors such as INFO-200 (no data) come back without the service envelope
    if "RESULT" in data and service not in data:
        result = data["RESULT"] or {}
        raise SeoulApiError(f"{service}: {result.get('CODE')} - {result.get('MESSAGE')}")

    envelope = data.get(service)
    if not isinstance(envelope, dict) or "RESULT" not in envelope or "row" not in envelope:
        raise SeoulApiError(f"{service}: unexpected response structure")

    result = envelope["RESULT"] or {}
    if result.get("CODE") != SUCCESS_CODE:
        raise SeoulApiError(f"{service}: {result.get('CODE')} - {result.get('MESSAGE')}")

    return envelope["row"]


async def load_all_subway_stations() -> List[SubwayStationRow]:
    """
    Loads the complete subway station master list in a single call.

    Returns:
        List[SubwayStationRow]: All stations.
    """
    logger.info("Loading subway station master list...")
    text, status = await fetch_text(build_url("subwayStationMaster", 1, SUBWAY_FETCH_LIMIT))
    stations = parse_rows("subwayStationMaster", text, status)
    logger.info(f"Loaded {len(stations)} subway stations.")
    return stations


async def fetch_bike_batch(start_index: int, end_index: int) -> List[BikeStationRow]:
    """
    Fetches one page of the bike rental station feed (1-based, inclusive range).

    Args:
        start_index (int): First row number.
        end_index (int): Last row number.

    Returns:
        List[BikeStationRow]: Rows of the page.
    """
    text, status = await fetch_text(build_url("bikeList", start_index, end_index))
    return parse_rows("rentBikeStatus", text, status)


async def load_all_bike_stations() -> List[BikeStationRow]:
    """
    Loads all bike rental stations by fetching fixed-size pages concurrently.

    Pages are concatenated in page order. A failure of any page fails the
    whole load, so callers never see a partial dataset.

    Returns:
        List[BikeStationRow]: All stations.
    """
    logger.info("Loading bike rental stations...")
    ranges = [
        (i * BIKE_BATCH_SIZE + 1, (i + 1) * BIKE_BATCH_SIZE)
        for i in range(BIKE_BATCH_COUNT)
    ]
    batches = await asyncio.gather(*(fetch_bike_batch(start, end) for start, end in ranges))

    stations: List[BikeStationRow] = [row for batch in batches for row in batch]
    logger.info(
        f"Loaded {len(stations)} bike stations "
        f"(batches: {', '.join(str(len(b)) for b in batches)})."
    )
    return stations
