import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import requests

from seoulfit.data import seoul_api
from seoulfit.data.seoul_api import (
    SeoulApiError,
    build_url,
    load_all_bike_stations,
    load_all_subway_stations,
    parse_rows,
)


def envelope(service, rows, code="INFO-000", message="정상 처리되었습니다"):
    return json.dumps({
        service: {
            "list_total_count": len(rows),
            "RESULT": {"CODE": code, "MESSAGE": message},
            "row": rows,
        }
    })


def fake_response(text, status=200):
    response = MagicMock()
    response.text = text
    response.status_code = status
    return response


def test_build_url(monkeypatch):
    monkeypatch.setattr(seoul_api, "SEOUL_API_BASE_URL", "http://openapi.seoul.go.kr:8088")
    monkeypatch.setattr(seoul_api, "SEOUL_API_KEY", "sample")
    assert build_url("bikeList", 1, 1000) == "http://openapi.seoul.go.kr:8088/sample/json/bikeList/1/1000/"


def test_parse_rows_success(bike_rows):
    assert parse_rows("rentBikeStatus", envelope("rentBikeStatus", bike_rows), 200) == bike_rows


def test_parse_rows_http_error():
    with pytest.raises(SeoulApiError, match="HTTP 500"):
        parse_rows("rentBikeStatus", "", 500)


def test_parse_rows_html_body():
    with pytest.raises(SeoulApiError, match="HTML"):
        parse_rows("rentBikeStatus", "  <html><body>Invalid key</body></html>", 200)


def test_parse_rows_invalid_json():
    with pytest.raises(SeoulApiError, match="not valid JSON"):
        parse_rows("rentBikeStatus", "{not json", 200)


def test_parse_rows_top_level_error_result():
    body = json.dumps({"RESULT": {"CODE": "INFO-200", "MESSAGE": "해당하는 데이터가 없습니다."}})
    with pytest.raises(SeoulApiError, match="INFO-200"):
        parse_rows("rentBikeStatus", body, 200)


def test_parse_rows_missing_rows():
    body = json.dumps({"rentBikeStatus": {"RESULT": {"CODE": "INFO-000", "MESSAGE": ""}}})
    with pytest.raises(SeoulApiError, match="unexpected response structure"):
        parse_rows("rentBikeStatus", body, 200)


def test_parse_rows_error_code_in_envelope():
    body = envelope("subwayStationMaster", [], code="ERROR-336", message="데이터요청은 한번에 최대 1000건")
    with pytest.raises(SeoulApiError, match="ERROR-336"):
        parse_rows("subwayStationMaster", body, 200)


def test_load_all_subway_stations(subway_rows):
    with patch("seoulfit.data.seoul_api.requests.get") as get:
        get.return_value = fake_response(envelope("subwayStationMaster", subway_rows))
        stations = asyncio.run(load_all_subway_stations())

    assert stations == subway_rows
    url = get.call_args.args[0]
    assert url.endswith("/json/subwayStationMaster/1/800/")
    assert get.call_args.kwargs["timeout"] > 0


def test_network_error_becomes_api_error():
    with patch("seoulfit.data.seoul_api.requests.get", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(SeoulApiError, match="refused"):
            asyncio.run(load_all_subway_stations())


def test_load_all_bike_stations_concatenates_pages_in_order(bike_rows):
    pages = {(1, 1000): bike_rows[:3], (1001, 2000): bike_rows[3:]}

    async def fake_batch(start, end):
        return pages[(start, end)]

    with patch("seoulfit.data.seoul_api.fetch_bike_batch", new=AsyncMock(side_effect=fake_batch)) as batch:
        stations = asyncio.run(load_all_bike_stations())

    assert stations == bike_rows
    assert sorted(call.args for call in batch.call_args_list) == [(1, 1000), (1001, 2000)]


def test_load_all_bike_stations_fails_if_any_page_fails(bike_rows):
    async def fake_batch(start, end):
        if start > 1:
            raise SeoulApiError("rentBikeStatus: HTTP 502")
        return bike_rows

    with patch("seoulfit.data.seoul_api.fetch_bike_batch", new=AsyncMock(side_effect=fake_batch)):
        with pytest.raises(SeoulApiError, match="502"):
            asyncio.run(load_all_bike_stations())


def test_fetch_bike_batch_reads_rent_bike_status_envelope(bike_rows):
    with patch("seoulfit.data.seoul_api.requests.get") as get:
        get.return_value = fake_response(envelope("rentBikeStatus", bike_rows))
        rows = asyncio.run(seoul_api.fetch_bike_batch(1001, 2000))

    assert rows == bike_rows
    assert get.call_args.args[0].endswith("/json/bikeList/1001/2000/")
