"""Tests for the MapQuest client and its body parsers.

HTTP is faked with ``httpx.MockTransport``; nothing leaves the process.
"""

import asyncio

import httpx
import pytest

from errors import EmptyResultError, MalformedResponseError, ProviderUnavailableError
from mapquest import MapQuestClient, TrafficIncident, parse_route, parse_traffic


def _client(handler) -> MapQuestClient:
    return MapQuestClient(
        traffic_api_key="traffic-key",
        routing_api_key="routing-key",
        traffic_url="https://traffic.test/incidents",
        route_url="https://route.test/route",
        transport=httpx.MockTransport(handler),
    )


def test_parse_traffic_keeps_provider_order():
    payload = {"incidents": [
        {"shortDesc": "Crash on I-80", "delayFromTypical": 4.5,
         "parameterizedDescription": {"crossRoad2": "Bay Bridge"}},
        {"shortDesc": "Roadwork on US-101", "delayFromTypical": 0},
    ]}
    assert parse_traffic(payload) == [
        TrafficIncident("Crash on I-80", "4.5"),
        TrafficIncident("Roadwork on US-101", "0"),
    ]


def test_parse_traffic_missing_fields_degrade_to_empty():
    assert parse_traffic({}) == []
    assert parse_traffic({"incidents": None}) == []
    assert parse_traffic({"incidents": [{"delayFromTypical": 2}, "junk"]}) == []


def test_parse_traffic_rejects_non_object():
    with pytest.raises(MalformedResponseError):
        parse_traffic(["not", "an", "object"])


@pytest.mark.parametrize("seconds, minutes", [(125, 3), (120, 2), (0, 0), (59.5, 1)])
def test_parse_route_rounds_up(seconds, minutes):
    assert parse_route({"route": {"realTime": seconds}}) == minutes


@pytest.mark.parametrize("payload", [
    {},
    {"route": {}},
    {"route": {"realTime": "soon"}},
    {"route": {"realTime": -1}},
    {"route": {"realTime": True}},
    {"route": {"realTime": 10 ** 400}},
    {"route": {"realTime": float("inf")}},
])
def test_parse_route_without_duration_is_empty(payload):
    with pytest.raises(EmptyResultError):
        parse_route(payload)


def test_parse_route_rejects_non_object():
    with pytest.raises(MalformedResponseError):
        parse_route("nope")


def test_get_traffic_incidents_sends_query():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        return httpx.Response(200, json={"incidents": [{"shortDesc": "Stalled car"}]})

    incidents = asyncio.run(_client(handler).get_traffic_incidents("37.00,-122.00,38.00,-123.00"))
    assert incidents == [TrafficIncident("Stalled car", "")]
    params = seen["url"].params
    assert seen["url"].host == "traffic.test"
    assert params["key"] == "traffic-key"
    assert params["boundingBox"] == "37.00,-122.00,38.00,-123.00"
    assert params["filters"] == "construction,congestion"


def test_get_traffic_incidents_empty_list_raises():
    client = _client(lambda request: httpx.Response(200, json={"incidents": []}))
    with pytest.raises(EmptyResultError):
        asyncio.run(client.get_traffic_incidents("0,0,1,1"))


def test_get_route_minutes_sends_query():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = request.url.params
        return httpx.Response(200, json={"route": {"realTime": 125}})

    minutes = asyncio.run(_client(handler).get_route_minutes("Pier 48, San Francisco, CA", "Pier 39, San Francisco, CA"))
    assert minutes == 3
    assert seen["params"]["key"] == "routing-key"
    assert seen["params"]["from"] == "Pier 48, San Francisco, CA"
    assert seen["params"]["to"] == "Pier 39, San Francisco, CA"


def test_network_error_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderUnavailableError):
        asyncio.run(_client(handler).get_route_minutes("a", "b"))


def test_http_error_status_is_unavailable():
    client = _client(lambda request: httpx.Response(503, text="down"))
    with pytest.raises(ProviderUnavailableError):
        asyncio.run(client.get_traffic_incidents("0,0,1,1"))


def test_invalid_json_is_malformed():
    client = _client(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(MalformedResponseError):
        asyncio.run(client.get_traffic_incidents("0,0,1,1"))
