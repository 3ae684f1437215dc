"""MapQuest traffic and directions client.

Each call issues exactly one GET and decodes the JSON body into the small
piece of data the skill speaks: a list of incidents or a travel time in
whole minutes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from errors import EmptyResultError, MalformedResponseError, ProviderUnavailableError

log = logging.getLogger(__name__)

TRAFFIC_FILTERS = "construction,congestion"


@dataclass(frozen=True)
class TrafficIncident:
    short_description: str
    delay: str


def parse_traffic(payload: Any) -> List[TrafficIncident]:
    """Extract incidents from a traffic response, keeping provider order.

    A missing or non-list ``incidents`` value reads as no incidents. Entries
    without a ``shortDesc`` are skipped.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError("traffic response is not a JSON object")
    incidents = payload.get("incidents")
    if not isinstance(incidents, list):
        return []

    result = []
    for item in incidents:
        if not isinstance(item, dict):
            continue
        short_desc = item.get("shortDesc")
        if not isinstance(short_desc, str) or not short_desc.strip():
            continue
        delay = item.get("delayFromTypical")
        result.append(TrafficIncident(
            short_description=short_desc.strip(),
            delay="" if delay is None else str(delay),
        ))
    return result


def parse_route(payload: Any) -> int:
    """Return the real-time travel duration in minutes, rounded up."""
    if not isinstance(payload, dict):
        raise MalformedResponseError("route response is not a JSON object")
    route = payload.get("route")
    if not isinstance(route, dict):
        raise EmptyResultError("route response has no route")
    seconds = route.get("realTime")
    # bool is an int subclass; a flag is not a duration
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        raise EmptyResultError("route has no realTime duration")
    try:
        seconds = float(seconds)
    except OverflowError as exc:
        raise EmptyResultError("route realTime is out of range") from exc
    if seconds < 0 or not math.isfinite(seconds):
        raise EmptyResultError(f"route has unusable realTime {seconds!r}")
    return math.ceil(seconds / 60)


class MapQuestClient:
    """Async client for the two MapQuest endpoints the skill uses.

    ``transport`` is passed through to :class:`httpx.AsyncClient` so tests can
    plug in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        traffic_api_key: str,
        routing_api_key: str,
        traffic_url: str,
        route_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.traffic_api_key = traffic_api_key
        self.routing_api_key = routing_api_key
        self.traffic_url = traffic_url
        self.route_url = route_url
        self.timeout = timeout
        self._transport = transport

    async def _get_json(self, url: str, params: Dict[str, str]) -> Any:
        # Log without the key
        safe_params = {k: v for k, v in params.items() if k != "key"}
        log.info("GET %s %s", url, safe_params)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            log.error("Request to %s failed: %s", url, exc)
            raise ProviderUnavailableError(str(exc)) from exc

        if response.status_code >= 400:
            log.error("MapQuest returned %s: %s", response.status_code, response.text)
            raise ProviderUnavailableError(f"HTTP {response.status_code} from {url}")
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"invalid JSON from {url}") from exc

    async def get_traffic_incidents(self, bounding_box: str) -> List[TrafficIncident]:
        """Fetch incidents inside ``bounding_box``; raises EmptyResultError if none."""
        payload = await self._get_json(self.traffic_url, {
            "key": self.traffic_api_key,
            "boundingBox": bounding_box,
            "filters": TRAFFIC_FILTERS,
        })
        incidents = parse_traffic(payload)
        log.info("MapQuest reported %d incidents", len(incidents))
        if not incidents:
            raise EmptyResultError("no traffic incidents")
        return incidents

    async def get_route_minutes(self, origin: str, destination: str) -> int:
        payload = await self._get_json(self.route_url, {
            "key": self.routing_api_key,
            "from": origin,
            "to": destination,
        })
        minutes = parse_route(payload)
        log.info("Route %r -> %r takes %d minutes", origin, destination, minutes)
        return minutes
