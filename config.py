"""Runtime configuration.

Values come from the environment, with an optional ``.env`` file loaded first.
Secrets (application id, API keys, messaging credentials) are never defaulted.
"""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv

from errors import ConfigurationError
from places import normalize_place

DEFAULT_TRAFFIC_URL = "https://www.mapquestapi.com/traffic/v2/incidents"
DEFAULT_ROUTE_URL = "https://www.mapquestapi.com/directions/v2/route"
DEFAULT_TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"

DEFAULT_BOUNDING_BOX = "37.00,-122.00,38.00,-123.00"
DEFAULT_HOME_ADDRESS = "Pier 48, San Francisco, CA"
DEFAULT_REMIND_ME_BODY = "This is the ship that made the Kessel Run in fourteen parsecs?"

DEFAULT_PLACES: Dict[str, str] = {
    "levis stadium": "4900 Marie P DeBartolo Way, Santa Clara, CA",
    "amazon san francisco office": "475 Sansome St, San Francisco, CA",
    "pier 39": "Pier 39, San Francisco, CA",
    "twin peaks": "501 Twin Peaks Blvd, San Francisco, CA",
    "google office": "1600 Amphitheatre Parkway, Mountain View, CA",
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    app_id: str
    traffic_api_key: str
    routing_api_key: str
    messaging_account_id: Optional[str] = None
    messaging_auth_token: Optional[str] = None
    remind_me_to: Optional[str] = None
    remind_me_from: Optional[str] = None
    remind_me_body: str = DEFAULT_REMIND_ME_BODY
    place_lookup_table: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_PLACES))
    default_destination: str = DEFAULT_HOME_ADDRESS
    origin_address: str = DEFAULT_HOME_ADDRESS
    bounding_box: str = DEFAULT_BOUNDING_BOX
    traffic_url: str = DEFAULT_TRAFFIC_URL
    route_url: str = DEFAULT_ROUTE_URL
    twilio_api_base: str = DEFAULT_TWILIO_API_BASE
    http_timeout: float = 5.0
    log_level: str = "INFO"


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigurationError(f"{name} must be set")
    return value


def _optional(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


def _parse_places(raw: Optional[str]) -> Dict[str, str]:
    """Parse ``PLACE_LOOKUP_TABLE`` (a JSON object of name -> address).

    Keys are normalized the same way spoken names are before lookup.
    """
    if raw is None:
        return dict(DEFAULT_PLACES)
    try:
        table = json.loads(raw)
    except ValueError as exc:
        raise ConfigurationError(f"PLACE_LOOKUP_TABLE is not valid JSON: {exc}") from exc
    if not isinstance(table, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in table.items()
    ):
        raise ConfigurationError("PLACE_LOOKUP_TABLE must be a JSON object of strings")
    return {normalize_place(k): v for k, v in table.items()}


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None:
        return 5.0
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"HTTP_TIMEOUT_SECONDS is not a number: {raw!r}") from exc
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigurationError("HTTP_TIMEOUT_SECONDS must be a positive finite number")
    return timeout


def load_settings() -> Settings:
    """Build :class:`Settings` from the environment (and ``.env`` if present)."""
    load_dotenv()
    return Settings(
        app_id=_require("SKILL_APP_ID"),
        traffic_api_key=_require("TRAFFIC_API_KEY"),
        routing_api_key=_require("ROUTING_API_KEY"),
        messaging_account_id=_optional("TWILIO_ACCOUNT_SID"),
        messaging_auth_token=_optional("TWILIO_AUTH_TOKEN"),
        remind_me_to=_optional("REMIND_ME_TO_NUMBER"),
        remind_me_from=_optional("REMIND_ME_FROM_NUMBER"),
        remind_me_body=_optional("REMIND_ME_BODY") or DEFAULT_REMIND_ME_BODY,
        place_lookup_table=_parse_places(_optional("PLACE_LOOKUP_TABLE")),
        default_destination=_optional("DEFAULT_DESTINATION") or DEFAULT_HOME_ADDRESS,
        origin_address=_optional("ORIGIN_ADDRESS") or DEFAULT_HOME_ADDRESS,
        bounding_box=_optional("TRAFFIC_BOUNDING_BOX") or DEFAULT_BOUNDING_BOX,
        traffic_url=_optional("TRAFFIC_URL") or DEFAULT_TRAFFIC_URL,
        route_url=_optional("ROUTE_URL") or DEFAULT_ROUTE_URL,
        twilio_api_base=_optional("TWILIO_API_BASE") or DEFAULT_TWILIO_API_BASE,
        http_timeout=_parse_timeout(_optional("HTTP_TIMEOUT_SECONDS")),
        log_level=(_optional("LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Attach a basic handler to the root logger and set its level."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))
