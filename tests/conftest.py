"""Pytest configuration: make the top-level modules importable and share fixtures."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, Optional

import pytest

# Ensure repository root is on sys.path for the flat module layout
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from config import Settings  # noqa: E402

APP_ID = "amzn1.ask.skill.test"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_id=APP_ID,
        traffic_api_key="traffic-key",
        routing_api_key="routing-key",
        messaging_account_id="AC123",
        messaging_auth_token="secret",
        remind_me_to="+15550000001",
        remind_me_from="+15550000002",
        traffic_url="https://traffic.test/incidents",
        route_url="https://route.test/route",
        twilio_api_base="https://sms.test/2010-04-01",
    )


def make_event(
    request_type: str = "IntentRequest",
    intent: Optional[str] = None,
    slots: Optional[Dict[str, Optional[str]]] = None,
    app_id: str = APP_ID,
    new: bool = False,
    attributes: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build a raw request envelope like the platform sends."""
    request: Dict[str, Any] = {
        "type": request_type,
        "requestId": "req-1",
        "timestamp": "2026-01-01T00:00:00Z",
        "locale": "en-US",
    }
    if intent is not None:
        request["intent"] = {
            "name": intent,
            "slots": {name: {"name": name, "value": value} for name, value in (slots or {}).items()},
        }
    if request_type == "SessionEndedRequest":
        request["reason"] = "USER_INITIATED"
    return {
        "version": "1.0",
        "session": {
            "new": new,
            "sessionId": "session-1",
            "application": {"applicationId": app_id},
            "attributes": attributes or {},
            "user": {"userId": "user-1"},
        },
        "request": request,
    }
