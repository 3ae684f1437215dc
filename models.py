"""Request envelope models sent by the voice platform.

Field names follow the platform's camelCase JSON so payloads validate as-is.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

LAUNCH_REQUEST = "LaunchRequest"
INTENT_REQUEST = "IntentRequest"
SESSION_ENDED_REQUEST = "SessionEndedRequest"


class Slot(BaseModel):
    name: str
    value: Optional[str] = None


class Intent(BaseModel):
    name: str
    slots: Dict[str, Slot] = Field(default_factory=dict)

    def slot_value(self, name: str) -> Optional[str]:
        """Return the stripped value of ``name``, or None if absent or blank."""
        slot = self.slots.get(name)
        if slot is None or slot.value is None:
            return None
        value = slot.value.strip()
        return value or None


class Application(BaseModel):
    applicationId: str


class User(BaseModel):
    userId: Optional[str] = None


class Session(BaseModel):
    sessionId: str
    new: bool = False
    application: Optional[Application] = None
    attributes: Dict[str, Any] = Field(default_factory=dict)
    user: Optional[User] = None


class SkillRequest(BaseModel):
    """One of LaunchRequest, IntentRequest or SessionEndedRequest, keyed by ``type``."""

    type: str
    requestId: str
    timestamp: Optional[str] = None
    locale: str = "en-US"
    intent: Optional[Intent] = None
    reason: Optional[str] = None


class SkillEvent(BaseModel):
    """Full request envelope."""

    version: str = "1.0"
    session: Optional[Session] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    request: SkillRequest

    @property
    def application_id(self) -> Optional[str]:
        if self.session is not None and self.session.application is not None:
            return self.session.application.applicationId
        system = self.context.get("System") or {}
        application = system.get("application") or {}
        return application.get("applicationId")
