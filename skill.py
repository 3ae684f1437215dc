"""Skill capability and request dispatch.

Any object with the four lifecycle coroutines below can be driven by
:func:`execute`, which checks the application id, fires the session-started
callback for new sessions and hands the request to exactly one callback.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Protocol

from errors import InvalidApplicationIdError, UnknownRequestTypeError
from models import (
    INTENT_REQUEST,
    LAUNCH_REQUEST,
    SESSION_ENDED_REQUEST,
    Session,
    SkillEvent,
    SkillRequest,
)
from response import SkillResponse

log = logging.getLogger(__name__)


class SkillHandler(Protocol):
    async def on_session_started(self, request: SkillRequest, session: Session) -> None: ...

    async def on_launch(self, request: SkillRequest, session: Session) -> SkillResponse: ...

    async def on_intent(self, request: SkillRequest, session: Session) -> SkillResponse: ...

    async def on_session_ended(self, request: SkillRequest, session: Session) -> None: ...


def verify_application_id(event: SkillEvent, app_id: str) -> None:
    received = event.application_id
    if received != app_id:
        log.warning("Rejecting request %s for applicationId %r", event.request.requestId, received)
        raise InvalidApplicationIdError(received)


async def execute(skill: SkillHandler, event: SkillEvent, app_id: str) -> Dict[str, Any]:
    """Dispatch ``event`` to ``skill`` and return the response envelope."""
    verify_application_id(event, app_id)

    request = event.request
    session = event.session or Session(sessionId="")

    if request.type not in (LAUNCH_REQUEST, INTENT_REQUEST, SESSION_ENDED_REQUEST):
        raise UnknownRequestTypeError(request.type)

    if session.new:
        await skill.on_session_started(request, session)

    if request.type == LAUNCH_REQUEST:
        response = await skill.on_launch(request, session)
    elif request.type == INTENT_REQUEST:
        response = await skill.on_intent(request, session)
    else:
        await skill.on_session_ended(request, session)
        return {"version": "1.0", "response": {}}

    return response.to_envelope(session.attributes)
