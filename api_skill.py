"""HTTP endpoint for the voice platform.

Provides a FastAPI endpoint that accepts the platform's JSON request envelope,
runs it through the Plan My Trip skill and returns the response envelope.
"""

import logging
from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from config import Settings, configure_logging, load_settings
from errors import InvalidApplicationIdError, MalformedResponseError, UnknownRequestTypeError
from models import SkillEvent
from plan_my_trip import PlanMyTripSkill
from skill import execute

log = logging.getLogger(__name__)

# Global skill instance, created on first request
skill: PlanMyTripSkill | None = None


def get_skill() -> PlanMyTripSkill:
    global skill
    if skill is None:
        settings = load_settings()
        configure_logging(settings.log_level)
        skill = PlanMyTripSkill(settings)
    return skill


app = FastAPI(title="Plan My Trip Skill API")


@app.post("/skill")
async def receive_event(request: Request, handler: PlanMyTripSkill = Depends(get_skill)) -> Any:
    """Receive a skill event, dispatch it, and return the response envelope."""
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body is not JSON")
    try:
        event = SkillEvent.model_validate(body)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid request envelope: {exc.error_count()} errors")

    settings: Settings = handler.settings
    try:
        envelope: Dict[str, Any] = await execute(handler, event, settings.app_id)
    except InvalidApplicationIdError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    except UnknownRequestTypeError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except MalformedResponseError as exc:
        log.error("Provider returned an unreadable body: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))
    return JSONResponse(content=envelope)


@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok"})


# If running directly, start the server (use uvicorn)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
