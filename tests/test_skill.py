"""Tests for request dispatch and application id checks."""

import asyncio

import pytest

from conftest import APP_ID, make_event
from errors import InvalidApplicationIdError, UnknownRequestTypeError
from models import SkillEvent
from response import PlainText, SkillResponse
from skill import execute


class RecordingSkill:
    def __init__(self):
        self.calls = []

    async def on_session_started(self, request, session):
        self.calls.append("started")

    async def on_launch(self, request, session):
        self.calls.append("launch")
        return SkillResponse.tell(PlainText(text="launched"))

    async def on_intent(self, request, session):
        self.calls.append(f"intent:{request.intent.name}")
        return SkillResponse.tell(PlainText(text="intent"))

    async def on_session_ended(self, request, session):
        self.calls.append("ended")


def _run(skill, raw):
    return asyncio.run(execute(skill, SkillEvent.model_validate(raw), APP_ID))


def test_launch_dispatches_once():
    skill = RecordingSkill()
    envelope = _run(skill, make_event("LaunchRequest"))
    assert skill.calls == ["launch"]
    assert envelope["response"]["outputSpeech"]["text"] == "launched"


def test_new_session_fires_started_first():
    skill = RecordingSkill()
    _run(skill, make_event("IntentRequest", intent="AMAZON.HelpIntent", new=True))
    assert skill.calls == ["started", "intent:AMAZON.HelpIntent"]


def test_session_ended_returns_empty_envelope():
    skill = RecordingSkill()
    envelope = _run(skill, make_event("SessionEndedRequest"))
    assert skill.calls == ["ended"]
    assert envelope == {"version": "1.0", "response": {}}


def test_wrong_application_id_runs_no_handler():
    skill = RecordingSkill()
    with pytest.raises(InvalidApplicationIdError):
        _run(skill, make_event("LaunchRequest", app_id="amzn1.ask.skill.other", new=True))
    assert skill.calls == []


def test_application_id_from_context_when_session_missing():
    skill = RecordingSkill()
    raw = make_event("LaunchRequest")
    del raw["session"]
    raw["context"] = {"System": {"application": {"applicationId": APP_ID}}}
    _run(skill, raw)
    assert skill.calls == ["launch"]


def test_missing_application_id_is_rejected():
    raw = make_event("LaunchRequest")
    del raw["session"]
    with pytest.raises(InvalidApplicationIdError):
        _run(RecordingSkill(), raw)


def test_unknown_request_type_raises():
    skill = RecordingSkill()
    with pytest.raises(UnknownRequestTypeError):
        _run(skill, make_event("Display.ElementSelected"))
    assert skill.calls == []


def test_session_attributes_round_trip():
    envelope = _run(RecordingSkill(), make_event("LaunchRequest", attributes={"visits": 3}))
    assert envelope["sessionAttributes"] == {"visits": 3}


def test_unknown_request_type_on_new_session_runs_no_callback():
    skill = RecordingSkill()
    with pytest.raises(UnknownRequestTypeError):
        _run(skill, make_event("Display.ElementSelected", new=True))
    assert skill.calls == []
