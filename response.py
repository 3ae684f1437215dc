"""Response envelopes returned to the voice platform.

A reply is either terminal (``tell``, the session ends) or continuing
(``ask``, the platform keeps listening and plays the reprompt if the user
stays quiet). Either kind may carry a simple display card.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict

SPEAK_OPEN = "<speak>"
SPEAK_CLOSE = "</speak>"


class OutputSpeech(BaseModel):
    """Speech as it appears on the wire."""

    type: str = "PlainText"
    text: Optional[str] = None
    ssml: Optional[str] = None


class PlainText(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str

    def render(self) -> OutputSpeech:
        return OutputSpeech(type="PlainText", text=self.text)


class Ssml(BaseModel):
    """Markup speech. The text is wrapped in a single ``<speak>`` root."""

    model_config = ConfigDict(frozen=True)

    text: str

    @property
    def document(self) -> str:
        body = self.text.strip()
        if body.startswith(SPEAK_OPEN) and body.endswith(SPEAK_CLOSE):
            return body
        return f"{SPEAK_OPEN}{body}{SPEAK_CLOSE}"

    def render(self) -> OutputSpeech:
        return OutputSpeech(type="SSML", ssml=self.document)


Speech = Union[PlainText, Ssml]


class Card(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = "Simple"
    title: str
    content: str


class Reprompt(BaseModel):
    outputSpeech: OutputSpeech


class ResponseBody(BaseModel):
    outputSpeech: Optional[OutputSpeech] = None
    card: Optional[Card] = None
    reprompt: Optional[Reprompt] = None
    shouldEndSession: bool = True


class ResponseEnvelope(BaseModel):
    version: str = "1.0"
    sessionAttributes: Optional[Dict[str, Any]] = None
    response: ResponseBody


class SkillResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    speech: Optional[Speech] = None
    reprompt: Optional[Speech] = None
    card: Optional[Card] = None
    should_end_session: bool = True

    @classmethod
    def tell(cls, speech: Speech, card: Optional[Card] = None) -> "SkillResponse":
        return cls(speech=speech, card=card, should_end_session=True)

    @classmethod
    def ask(cls, speech: Speech, reprompt: Speech, card: Optional[Card] = None) -> "SkillResponse":
        return cls(speech=speech, reprompt=reprompt, card=card, should_end_session=False)

    @classmethod
    def empty(cls) -> "SkillResponse":
        """A terminal reply with nothing to say."""
        return cls()

    def to_envelope(self, session_attributes: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body = ResponseBody(
            outputSpeech=self.speech.render() if self.speech is not None else None,
            card=self.card,
            reprompt=Reprompt(outputSpeech=self.reprompt.render()) if self.reprompt is not None else None,
            shouldEndSession=self.should_end_session,
        )
        envelope = ResponseEnvelope(
            sessionAttributes=dict(session_attributes) if session_attributes else None,
            response=body,
        )
        return envelope.model_dump(exclude_none=True)
