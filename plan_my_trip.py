"""Plan My Trip skill.

Answers traffic and travel-time questions from MapQuest, and can text a
reminder through Twilio.

Examples:
    User:  "Alexa, open Plan My Trip"
    Alexa: "Plan My Trip. ... Now, would you like to know how the traffic is?"
    User:  "What is my E T A to Levis Stadium?"
    Alexa: "The time taken to the destination ... is 42 minutes."
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

from config import Settings, configure_logging, load_settings
from errors import EmptyResultError, MessagingError, ProviderUnavailableError, UnrecognizedIntentError
from mapquest import MapQuestClient, TrafficIncident
from messaging import SmsClient
from models import Intent, Session, SkillEvent, SkillRequest
from places import resolve_address
from response import Card, PlainText, SkillResponse, Ssml
from router import IntentRouter
from skill import execute

log = logging.getLogger(__name__)

SKILL_NAME = "Plan My Trip"

WELCOME_SPEECH = (
    "<p>Plan My Trip.</p> <p>With Plan My Trip, you can get the traffic updates near you. "
    "For example, you could say traffic update, or are the roads bad. "
    "Now, would you like to know how the traffic is?</p>"
)
WELCOME_REPROMPT = "Would you like to know how the traffic is?"
WELCOME_CARD = "Plan My Trip. Would you like to know how the traffic is?"

HELP_SPEECH = (
    "With Plan My Trip, you can get traffic updates, find out distance and time to your "
    "chosen location, remind yourself to leave, and let your friends know of your E T A. "
    "For example, you could say hows the traffic, what is my e t a to Levis Stadium, "
    "or you can say exit. Now, what would you like to do?"
)
HELP_REPROMPT = "What would you like to do?"

GOODBYE = "Goodbye"

CONNECTION_PROBLEM = "There is a problem connecting to MapQuest at this time. Please try again later."

TRAFFIC_PREFIX = "The issues on the roads are these... "
TRAFFIC_REPROMPT = "Would you like to know the traffic again?"
TRAFFIC_CARD = Card(title="Trippy trip trip", content="Plan this trip")

ETA_PREFIX = "The time taken to the destination through current traffic conditions is... "
ETA_CARD = Card(title="Plan this route", content="Route planner")

MAX_SPOKEN_INCIDENTS = 3


def traffic_narrative(incidents: List[TrafficIncident]) -> str:
    """Build the spoken SSML body for up to three incidents, in order.

    Three incidents read "Firstly, ... Secondly, ... Lastly, ...". With two the
    middle ordinal is dropped, and a single incident is read on its own.
    """
    spoken = incidents[:MAX_SPOKEN_INCIDENTS]
    if not spoken:
        raise ValueError("no incidents to describe")
    if len(spoken) == 1:
        return f"{TRAFFIC_PREFIX}<p>{escape(spoken[0].short_description)}.</p>"
    ordinals = ["Firstly", "Secondly"][: len(spoken) - 1] + ["Lastly"]
    parts = [
        f"<p>{ordinal}, </p>{escape(incident.short_description)}. "
        for ordinal, incident in zip(ordinals, spoken)
    ]
    return TRAFFIC_PREFIX + "".join(parts)


def connection_problem() -> SkillResponse:
    return SkillResponse.tell(PlainText(text=CONNECTION_PROBLEM))


class PlanMyTripSkill:
    """Concrete skill; satisfies :class:`skill.SkillHandler`."""

    def __init__(
        self,
        settings: Settings,
        mapquest: Optional[MapQuestClient] = None,
        sms: Optional[SmsClient] = None,
    ):
        self.settings = settings
        self.mapquest = mapquest or MapQuestClient(
            traffic_api_key=settings.traffic_api_key,
            routing_api_key=settings.routing_api_key,
            traffic_url=settings.traffic_url,
            route_url=settings.route_url,
            timeout=settings.http_timeout,
        )
        self.sms = sms or SmsClient(
            account_sid=settings.messaging_account_id,
            auth_token=settings.messaging_auth_token,
            api_base=settings.twilio_api_base,
            timeout=settings.http_timeout,
        )
        self.router = IntentRouter()
        self.router.register("GetTrafficUpdatesIntent", self.handle_traffic_updates)
        self.router.register("GetTimeToArrivalIntent", self.handle_time_to_arrival)
        self.router.register("GetRemindMeIntent", self.handle_remind_me)
        self.router.register("GetTellFriendsIntent", self.handle_tell_friends)
        self.router.register("AMAZON.HelpIntent", self.handle_help)
        self.router.register("AMAZON.StopIntent", self.handle_stop)
        self.router.register("AMAZON.CancelIntent", self.handle_stop)

    # Lifecycle

    async def on_session_started(self, request: SkillRequest, session: Session) -> None:
        log.info("onSessionStarted requestId: %s, sessionId: %s", request.requestId, session.sessionId)

    async def on_launch(self, request: SkillRequest, session: Session) -> SkillResponse:
        log.info("onLaunch requestId: %s, sessionId: %s", request.requestId, session.sessionId)
        return self.welcome()

    async def on_intent(self, request: SkillRequest, session: Session) -> SkillResponse:
        intent = request.intent
        if intent is None:
            log.warning("IntentRequest %s carried no intent", request.requestId)
            return self.help()
        log.info("onIntent %s requestId: %s, sessionId: %s", intent.name, request.requestId, session.sessionId)
        try:
            return await self.router.route(intent, session)
        except UnrecognizedIntentError as exc:
            log.warning("%s; answering with help", exc)
            return self.help()

    async def on_session_ended(self, request: SkillRequest, session: Session) -> None:
        log.info(
            "onSessionEnded requestId: %s, sessionId: %s, reason: %s",
            request.requestId, session.sessionId, request.reason,
        )

    # Responses

    def welcome(self) -> SkillResponse:
        return SkillResponse.ask(
            Ssml(text=WELCOME_SPEECH),
            PlainText(text=WELCOME_REPROMPT),
            card=Card(title=SKILL_NAME, content=WELCOME_CARD),
        )

    def help(self) -> SkillResponse:
        return SkillResponse.ask(PlainText(text=HELP_SPEECH), PlainText(text=HELP_REPROMPT))

    # Intent handlers

    async def handle_help(self, intent: Intent, session: Session) -> SkillResponse:
        return self.help()

    async def handle_stop(self, intent: Intent, session: Session) -> SkillResponse:
        return SkillResponse.tell(PlainText(text=GOODBYE))

    async def handle_traffic_updates(self, intent: Intent, session: Session) -> SkillResponse:
        try:
            incidents = await self.mapquest.get_traffic_incidents(self.settings.bounding_box)
        except (ProviderUnavailableError, EmptyResultError) as exc:
            log.warning("Traffic lookup failed: %s", exc)
            return connection_problem()
        return SkillResponse.ask(
            Ssml(text=traffic_narrative(incidents)),
            PlainText(text=TRAFFIC_REPROMPT),
            card=TRAFFIC_CARD,
        )

    async def handle_time_to_arrival(self, intent: Intent, session: Session) -> SkillResponse:
        destination = resolve_address(
            intent.slot_value("endLocation"),
            self.settings.place_lookup_table,
            self.settings.default_destination,
        )
        try:
            minutes = await self.mapquest.get_route_minutes(self.settings.origin_address, destination)
        except (ProviderUnavailableError, EmptyResultError) as exc:
            log.warning("Route lookup failed: %s", exc)
            return connection_problem()
        return SkillResponse.ask(
            Ssml(text=f"{ETA_PREFIX}{minutes} minutes. "),
            PlainText(text=TRAFFIC_REPROMPT),
            card=ETA_CARD,
        )

    async def handle_remind_me(self, intent: Intent, session: Session) -> SkillResponse:
        to, from_ = self.settings.remind_me_to, self.settings.remind_me_from
        if not to or not from_:
            log.error("Reminder phone numbers are not configured; no message sent")
            return SkillResponse.empty()
        try:
            sid = await self.sms.send(to, from_, self.settings.remind_me_body)
        except MessagingError as exc:
            log.error("Reminder text failed: %s", exc)
        else:
            log.info("Reminder text queued: %s", sid)
        return SkillResponse.empty()

    async def handle_tell_friends(self, intent: Intent, session: Session) -> SkillResponse:
        return SkillResponse.empty()


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """Serverless entry point: run one event to completion and return the envelope."""
    settings = load_settings()
    configure_logging(settings.log_level)
    skill = PlanMyTripSkill(settings)
    return asyncio.run(execute(skill, SkillEvent.model_validate(event), settings.app_id))
