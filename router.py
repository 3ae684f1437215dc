"""Intent router for the skill.

Maps intent names to handler coroutines. Lookup is an exact, case-sensitive
match on the name the platform sends.
"""

from typing import Awaitable, Callable, Dict, List

from errors import UnrecognizedIntentError
from models import Intent, Session
from response import SkillResponse

IntentHandler = Callable[[Intent, Session], Awaitable[SkillResponse]]


class IntentRouter:
    def __init__(self):
        self.handlers: Dict[str, IntentHandler] = {}

    def register(self, intent: str, handler: IntentHandler) -> None:
        """Register a handler for a given intent name.

        The handler receives the intent (with its slots) and the session and
        returns the response to send back.
        """
        self.handlers[intent] = handler

    def names(self) -> List[str]:
        return list(self.handlers)

    async def route(self, intent: Intent, session: Session) -> SkillResponse:
        handler = self.handlers.get(intent.name)
        if handler is None:
            raise UnrecognizedIntentError(intent.name)
        return await handler(intent, session)
