"""Exceptions raised while handling skill requests."""


class SkillError(Exception):
    """Base class for every error the skill raises on purpose."""


class ConfigurationError(SkillError):
    """A required setting is missing or malformed."""


class InvalidApplicationIdError(SkillError):
    """The event was addressed to a different skill."""

    def __init__(self, received: str | None):
        super().__init__(f"Invalid applicationId: {received!r}")
        self.received = received


class UnknownRequestTypeError(SkillError):
    def __init__(self, request_type: str):
        super().__init__(f"Unsupported request type: {request_type}")
        self.request_type = request_type


class UnrecognizedIntentError(SkillError):
    def __init__(self, intent_name: str):
        super().__init__(f"Unsupported intent: {intent_name}")
        self.intent_name = intent_name


class ProviderError(SkillError):
    """Something went wrong talking to a third-party web API."""


class ProviderUnavailableError(ProviderError):
    """The request failed at the network level or returned an HTTP error."""


class EmptyResultError(ProviderError):
    """The provider answered but there was nothing usable in the body."""


class MalformedResponseError(ProviderError):
    """The body could not be decoded into the expected shape."""


class MessagingError(SkillError):
    """Sending a text message failed."""
