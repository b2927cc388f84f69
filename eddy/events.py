"""
eddy/events.py
--------------
Event payloads received by the service's /events endpoint.

Payloads are loosely typed: unknown or malformed `type` values must not
reject the whole payload. Each tagged field goes through `parse_or_default`,
which turns anything unrecognized into an explicit default variant instead of
relying on implicit coercion.
"""

from enum import Enum
from typing import Any, Callable, Dict, TypeVar

from pydantic import BaseModel, Field, field_validator

T = TypeVar("T")


def parse_or_default(parse: Callable[[Any], T], value: Any, default: T) -> T:
    """
    Returns `parse(value)`, or `default` when the value cannot be parsed.

    >>> parse_or_default(EventType, "app_mention", EventType.SKIP)
    <EventType.APP_MENTION: 'app_mention'>
    >>> parse_or_default(EventType, "reaction_added", EventType.SKIP)
    <EventType.SKIP: 'skip'>
    """
    try:
        return parse(value)
    except (TypeError, ValueError):
        return default


class EventWrapperType(str, Enum):
    EVENT_CALLBACK   = "event_callback"
    URL_VERIFICATION = "url_verification"


class EventType(str, Enum):
    SKIP        = "skip"
    APP_MENTION = "app_mention"


class Event(BaseModel):
    type: EventType = EventType.SKIP
    text: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> EventType:
        return parse_or_default(EventType, value, EventType.SKIP)


class EventWrapper(BaseModel):
    type: EventWrapperType = EventWrapperType.EVENT_CALLBACK
    event: Event = Field(default_factory=Event)
    challenge: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> EventWrapperType:
        return parse_or_default(EventWrapperType, value, EventWrapperType.EVENT_CALLBACK)


def parse_event(payload: Dict[str, Any]) -> EventWrapper:
    """Validates a decoded event payload (raises pydantic.ValidationError)."""
    return EventWrapper.model_validate(payload)


def handle_event(wrapper: EventWrapper) -> Dict[str, Any]:
    """
    Answers an event.

    URL verification echoes the challenge; an app mention is acknowledged;
    every other event is skipped with an empty body.
    """
    if wrapper.type is EventWrapperType.URL_VERIFICATION:
        return {"challenge": wrapper.challenge}
    if wrapper.event.type is EventType.APP_MENTION:
        return {"success": True}
    return {}
