"""Tokenizer layer producing structural parse events.

Key Components:
    XMLEventSource: Scoped event producer for bytes, text, paths, and streams
    ParseEvent: Single start-tag, text, end-tag, or end-of-document event
    EventType: Enumeration of the event kinds
"""

from .events import EventType, ParseEvent, SourceType, XMLEventSource

__all__ = [
    "EventType",
    "ParseEvent",
    "SourceType",
    "XMLEventSource",
]
