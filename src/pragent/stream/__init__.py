"""Event stream decoding for chat responses."""

from .decoder import EventStreamDecoder, aiter_events, decode_events, parse_record
from .models import CompleteEvent, SessionIdEvent, StreamEvent

__all__ = [
    "CompleteEvent",
    "EventStreamDecoder",
    "SessionIdEvent",
    "StreamEvent",
    "aiter_events",
    "decode_events",
    "parse_record",
]
