"""Incremental decoder for server-sent-event style chat streams.

This module hides:
- How byte chunks are reassembled into text (chunks may split characters)
- Record framing (blank-line separated, payload on ``data:`` lines)
- Which records are recognized and which are silently dropped

The decoder is a pure transform. It never raises: malformed records are
treated as keep-alive noise and skipped.
"""

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator

from .models import CompleteEvent, SessionIdEvent, StreamEvent

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = "\n\n"
PAYLOAD_PREFIX = "data:"


class EventStreamDecoder:
    """Turns boundary-unaligned byte chunks into StreamEvents.

    Usage:
        decoder = EventStreamDecoder()
        for chunk in chunks:
            for event in decoder.feed(chunk):
                ...
        decoder.close()  # discards any unterminated trailing record
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[StreamEvent]:
        """Append a chunk and return every event completed by it."""
        text = self._decoder.decode(chunk)
        if not text:
            return []

        self._buffer = (self._buffer + text).replace("\r\n", "\n")

        events: list[StreamEvent] = []
        while RECORD_SEPARATOR in self._buffer:
            record, self._buffer = self._buffer.split(RECORD_SEPARATOR, 1)
            event = parse_record(record)
            if event is not None:
                events.append(event)
        return events

    def close(self) -> list[StreamEvent]:
        """Signal end of stream.

        Flushes the character decoder and drops whatever partial record
        is still buffered. Always returns an empty list; the return value
        mirrors ``feed`` so callers can treat both uniformly.
        """
        self._decoder.decode(b"", final=True)
        if self._buffer.strip():
            logger.debug("Discarding unterminated record (%d chars)", len(self._buffer))
        self._buffer = ""
        return []

    @property
    def pending(self) -> str:
        """Text buffered but not yet terminated by a blank line."""
        return self._buffer


def parse_record(record: str) -> StreamEvent | None:
    """Parse one blank-line delimited record.

    Returns None for records without payload, with unparsable JSON,
    or with an unrecognized event type.
    """
    payload_lines = [
        line[len(PAYLOAD_PREFIX):].strip()
        for line in record.split("\n")
        if line.startswith(PAYLOAD_PREFIX)
    ]
    payload = "\n".join(payload_lines).strip()
    if not payload:
        return None

    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug("Skipping malformed record: %.80s", payload)
        return None

    if not isinstance(data, dict):
        return None

    event_type = data.get("type")
    if event_type == "session_id":
        session_id = data.get("session_id")
        return SessionIdEvent(session_id=session_id if isinstance(session_id, str) and session_id else None)
    if event_type == "complete":
        return CompleteEvent(payload=data)
    return None


def decode_events(chunks: Iterable[bytes]) -> Iterator[StreamEvent]:
    """Decode a synchronous iterable of byte chunks."""
    decoder = EventStreamDecoder()
    for chunk in chunks:
        yield from decoder.feed(chunk)
    yield from decoder.close()


async def aiter_events(chunks: AsyncIterable[bytes]) -> AsyncIterator[StreamEvent]:
    """Decode an async iterable of byte chunks, yielding events in arrival order."""
    decoder = EventStreamDecoder()
    async for chunk in chunks:
        for event in decoder.feed(chunk):
            yield event
    for event in decoder.close():
        yield event
