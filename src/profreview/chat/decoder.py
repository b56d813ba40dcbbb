"""Incremental decoding of ``data:`` framed event streams.

The chat endpoint answers with newline-delimited records::

    data: {"type": "text-delta", "delta": "Hel"}
    data: {"type": "text-delta", "delta": "lo"}
    data: [DONE]

Records may be split across chunks arbitrarily. Lines without the ``data: ``
prefix and payloads that are not JSON objects are dropped.
"""

import asyncio
import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable
from typing import Any

import httpx

from profreview.chat.models import ChatMessage, ConversationState
from profreview.errors import TransportFailure

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"
TEXT_DELTA = "text-delta"

_TRANSPORT_ERRORS = (httpx.TransportError, OSError)


class _EndOfStream(Exception):
    """Raised internally when the sentinel record is seen."""


def _parse_line(line: str) -> dict[str, Any] | None:
    """Parse one complete line into an event, or None if it carries none.

    Raises:
        _EndOfStream: If the line is the sentinel record.
    """
    if line.endswith("\r"):
        line = line[:-1]
    if not line.startswith(DATA_PREFIX):
        return None

    payload = line[len(DATA_PREFIX):]
    if payload.strip() == DONE_SENTINEL:
        raise _EndOfStream()

    try:
        event = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug(f"Dropping malformed record: {payload[:200]!r}")
        return None
    if not isinstance(event, dict):
        logger.debug(f"Dropping non-object record: {payload[:200]!r}")
        return None
    return event


async def iter_events(chunks: AsyncIterable[bytes | str]) -> AsyncIterator[dict[str, Any]]:
    """Decode a chunked byte stream into event objects.

    Incomplete trailing lines are buffered until the next chunk arrives.
    Iteration stops at the sentinel record or when the stream ends.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""

    try:
        async for chunk in chunks:
            buffer += decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
            *lines, buffer = buffer.split("\n")
            for line in lines:
                event = _parse_line(line)
                if event is not None:
                    yield event

        buffer += decoder.decode(b"", final=True)
        if buffer:
            event = _parse_line(buffer)
            if event is not None:
                yield event
    except _EndOfStream:
        return


def text_delta(event: dict[str, Any]) -> str | None:
    """Get the text fragment of a ``text-delta`` event, or None for other kinds."""
    if event.get("type") != TEXT_DELTA:
        return None
    delta = event.get("delta")
    return delta if isinstance(delta, str) and delta else None


async def apply_stream(
    chunks: AsyncIterable[bytes | str],
    conversation: ConversationState,
    on_delta: Callable[[str], None] | None = None,
) -> ChatMessage:
    """Stream a reply into a new assistant message of ``conversation``.

    The message is finalized when the stream ends cleanly. If reading
    fails or is cancelled, the message is removed from the conversation.
    *on_delta* is called with each fragment after it has been applied.

    Returns:
        The finalized assistant message.

    Raises:
        TransportFailure: If the connection fails mid-stream.
    """
    message = conversation.begin_assistant()
    try:
        async for event in iter_events(chunks):
            delta = text_delta(event)
            if delta is not None:
                message.append(delta)
                if on_delta:
                    on_delta(delta)
    except _TRANSPORT_ERRORS as e:
        conversation.discard(message.id)
        logger.error(f"Stream failed after {len(message.content)} chars: {e}")
        raise TransportFailure(f"Connection lost while streaming: {e}") from e
    except (asyncio.CancelledError, Exception):
        conversation.discard(message.id)
        raise

    message.finalize()
    return message


def encode_event(event: dict[str, Any]) -> str:
    """Encode an event as a single ``data:`` record."""
    return f"{DATA_PREFIX}{json.dumps(event, ensure_ascii=False)}\n"


def encode_done() -> str:
    """Encode the sentinel record."""
    return f"{DATA_PREFIX}{DONE_SENTINEL}\n"
