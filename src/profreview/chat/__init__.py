"""Streaming chat - framed event decoding and the professor persona."""

from profreview.chat.decoder import apply_stream, encode_done, encode_event, iter_events
from profreview.chat.models import ChatMessage, ConversationState, Role

__all__ = [
    "ChatMessage",
    "ConversationState",
    "Role",
    "apply_stream",
    "encode_done",
    "encode_event",
    "iter_events",
]
