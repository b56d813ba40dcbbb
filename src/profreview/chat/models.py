"""Data models for streamed chat conversations."""

import uuid
from enum import Enum

from pydantic import BaseModel, Field, PrivateAttr

from profreview.errors import MessageFinalizedError


class Role(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


def _new_message_id() -> str:
    return uuid.uuid4().hex


class ChatMessage(BaseModel):
    """A single message in a conversation.

    Assistant messages are appended to while their reply is streaming and
    become immutable once finalized.
    """

    id: str = Field(default_factory=_new_message_id, description="Opaque unique id")
    role: Role = Field(description="Message author")
    content: str = Field(default="", description="Message text")

    _finalized: bool = PrivateAttr(default=False)

    @property
    def finalized(self) -> bool:
        """Whether the content can no longer change."""
        return self._finalized

    def append(self, delta: str) -> None:
        """Append a streamed fragment to the content."""
        if self._finalized:
            raise MessageFinalizedError(f"Message {self.id} is finalized")
        self.content += delta

    def finalize(self) -> None:
        """Freeze the content."""
        self._finalized = True

    def to_wire(self) -> dict[str, str]:
        """Get the ``{role, content}`` form sent to the chat endpoint."""
        return {"role": self.role.value, "content": self.content}


class ConversationState:
    """Ordered, append-only list of chat messages held by the caller.

    The only mutation besides appending is to the content of the single
    in-flight assistant message, which may also be discarded if its stream
    fails.
    """

    def __init__(self, messages: list[ChatMessage] | None = None) -> None:
        """Start from an existing history.

        The given messages are copied and the copies finalized; the caller's
        objects are left untouched.
        """
        self._messages: list[ChatMessage] = [message.model_copy() for message in messages or []]
        for message in self._messages:
            message.finalize()

    @property
    def messages(self) -> list[ChatMessage]:
        """Get a copy of the message list."""
        return list(self._messages)

    @property
    def in_flight(self) -> ChatMessage | None:
        """Get the assistant message currently being streamed, if any."""
        last = self.last()
        if last is not None and last.role == Role.ASSISTANT and not last.finalized:
            return last
        return None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(self._messages)

    def last(self) -> ChatMessage | None:
        """Get the most recent message."""
        return self._messages[-1] if self._messages else None

    def add_user(self, content: str) -> ChatMessage:
        """Append a finalized user message."""
        message = ChatMessage(role=Role.USER, content=content)
        message.finalize()
        self._messages.append(message)
        return message

    def begin_assistant(self) -> ChatMessage:
        """Append an empty assistant message that will receive streamed content."""
        if self.in_flight is not None:
            raise ValueError("An assistant message is already streaming")
        message = ChatMessage(role=Role.ASSISTANT)
        self._messages.append(message)
        return message

    def discard(self, message_id: str) -> bool:
        """Remove a message by id. Returns whether it was present."""
        for i, message in enumerate(self._messages):
            if message.id == message_id:
                del self._messages[i]
                return True
        return False

    def to_wire(self) -> list[dict[str, str]]:
        """Get the whole conversation in the form resubmitted with each request."""
        return [message.to_wire() for message in self._messages]
