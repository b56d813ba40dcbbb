"""HTTP clients for the batch review and streaming chat endpoints."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

import httpx

from profreview.chat.decoder import apply_stream
from profreview.chat.models import ChatMessage, ConversationState
from profreview.config import Settings, get_settings
from profreview.errors import ChatRequestError, ReviewRequestError, TransportFailure
from profreview.review.models import FormattedReview
from profreview.review.schema import validate_critique

logger = logging.getLogger(__name__)


class _EndpointClient:
    """Shared httpx client setup for the review and chat endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.base_url = (base_url or self.settings.api_base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else self.settings.request_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


class ReviewClient(_EndpointClient):
    """Client for the one-shot review endpoint."""

    async def review(self, code: str) -> FormattedReview:
        """Request a review of ``code``.

        The text is re-rendered from the returned data so it always matches
        the canonical layout, whichever critique shape the server sent.

        Raises:
            ReviewRequestError: On a non-2xx status or an empty body.
            SchemaViolation: If the returned data is not a critique.
            TransportFailure: If the connection fails.
        """
        path = self.settings.review_path
        try:
            resp = await self._client.post(path, json={"code": code})
        except httpx.TransportError as e:
            raise TransportFailure(f"Review request failed: {e}") from e

        body = resp.text
        if resp.status_code >= 400:
            logger.error(f"Review API error status={resp.status_code} body={body[:1000]}")
            raise ReviewRequestError(resp.status_code, body)
        if not body.strip():
            raise ReviewRequestError(resp.status_code, "")

        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            raise ReviewRequestError(resp.status_code, body) from e

        data = payload.get("data", payload) if isinstance(payload, dict) else payload
        return FormattedReview.from_result(validate_critique(data))


class ChatClient(_EndpointClient):
    """Client for the streaming chat endpoint.

    The conversation is owned by the caller and resubmitted whole with
    every request.
    """

    async def send(
        self,
        conversation: ConversationState,
        content: str,
        on_delta: Callable[[str], None] | None = None,
    ) -> ChatMessage:
        """Add a user message and stream the assistant's reply into the conversation.

        Returns:
            The finalized assistant message.

        Raises:
            ChatRequestError: If the endpoint answers with an error status.
            TransportFailure: If the connection fails before or while streaming.
        """
        conversation.add_user(content)
        payload = {"messages": conversation.to_wire()}
        path = self.settings.chat_path

        try:
            async with self._client.stream("POST", path, json=payload) as resp:
                if resp.status_code >= 400:
                    body = (await resp.aread()).decode(errors="replace")
                    logger.error(f"Chat API error status={resp.status_code} body={body[:1000]}")
                    raise ChatRequestError(resp.status_code, body)
                return await apply_stream(resp.aiter_bytes(), conversation, on_delta)
        except httpx.TransportError as e:
            raise TransportFailure(f"Chat request failed: {e}") from e
