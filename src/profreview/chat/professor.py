"""The professor persona for conversational, streamed replies."""

import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any

import litellm

from profreview.chat.decoder import TEXT_DELTA, encode_done, encode_event
from profreview.config import Settings, get_settings
from profreview.errors import GenerationUnavailable
from profreview.llm import PROVIDER_ERRORS

logger = logging.getLogger(__name__)

PROFESSOR_INSTRUCTIONS = "\n".join([
    "あなたは『素人質問を投げてくる教授』です。ユーモアがあり、少し回りくどいが憎めない口調です。",
    "ユーザーが貼ったコードを読んで、あえて初歩的で素朴な質問を投げてアウトプットを引き出してください。",
    "回答は必ず最初に『素人質問で恐縮ですが...』から始めてください。これは例外なく毎回です。",
    "質問は毎回 5〜10 個。短すぎないようにしてください。",
    "質問は具体的に：変数名、関数の責務、例外処理、境界条件、計算量、テスト観点、命名の意図など。",
    "対象言語は固定しません。見た目から推測してOK。分からなければ『この言語は何ですか？』と質問して良い。",
])


def build_messages(messages: Sequence[dict[str, str]]) -> list[dict[str, str]]:
    """Prepend the persona instructions to a resubmitted conversation."""
    return [{"role": "system", "content": PROFESSOR_INSTRUCTIONS}, *messages]


async def stream_deltas(
    messages: Sequence[dict[str, str]], settings: Settings | None = None
) -> AsyncIterator[str]:
    """Stream the professor's reply as text fragments.

    Raises:
        GenerationUnavailable: If the provider call fails.
    """
    settings = settings or get_settings()
    model = settings.effective_model
    kwargs: dict[str, Any] = {
        "model": model,
        "messages": build_messages(messages),
        "temperature": settings.effective_temperature,
        "stream": True,
    }

    try:
        response = await litellm.acompletion(**kwargs)
        async for chunk in response:
            choices = getattr(chunk, "choices", None) or []
            if not choices:
                continue
            text = getattr(choices[0].delta, "content", None)
            if text:
                yield text
    except PROVIDER_ERRORS as e:
        logger.error(f"Chat completion with {model} failed: {e}")
        raise GenerationUnavailable(f"Chat completion with {model} failed: {e}") from e


async def stream_reply(
    messages: Sequence[dict[str, str]], settings: Settings | None = None
) -> AsyncIterator[str]:
    """Stream the professor's reply as ``data:`` framed records.

    Yields one ``text-delta`` record per fragment followed by the sentinel.
    """
    async for delta in stream_deltas(messages, settings):
        yield encode_event({"type": TEXT_DELTA, "delta": delta})
    yield encode_done()
