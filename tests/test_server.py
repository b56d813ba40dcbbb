"""Tests for the MCP review tool."""

import asyncio
import json
from unittest.mock import patch

import pytest

import profreview.server as server
from profreview.errors import SchemaViolation
from profreview.review.generators import StaticGenerator
from profreview.review.pipeline import ReviewPipeline


class _BadGenerator:
    def generate(self, prompt, target_schema):
        raise SchemaViolation("Critique does not match schema", ["title: Field required"])


@pytest.fixture
def use_pipeline(monkeypatch):
    def _use(generator) -> None:
        monkeypatch.setattr(server, "_pipeline", ReviewPipeline(generator))

    return _use


async def test_review_code_markdown(use_pipeline, critique_data) -> None:
    use_pipeline(StaticGenerator(critique_data))

    text = await server.review_code("x = 1")

    assert text.startswith("# T")


async def test_review_code_json(use_pipeline, critique_data) -> None:
    use_pipeline(StaticGenerator(critique_data))

    payload = json.loads(await server.review_code("x = 1", output_format="json"))

    assert payload["data"]["title"] == "T"
    assert payload["text"].startswith("# T")


async def test_review_code_failure(use_pipeline) -> None:
    use_pipeline(_BadGenerator())

    text = await server.review_code("x = 1")

    assert text.startswith("Review failed:")
    assert "title: Field required" in text


async def test_review_code_empty() -> None:
    assert await server.review_code("  ") == "Error: no code given"


async def test_pipeline_is_built_once_under_concurrent_calls(monkeypatch, critique_data) -> None:
    """Concurrent first calls share one lazily built pipeline."""
    monkeypatch.setattr(server, "_pipeline", None)
    pipeline = ReviewPipeline(StaticGenerator(critique_data))

    with patch.object(ReviewPipeline, "from_settings", return_value=pipeline) as from_settings:
        results = await asyncio.gather(*(server.review_code(f"x = {i}") for i in range(5)))

    assert from_settings.call_count == 1
    assert all(text.startswith("# T") for text in results)
