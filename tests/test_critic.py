"""Tests for prompt construction and critique generation."""

import pytest

from profreview.errors import GenerationUnavailable, SchemaViolation
from profreview.review.critic import CritiqueGenerator
from profreview.review.generators import StaticGenerator, TextGenerator
from profreview.review.prompt import CODE_END, CODE_START, build_critique_prompt


class _FailingGenerator:
    def __init__(self, error: Exception) -> None:
        self.error = error

    def generate(self, prompt, target_schema):
        raise self.error


def test_prompt_embeds_code_between_delimiters() -> None:
    code = "def f(x):\n    return x * 2"

    prompt = build_critique_prompt(code)

    assert f"{CODE_START}\n{code}\n{CODE_END}" in prompt
    assert prompt.endswith(CODE_END)


def test_prompt_depends_only_on_code() -> None:
    assert build_critique_prompt("x=1") == build_critique_prompt("x=1")
    assert build_critique_prompt("x=1") != build_critique_prompt("x=2")


def test_prompt_describes_output_fields() -> None:
    prompt = build_critique_prompt("x=1")
    for field in ("title", "questions", "question", "intent", "hint", "quickWins"):
        assert f'"{field}"' in prompt


def test_static_generator_is_a_text_generator() -> None:
    assert isinstance(StaticGenerator({}), TextGenerator)


def test_generate_returns_validated_critique(critique_data) -> None:
    generator = StaticGenerator(critique_data)
    critic = CritiqueGenerator(generator)

    result = critic.generate("x=1")

    assert result.title == "T"
    assert result.quick_wins == ["W"]
    assert generator.prompts == [build_critique_prompt("x=1")]


def test_generate_accepts_json_text(critique_data) -> None:
    import json

    critic = CritiqueGenerator(StaticGenerator(json.dumps(critique_data)))
    assert critic("x=1").questions[0].hint == "H"


def test_nonconforming_output_raises_schema_violation() -> None:
    critic = CritiqueGenerator(StaticGenerator({"title": "T"}))

    with pytest.raises(SchemaViolation):
        critic.generate("x=1")


def test_generation_failure_is_propagated() -> None:
    error = GenerationUnavailable("provider down")
    critic = CritiqueGenerator(_FailingGenerator(error))

    with pytest.raises(GenerationUnavailable) as exc_info:
        critic.generate("x=1")

    assert exc_info.value is error
