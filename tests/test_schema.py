"""Tests for critique schema validation and normalization."""

from typing import Any

import pytest

from profreview.errors import SchemaViolation
from profreview.review.models import CritiqueResult, Question
from profreview.review.schema import (
    critique_json_schema,
    migrate_legacy_critique,
    normalize_quick_wins,
    validate_critique,
)


def _critique(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "title": "T",
        "questions": [{"question": "Q", "intent": "I", "hint": "H"}],
    }
    data.update(overrides)
    return data


def test_valid_critique_is_accepted() -> None:
    result = validate_critique(_critique(quickWins=["fix X"]))

    assert isinstance(result, CritiqueResult)
    assert result.title == "T"
    assert result.questions == [Question(question="Q", intent="I", hint="H")]
    assert result.quick_wins == ["fix X"]


def test_bare_string_quick_wins_is_wrapped() -> None:
    assert validate_critique(_critique(quickWins="fix X")).quick_wins == ["fix X"]


def test_list_quick_wins_keeps_order() -> None:
    result = validate_critique(_critique(quickWins=["fix X", "fix Y"]))
    assert result.quick_wins == ["fix X", "fix Y"]


@pytest.mark.parametrize("data", [_critique(), _critique(quickWins=None), _critique(quickWins=[])])
def test_missing_or_empty_quick_wins_becomes_empty_list(data: dict[str, Any]) -> None:
    assert validate_critique(data).quick_wins == []


def test_missing_title_is_rejected() -> None:
    data = _critique()
    del data["title"]

    with pytest.raises(SchemaViolation) as exc_info:
        validate_critique(data)

    assert any(err.startswith("title") for err in exc_info.value.errors)


def test_empty_title_is_rejected() -> None:
    with pytest.raises(SchemaViolation):
        validate_critique(_critique(title=""))


def test_question_missing_hint_is_rejected() -> None:
    data = _critique(questions=[{"question": "Q", "intent": "I"}])

    with pytest.raises(SchemaViolation) as exc_info:
        validate_critique(data)

    assert any(err.startswith("questions[0].hint") for err in exc_info.value.errors)


@pytest.mark.parametrize(
    "overrides",
    [
        {"questions": None},
        {"questions": "Q"},
        {"questions": ["Q"]},
        {"questions": [{"question": 1, "intent": "I", "hint": "H"}]},
        {"quickWins": [1, 2]},
        {"quickWins": {"fix": "X"}},
        {"title": 42},
    ],
)
def test_mistyped_fields_are_rejected(overrides: dict[str, Any]) -> None:
    with pytest.raises(SchemaViolation):
        validate_critique(_critique(**overrides))


@pytest.mark.parametrize("raw", [None, [], "[]", 3])
def test_non_object_is_rejected(raw: Any) -> None:
    with pytest.raises(SchemaViolation):
        validate_critique(raw)


def test_empty_question_list_is_allowed() -> None:
    assert validate_critique(_critique(questions=[])).questions == []


def test_json_string_is_parsed() -> None:
    raw = '{"title": "T", "questions": [], "quickWins": "W"}'
    assert validate_critique(raw).quick_wins == ["W"]


def test_fenced_json_string_is_parsed() -> None:
    raw = '```json\n{"title": "T", "questions": []}\n```'
    assert validate_critique(raw).title == "T"


def test_invalid_json_string_is_rejected() -> None:
    with pytest.raises(SchemaViolation):
        validate_critique("{not json")


def test_extra_fields_are_ignored() -> None:
    result = validate_critique(_critique(summary="ignored"))
    assert result.title == "T"


def test_legacy_shape_is_migrated() -> None:
    legacy = {
        "title": "T",
        "nativeQuestions": [{"q": "Q", "intent": "I", "tryThis": "H"}],
        "quickWins": ["W"],
    }

    result = validate_critique(legacy)

    assert result.questions == [Question(question="Q", intent="I", hint="H")]
    assert result.quick_wins == ["W"]


def test_migration_leaves_canonical_shape_alone() -> None:
    data = _critique()
    assert migrate_legacy_critique(data) is data


def test_migration_accepts_misspelt_key() -> None:
    migrated = migrate_legacy_critique({"title": "T", "naiveQuestions": []})
    assert migrated == {"title": "T", "questions": []}


def test_normalize_quick_wins() -> None:
    assert normalize_quick_wins("fix X") == ["fix X"]
    assert normalize_quick_wins(["fix X", "fix Y"]) == ["fix X", "fix Y"]
    assert normalize_quick_wins(None) == []


def test_json_dict_uses_wire_names() -> None:
    result = validate_critique(_critique(quickWins="W"))
    assert result.to_json_dict() == {
        "title": "T",
        "questions": [{"question": "Q", "intent": "I", "hint": "H"}],
        "quickWins": ["W"],
    }


def test_json_schema_requires_question_fields() -> None:
    schema = critique_json_schema()
    item = schema["properties"]["questions"]["items"]
    assert set(item["required"]) == {"question", "intent", "hint"}
    assert set(schema["required"]) == {"title", "questions"}
