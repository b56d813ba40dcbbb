"""Validation of generated critiques against the CritiqueResult schema."""

import json
import logging
from typing import Any

from pydantic import ValidationError

from profreview.errors import SchemaViolation
from profreview.review.models import CritiqueResult, normalize_quick_wins

logger = logging.getLogger(__name__)

__all__ = [
    "critique_json_schema",
    "migrate_legacy_critique",
    "normalize_quick_wins",
    "parse_json_payload",
    "validate_critique",
]

# Older pipeline variant: nativeQuestions[{q, intent, tryThis}]
_LEGACY_QUESTION_KEYS = ("nativeQuestions", "naiveQuestions")
_LEGACY_FIELD_MAP = {"q": "question", "tryThis": "hint"}


def critique_json_schema() -> dict[str, Any]:
    """Get the JSON schema handed to the generator as its output constraint."""
    return {
        "type": "object",
        "properties": {
            "title": {"type": "string", "minLength": 1},
            "questions": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "question": {"type": "string"},
                        "intent": {"type": "string"},
                        "hint": {"type": "string"},
                    },
                    "required": ["question", "intent", "hint"],
                },
            },
            "quickWins": {
                "anyOf": [
                    {"type": "array", "items": {"type": "string"}},
                    {"type": "string"},
                ]
            },
        },
        "required": ["title", "questions"],
    }


def parse_json_payload(text: str) -> Any:
    """Parse a JSON document emitted by a model.

    Handles markdown code fences around the document.

    Raises:
        SchemaViolation: If the text is not valid JSON.
    """
    payload = text.strip()
    if payload.startswith("```"):
        lines = payload.split("\n")
        payload = "\n".join(lines[1:-1] if lines[-1].strip() == "```" else lines[1:])

    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise SchemaViolation("Generated content is not valid JSON", [str(e)]) from e


def migrate_legacy_critique(raw: Any) -> Any:
    """Convert the legacy ``nativeQuestions`` shape to the canonical one.

    ``{title, nativeQuestions: [{q, intent, tryThis}], quickWins}`` becomes
    ``{title, questions: [{question, intent, hint}], quickWins}``. Values in
    any other shape are returned unchanged.
    """
    if not isinstance(raw, dict) or "questions" in raw:
        return raw

    legacy_key = next((key for key in _LEGACY_QUESTION_KEYS if key in raw), None)
    if legacy_key is None:
        return raw

    migrated = {key: value for key, value in raw.items() if key != legacy_key}
    legacy_questions = raw[legacy_key]
    if isinstance(legacy_questions, list):
        migrated["questions"] = [
            {_LEGACY_FIELD_MAP.get(k, k): v for k, v in item.items()}
            if isinstance(item, dict)
            else item
            for item in legacy_questions
        ]
    else:
        migrated["questions"] = legacy_questions

    logger.debug(f"Migrated legacy critique shape ({legacy_key})")
    return migrated


def _format_error_location(loc: tuple) -> str:
    parts: list[str] = []
    for item in loc:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        else:
            parts.append(f".{item}" if parts else str(item))
    return "".join(parts) or "<root>"


def validate_critique(raw: Any) -> CritiqueResult:
    """Validate a generated value and normalize it into a CritiqueResult.

    Args:
        raw: Parsed JSON value, a JSON string, or an existing CritiqueResult.

    Returns:
        The validated critique with ``quick_wins`` normalized to a list.

    Raises:
        SchemaViolation: If required fields are missing or mistyped.
    """
    if isinstance(raw, CritiqueResult):
        return raw
    if isinstance(raw, (str, bytes)):
        raw = parse_json_payload(raw.decode() if isinstance(raw, bytes) else raw)
    if not isinstance(raw, dict):
        raise SchemaViolation(
            "Critique must be a JSON object", [f"got {type(raw).__name__}"]
        )

    raw = migrate_legacy_critique(raw)

    try:
        return CritiqueResult.model_validate(raw)
    except ValidationError as e:
        errors = [
            f"{_format_error_location(err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise SchemaViolation("Critique does not match schema", errors) from e
