"""Shared fixtures for the profreview test suite."""

from __future__ import annotations

from typing import Any

import pytest

import profreview.config as config_module

_ENV_VARS = (
    "DEFAULT_MODEL",
    "PROFILE",
    "MAX_CHARS",
    "TRUNCATION_MARKER",
    "OUTPUT_FORMAT",
    "API_BASE_URL",
    "STRICT_MAX_CHARS",
    "GENTLE_MAX_CHARS",
    "STRICT_MODEL",
    "GENTLE_MODEL",
    "STRICT_TRUNCATION_MARKER",
    "GENTLE_TRUNCATION_MARKER",
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch) -> None:
    """Keep config files, .env and cached settings from leaking between tests."""
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "settings", None)
    monkeypatch.setattr(config_module, "_config_file", None)
    monkeypatch.setattr(config_module, "_DEFAULT_CONFIG_PATHS", [tmp_path / "profreview.yaml"])


@pytest.fixture
def critique_data() -> dict[str, Any]:
    """A generator answer in the canonical shape, with quickWins as a bare string."""
    return {
        "title": "T",
        "questions": [{"question": "Q", "intent": "I", "hint": "H"}],
        "quickWins": "W",
    }


@pytest.fixture
def full_critique_data() -> dict[str, Any]:
    return {
        "title": "`total` は誰のものだ？",
        "questions": [
            {
                "question": "`total += price` で price が None のときどうなるんだ？",
                "intent": "None 入力時の挙動を確認したい",
                "hint": "呼び出し元が何を渡しうるか列挙してみよう",
            },
            {
                "question": "`calc()` という名前で何を計算しているか分かるのか？",
                "intent": "命名の意図",
                "hint": "関数名だけで責務が伝わるか考えよう",
            },
        ],
        "quickWins": ["`calc` を `sum_prices` に改名する", "None チェックを追加する"],
    }
