"""Tests for settings loading from YAML and the environment."""

import pytest

from profreview.config import (
    DEFAULT_TRUNCATION_MARKER,
    GENTLE_TRUNCATION_MARKER,
    Settings,
    get_settings,
    reload_settings,
)


def test_defaults() -> None:
    settings = Settings()

    assert settings.profile == "strict"
    assert settings.effective_max_chars == 8000
    assert settings.effective_model == "openai/gpt-4o-mini"
    assert settings.effective_truncation_marker == DEFAULT_TRUNCATION_MARKER
    assert settings.output_format == "markdown"


def test_gentle_profile_limit() -> None:
    assert Settings(profile="gentle").effective_max_chars == 9000


def test_explicit_limit_overrides_profile() -> None:
    assert Settings(profile="gentle", max_chars=500).effective_max_chars == 500


def test_env_overrides_top_level(monkeypatch) -> None:
    monkeypatch.setenv("MAX_CHARS", "1234")
    monkeypatch.setenv("DEFAULT_MODEL", "anthropic/claude-sonnet")

    settings = Settings()

    assert settings.effective_max_chars == 1234
    assert settings.effective_model == "anthropic/claude-sonnet"


def test_profile_env_override(monkeypatch) -> None:
    monkeypatch.setenv("GENTLE_MAX_CHARS", "7000")
    monkeypatch.setenv("PROFILE", "gentle")

    assert Settings().effective_max_chars == 7000


def test_yaml_file(tmp_path) -> None:
    config_file = tmp_path / "review.yaml"
    config_file.write_text(
        "profile: gentle\n"
        "api_base_url: http://review.internal:8080\n"
        "profiles:\n"
        "  gentle:\n"
        "    model: openai/gpt-4o\n"
        "    temperature: 0.2\n",
        encoding="utf-8",
    )

    settings = get_settings(config_file=config_file)

    assert settings.profile == "gentle"
    assert settings.effective_model == "openai/gpt-4o"
    assert settings.effective_temperature == 0.2
    assert settings.effective_max_chars == 9000
    assert settings.api_base_url == "http://review.internal:8080"


def test_env_beats_yaml(tmp_path, monkeypatch) -> None:
    (tmp_path / "profreview.yaml").write_text("max_chars: 100\n", encoding="utf-8")
    monkeypatch.setenv("MAX_CHARS", "200")

    assert Settings().effective_max_chars == 200


def test_default_yaml_location_is_searched(tmp_path) -> None:
    (tmp_path / "profreview.yaml").write_text("output_format: json\n", encoding="utf-8")
    assert Settings().output_format == "json"


def test_missing_config_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        get_settings(config_file=tmp_path / "missing.yaml")


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_reload_settings_picks_up_env(monkeypatch) -> None:
    first = get_settings()
    monkeypatch.setenv("OUTPUT_FORMAT", "json")

    reloaded = reload_settings()

    assert reloaded is not first
    assert reloaded.output_format == "json"
    assert get_settings() is reloaded


def test_invalid_limit_is_rejected() -> None:
    with pytest.raises(ValueError):
        Settings(max_chars=0)


def test_profiles_have_own_markers() -> None:
    assert Settings().effective_truncation_marker == DEFAULT_TRUNCATION_MARKER
    assert Settings(profile="gentle").effective_truncation_marker == GENTLE_TRUNCATION_MARKER


def test_explicit_marker_overrides_profile() -> None:
    settings = Settings(profile="gentle", truncation_marker="# snip")
    assert settings.effective_truncation_marker == "# snip"


def test_partial_profile_override_keeps_marker(tmp_path) -> None:
    (tmp_path / "profreview.yaml").write_text(
        "profile: gentle\nprofiles:\n  gentle:\n    max_chars: 500\n", encoding="utf-8"
    )

    settings = Settings()

    assert settings.effective_max_chars == 500
    assert settings.effective_truncation_marker == GENTLE_TRUNCATION_MARKER


def test_profile_marker_env_override(monkeypatch) -> None:
    monkeypatch.setenv("STRICT_TRUNCATION_MARKER", "# cut")
    assert Settings().effective_truncation_marker == "# cut"
