"""Configuration management for profreview."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_TRUNCATION_MARKER = "// ... (文字数制限により省略)"
GENTLE_TRUNCATION_MARKER = "// ...文字数が上限に達しました。"

ProfileName = Literal["strict", "gentle"]
OutputFormat = Literal["markdown", "json"]


# ============================================================================
# YAML CONFIG MODELS
# ============================================================================


class ProfileConfig(BaseModel):
    """Configuration for a single reviewer profile."""

    max_chars: int = Field(default=8000, ge=1)
    truncation_marker: str = DEFAULT_TRUNCATION_MARKER
    model: str | None = None
    temperature: float | None = None


# The strict professor clips at 8000 chars, the gentle one at 9000
_PROFILE_DEFAULTS: dict[str, dict[str, Any]] = {
    "strict": {"max_chars": 8000, "truncation_marker": DEFAULT_TRUNCATION_MARKER},
    "gentle": {"max_chars": 9000, "truncation_marker": GENTLE_TRUNCATION_MARKER},
}


class ProfilesConfig(BaseModel):
    """Configuration for all reviewer profiles."""

    strict: ProfileConfig = Field(
        default_factory=lambda: ProfileConfig(**_PROFILE_DEFAULTS["strict"])
    )
    gentle: ProfileConfig = Field(
        default_factory=lambda: ProfileConfig(**_PROFILE_DEFAULTS["gentle"])
    )

    @model_validator(mode="before")
    @classmethod
    def _fill_profile_defaults(cls, values: Any) -> Any:
        # A partial profile override keeps that profile's own limit and marker
        if isinstance(values, dict):
            for name, defaults in _PROFILE_DEFAULTS.items():
                profile = values.get(name)
                if isinstance(profile, dict):
                    values[name] = {**defaults, **profile}
        return values

    def get_profile_config(self, name: str) -> ProfileConfig:
        """Get config for a profile by name."""
        return getattr(self, name, ProfileConfig())


_DEFAULT_CONFIG_PATHS = [
    Path("profreview.yaml"),
    Path("profreview.yml"),
    Path.home() / ".config" / "profreview" / "config.yaml",
    Path.home() / ".config" / "profreview" / "config.yml",
]

# Set by get_settings(config_file=...) before Settings() is built
_config_file: Path | None = None


def _load_yaml_config() -> dict[str, Any]:
    """Load YAML config file if it exists."""
    if _config_file is not None:
        if not _config_file.exists():
            raise FileNotFoundError(f"Config file not found: {_config_file}")
        config_paths = [_config_file]
    else:
        config_paths = _DEFAULT_CONFIG_PATHS

    for path in config_paths:
        if path.exists():
            logger.debug(f"Loading config from {path}")
            with open(path) as f:
                return yaml.safe_load(f) or {}

    return {}


# Uppercase prefixes for env var routing (e.g., "GENTLE_MAX_CHARS")
_PROFILE_PREFIXES = {"STRICT_": "strict", "GENTLE_": "gentle"}
_PROFILE_SETTINGS = {"max_chars", "truncation_marker", "model", "temperature"}


def _convert_env_value(value: str) -> Any:
    """Convert environment variable string to appropriate Python type."""
    if value.isdigit():
        return int(value)
    if value.startswith("[") or value.startswith("{"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    if value.lower() == "null" or value == "":
        return None
    try:
        return float(value)
    except ValueError:
        return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides to profile settings.

    Only handles profile-specific settings with known prefixes:
    - GENTLE_MAX_CHARS -> config['profiles']['gentle']['max_chars']
    - STRICT_MODEL -> config['profiles']['strict']['model']

    Top-level settings (DEFAULT_MODEL, PROFILE, etc.) are handled directly
    by pydantic-settings and should NOT be processed here.
    """
    env_vars = {**dotenv_values(".env"), **os.environ}

    for key, value in env_vars.items():
        if value is None:
            continue
        key_upper = key.upper()

        for prefix, profile_name in _PROFILE_PREFIXES.items():
            if not key_upper.startswith(prefix):
                continue
            setting = key[len(prefix):].lower()
            if setting not in _PROFILE_SETTINGS:
                break
            profiles = config.setdefault("profiles", {})
            profiles.setdefault(profile_name, {})[setting] = _convert_env_value(value)
            break

    return config


class Settings(BaseSettings):
    """Application settings loaded from YAML + environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    profiles: ProfilesConfig = Field(default_factory=ProfilesConfig)

    # Top-level defaults (also available via env vars DEFAULT_MODEL, etc.)
    default_model: str = "openai/gpt-4o-mini"
    profile: ProfileName = "strict"
    max_chars: int | None = Field(default=None, ge=1)
    truncation_marker: str | None = None
    temperature: float = 0.7

    output_format: OutputFormat = "markdown"
    log_level: str = "INFO"

    # Endpoints used by the HTTP clients
    api_base_url: str = "http://localhost:4111"
    review_path: str = "/review"
    chat_path: str = "/chat"
    request_timeout: float = 120.0

    # LLM provider settings
    openai_api_key: str | None = Field(default=None, repr=False)
    anthropic_api_key: str | None = Field(default=None, repr=False)
    gemini_api_key: str | None = Field(default=None, repr=False)

    @property
    def profile_config(self) -> ProfileConfig:
        """Get the configuration of the active profile."""
        return self.profiles.get_profile_config(self.profile)

    @property
    def effective_max_chars(self) -> int:
        """Get the truncation limit (explicit override or profile default)."""
        return self.max_chars or self.profile_config.max_chars

    @property
    def effective_truncation_marker(self) -> str:
        """Get the omission marker (explicit override or profile default)."""
        return self.truncation_marker or self.profile_config.truncation_marker

    @property
    def effective_model(self) -> str:
        """Get the model for the active profile (profile-specific or default)."""
        return self.profile_config.model or self.default_model

    @property
    def effective_temperature(self) -> float:
        """Get the sampling temperature for the active profile."""
        config = self.profile_config
        return config.temperature if config.temperature is not None else self.temperature

    def log_profile_config(self) -> None:
        """Log the configuration of the active profile."""
        logger.info(
            f"Profile {self.profile}: model={self.effective_model}, "
            f"max_chars={self.effective_max_chars}, temperature={self.effective_temperature}"
        )

    @model_validator(mode="before")
    @classmethod
    def load_yaml_config(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Load YAML config and merge with env vars.

        Priority: Environment Variables > YAML Config > Defaults
        """
        yaml_config = _load_yaml_config()
        yaml_config = _apply_env_overrides(yaml_config)

        for key, val in yaml_config.items():
            if val is None:
                continue
            if key == "profiles" and isinstance(values.get(key), dict):
                continue
            if key not in values:
                values[key] = val

        return values


settings: Settings | None = None


def get_settings(config_file: str | Path | None = None) -> Settings:
    """Get the current settings instance.

    Args:
        config_file: Optional YAML file that replaces the default search paths.
            Passing it forces the settings to be rebuilt.
    """
    global settings, _config_file
    if config_file is not None:
        _config_file = Path(config_file).expanduser()
        settings = Settings()
    elif settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings (useful after environment changes)."""
    global settings
    settings = Settings()
    return settings
