"""
Configuration management.

Loads settings from the YAML config file ($HOME/.config/gq/.gq.yaml) and
environment variables. Values from the file win; environment variables
fill gaps.
Prefix: GQ_ (nested sections use "__", e.g. GQ_OPENAI__API_KEY)
"""

import os
import re
from datetime import date
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "gq" / ".gq.yaml"

# Section names whose camelCase spelling doesn't snake_case cleanly
SECTION_KEYS = {
    "openAI": "openai",
    "azureOpenAI": "azure_openai",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class GQError(Exception):
    """Base error for everything gq reports to the user."""


class ConfigError(GQError):
    """Config file missing, malformed, or lacking a required value."""


class GeminiSettings(BaseModel):
    api_key: str = ""
    model_name: str = "gemini-pro"
    temperature: float = 0.5
    max_output_tokens: int = 1024


class OpenAISettings(BaseModel):
    api_key: str = ""
    model_name: str = "gpt-3.5-turbo"
    temperature: float = 0.5
    max_output_tokens: int = 1024


class AzureOpenAISettings(BaseModel):
    api_key: str = ""
    model_endpoint: str = ""
    model_deployment_id: str = ""
    api_version: str = "2024-02-01"
    temperature: float = 0.5
    max_output_tokens: int = 1024

    @field_validator("api_version", mode="before")
    @classmethod
    def _date_to_str(cls, value: Any) -> Any:
        # Unquoted YAML 2024-02-01 loads as a date
        if isinstance(value, date):
            return value.isoformat()
        return value


class BedrockSettings(BaseModel):
    model_name: str = "amazon.titan-text-express-v1"
    aws_profile: str | None = None
    aws_region: str | None = None
    # None means "use the model's own default"
    temperature: float | None = None
    max_output_tokens: int | None = None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GQ_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    default_provider: str = Field(default="gemini", description="Provider used when -p is absent")
    log_file: Path | None = Field(default=None, description="Optional log file")

    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    azure_openai: AzureOpenAISettings = Field(default_factory=AzureOpenAISettings)
    bedrock: BedrockSettings = Field(default_factory=BedrockSettings)


def to_snake(key: str) -> str:
    """Convert a camelCase config key to snake_case (modelDeploymentID -> model_deployment_id)."""
    if key in SECTION_KEYS:
        return SECTION_KEYS[key]
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def normalize_keys(data: Any) -> Any:
    """Recursively snake_case all mapping keys."""
    if isinstance(data, dict):
        return {to_snake(str(k)): normalize_keys(v) for k, v in data.items()}
    return data


def resolve_config_path(path: Path | str | None = None) -> Path:
    """Explicit path, then $GQ_CONFIG, then the default location."""
    if path:
        return Path(path).expanduser()
    env_path = os.environ.get("GQ_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def load_settings(path: Path | str | None = None) -> Settings:
    """Read the YAML config file and build validated settings.

    Args:
        path: Config file location (defaults to $HOME/.config/gq/.gq.yaml)

    Returns:
        Settings instance

    Raises:
        ConfigError: If the file can't be read, parsed or validated
    """
    config_path = resolve_config_path(path)
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Error reading config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    try:
        # A bare "gemini:" line loads as None; leave it to defaults and env
        values = {k: v for k, v in normalize_keys(data).items() if v is not None}
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {config_path}: {e}") from e


def require(value: Any, name: str) -> Any:
    """Return value, or raise ConfigError naming the missing key."""
    if value in (None, ""):
        raise ConfigError(f"{name} is not configured")
    return value
