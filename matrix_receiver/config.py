"""Configuration management for the receiver.

Settings come from a YAML (or legacy TOML) file, with environment variables
prefixed ``MATRIX_RECEIVER_`` filling in anything the file leaves out, e.g.
``MATRIX_RECEIVER_USER__TOKEN``.
"""

import tomllib
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from matrix_receiver.exceptions import ConfigError, TemplateError
from matrix_receiver.renderers import DEFAULT_HTML_TEMPLATE, compile_template

DEFAULT_CONFIG_PATH = "/etc/matrix-alertmanager-receiver.yaml"


class MatrixSettings(BaseModel):
    homeserver: AnyHttpUrl
    room_id: str = Field(min_length=1)


class UserSettings(BaseModel):
    id: str = Field(min_length=1)
    token: SecretStr

    @field_validator("token")
    @classmethod
    def _token_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("must not be empty")
        return value


class HTTPSettings(BaseModel):
    address: str = Field(default="localhost")
    port: int = Field(default=9088, ge=1, le=65535)
    path: str = Field(default="/alert", pattern=r"^/")


class GeneralSettings(BaseModel):
    debug: bool = Field(default=False)
    mode: Literal["template", "fixed"] = Field(default="template")
    html_template: str = Field(default=DEFAULT_HTML_TEMPLATE)

    @field_validator("html_template")
    @classmethod
    def _template_parses(cls, value: str) -> str:
        try:
            compile_template(value)
        except TemplateError as e:
            raise ValueError(e.message) from e
        return value


class Settings(BaseSettings):
    """Receiver settings."""

    model_config = SettingsConfigDict(
        env_prefix="MATRIX_RECEIVER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    matrix: MatrixSettings
    user: UserSettings
    http: HTTPSettings = Field(default_factory=HTTPSettings)
    general: GeneralSettings = Field(default_factory=GeneralSettings)

    @property
    def homeserver(self) -> str:
        return str(self.matrix.homeserver).rstrip("/")

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.general.debug else "INFO"


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}", path=str(path))

    try:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        else:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Could not parse configuration file ({path}): {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}", path=str(path))
    return data


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        if item["type"] == "missing":
            problems.append(f"{location} is required")
        else:
            problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


def load_settings(config_path: str | Path) -> Settings:
    """Load and validate settings from a configuration file."""
    path = Path(config_path)
    data = _read_config_file(path)
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(
            f"Found errors in the configuration file {path}: {_format_validation_error(e)}",
            path=str(path),
        ) from e
