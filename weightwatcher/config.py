from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.moving_average import DEFAULT_WINDOW_SIZE
from .errors import ConfigError


CONFIG_FILE_NAME = ".wwrc"

_TRUE = {"1", "t", "true", "y", "yes", "on"}


class RuntimeConfig(BaseModel):
    """Settings read from the YAML config file (``~/.wwrc`` by default)."""

    data_file: Optional[Path] = Field(None, description="CSV file holding the measurements")
    verbose: bool = Field(False, description="Show more output")
    window_size: int = Field(
        DEFAULT_WINDOW_SIZE, description="Number of trailing measurements averaged in reports"
    )

    # An unreadable verbose flag means "not verbose" rather than a broken config.
    @field_validator("verbose", mode="before")
    @classmethod
    def _lenient_verbose(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        text = str(v).strip().lower()
        return text in _TRUE

    @field_validator("data_file", mode="after")
    @classmethod
    def _expand_user(cls, v: Optional[Path]) -> Optional[Path]:
        return v.expanduser() if v is not None else None


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WW_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    LOG_LEVEL: str = "WARNING"
    CONFIG_FILE: Path = Path.home() / CONFIG_FILE_NAME


class AppConfig(BaseModel):
    env: EnvSettings
    runtime: RuntimeConfig

    @staticmethod
    def load(config_path: Optional[Path] = None) -> "AppConfig":
        env = EnvSettings()  # loads from environment and .env

        if config_path is None:
            config_path = env.CONFIG_FILE
        config_path = Path(config_path).expanduser()

        runtime = RuntimeConfig()
        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as fh:
                    raw = yaml.safe_load(fh) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"syntax error in {config_path}: {exc}") from exc
            if not isinstance(raw, dict):
                raise ConfigError(f"syntax error in {config_path}: expected a mapping of settings")
            try:
                runtime = RuntimeConfig(**{str(k).lower(): v for k, v in raw.items()})
            except ValidationError as ve:
                raise ConfigError(f"invalid settings in {config_path}: {ve}") from ve

        return AppConfig(env=env, runtime=runtime)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load merged configuration from environment and the optional YAML file."""

    return AppConfig.load(config_path)
