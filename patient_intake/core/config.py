"""
Intake configuration management.

Loads pipeline settings from an optional YAML file and applies
environment overrides.
"""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

DEFAULT_TIMEOUT_SECONDS = 30.0

TIMEOUT_ENV_VAR = "PATIENT_INTAKE_TIMEOUT_SECONDS"
LOG_LEVEL_ENV_VAR = "LOG_LEVEL"


class ConfigError(ValueError):
    """Raised when configuration values are invalid."""
    pass


class IntakeSettings(BaseModel):
    """
    Validated runtime settings for ingestion.

    Attributes:
        timeout_seconds: Seconds allowed for parsing one upload
        encoding: Text encoding for uploaded bytes
        delimiter: CSV field delimiter
        parse_workers: Worker threads available for parsing
        log_level: Logger level name
        log_format: "json" or "text"
    """

    timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)
    encoding: str = Field("utf-8", min_length=1)
    delimiter: str = Field(",", min_length=1, max_length=1)
    parse_workers: int = Field(2, ge=1)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "json"

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "timeout_seconds": 30,
                "encoding": "utf-8",
                "delimiter": ",",
                "parse_workers": 2,
                "log_level": "INFO",
                "log_format": "json",
            }
        }


class SettingsLoader:
    """
    Loads intake settings from YAML configuration files.

    Expected YAML format:
    ```yaml
    intake:
      timeout_seconds: 30
      encoding: utf-8
      delimiter: ","
      log_format: json
    ```
    """

    def __init__(self, config_path: str | Path | None = None):
        """
        Initialize the settings loader.

        Args:
            config_path: Path to the YAML configuration file (None for defaults only)
        """
        self.config_path = Path(config_path) if config_path else None
        if self.config_path and not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

    def load(self, environ: dict[str, str] | None = None) -> IntakeSettings:
        """
        Load settings from file, then apply environment overrides.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Validated IntakeSettings

        Raises:
            ConfigError: If the file or environment values are invalid
        """
        values = self._read_file()
        values.update(self._read_env(os.environ if environ is None else environ))

        try:
            return IntakeSettings(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid intake settings: {e}") from e

    def _read_file(self) -> dict[str, Any]:
        if self.config_path is None:
            return {}

        with open(self.config_path) as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not config:
            return {}
        if not isinstance(config, dict) or "intake" not in config:
            raise ConfigError("Configuration file must contain 'intake' section")

        section = config["intake"] or {}
        if not isinstance(section, dict):
            raise ConfigError("'intake' section must be a mapping")
        return dict(section)

    @staticmethod
    def _read_env(environ: dict[str, str]) -> dict[str, Any]:
        overrides: dict[str, Any] = {}

        raw_timeout = environ.get(TIMEOUT_ENV_VAR)
        if raw_timeout:
            try:
                overrides["timeout_seconds"] = float(raw_timeout)
            except ValueError as e:
                raise ConfigError(
                    f"Invalid {TIMEOUT_ENV_VAR} value: expected number, got '{raw_timeout}'"
                ) from e

        raw_level = environ.get(LOG_LEVEL_ENV_VAR)
        if raw_level:
            overrides["log_level"] = raw_level.upper()

        return overrides


def load_settings(config_path: str | Path | None = None) -> IntakeSettings:
    """Load settings from an optional YAML file plus environment overrides."""
    return SettingsLoader(config_path).load()
