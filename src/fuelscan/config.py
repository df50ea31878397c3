"""
Configuration management.

Only the recognition engine and logging are configurable. The confidence
threshold, plausibility ranges and contrast constants are fixed.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .recognition.tesseract import DEFAULT_TESSERACT_CONFIG


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class EngineConfig:
    """Tesseract engine configuration."""

    # Path to the tesseract binary (None = search PATH)
    tesseract_cmd: str | None = None
    # Extra command-line flags passed to tesseract
    tesseract_config: str = DEFAULT_TESSERACT_CONFIG
    # Recognition timeout (seconds, 0 = no timeout)
    timeout_seconds: float = 0


@dataclass
class Config:
    """Application configuration."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    log_level: str = "INFO"

    def validate(self) -> list[str]:
        """Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if self.engine.timeout_seconds < 0:
            errors.append("engine.timeout_seconds must be >= 0")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            errors.append(f"log_level is not a known level: {self.log_level}")

        return errors


def load_config(config_path: Path) -> Config:
    """
    Load configuration from YAML file.

    A missing file yields the defaults. Environment variables override
    config values:
    - FUELSCAN_TESSERACT_CMD
    - FUELSCAN_TESSERACT_CONFIG
    - FUELSCAN_OCR_TIMEOUT (seconds)
    - FUELSCAN_LOG_LEVEL

    Raises:
        ConfigValidationError: If the file is malformed or values are invalid
    """
    if config_path.exists():
        with open(config_path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigValidationError(f"Invalid YAML in {config_path}: {e}") from e
    else:
        data = {}

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{config_path} must contain a mapping")

    engine_data = data.get("engine") or {}
    timeout = os.environ.get("FUELSCAN_OCR_TIMEOUT", engine_data.get("timeout_seconds", 0))
    try:
        timeout_seconds = float(timeout)
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(f"engine.timeout_seconds is not a number: {timeout}") from e

    engine = EngineConfig(
        tesseract_cmd=os.environ.get("FUELSCAN_TESSERACT_CMD", engine_data.get("tesseract_cmd")),
        tesseract_config=os.environ.get(
            "FUELSCAN_TESSERACT_CONFIG",
            engine_data.get("tesseract_config", DEFAULT_TESSERACT_CONFIG),
        ),
        timeout_seconds=timeout_seconds,
    )

    config = Config(
        engine=engine,
        log_level=str(os.environ.get("FUELSCAN_LOG_LEVEL", data.get("log_level", "INFO"))),
    )

    errors = config.validate()
    if errors:
        raise ConfigValidationError("; ".join(errors))

    return config


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = f"""# fuelscan configuration

# Tesseract OCR engine
engine:
  tesseract_cmd: null                      # Path to tesseract binary (null = search PATH)
  tesseract_config: "{DEFAULT_TESSERACT_CONFIG}"        # Extra tesseract flags (PSM 6 = uniform block)
  timeout_seconds: 0                       # Recognition timeout, 0 = none

# DEBUG, INFO, WARNING, ERROR
log_level: "INFO"
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
