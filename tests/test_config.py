"""Tests for configuration loading."""

from pathlib import Path

import pytest

from fuelscan.config import (
    Config,
    ConfigValidationError,
    EngineConfig,
    create_default_config,
    load_config,
)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Keep the developer's environment out of config tests."""
    for name in (
        "FUELSCAN_TESSERACT_CMD",
        "FUELSCAN_TESSERACT_CONFIG",
        "FUELSCAN_OCR_TIMEOUT",
        "FUELSCAN_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_missing_file_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "missing.yaml")

        assert config.engine.tesseract_cmd is None
        assert config.engine.tesseract_config == "--oem 3 --psm 6"
        assert config.engine.timeout_seconds == 0
        assert config.log_level == "INFO"

    def test_yaml_values(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "engine:\n"
            "  tesseract_cmd: /opt/tesseract/bin/tesseract\n"
            "  tesseract_config: '--psm 7'\n"
            "  timeout_seconds: 15\n"
            "log_level: DEBUG\n"
        )

        config = load_config(path)

        assert config.engine.tesseract_cmd == "/opt/tesseract/bin/tesseract"
        assert config.engine.tesseract_config == "--psm 7"
        assert config.engine.timeout_seconds == 15.0
        assert config.log_level == "DEBUG"

    def test_env_overrides(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("engine:\n  timeout_seconds: 15\n")
        monkeypatch.setenv("FUELSCAN_OCR_TIMEOUT", "30")
        monkeypatch.setenv("FUELSCAN_TESSERACT_CMD", "/usr/local/bin/tesseract")

        config = load_config(path)

        assert config.engine.timeout_seconds == 30.0
        assert config.engine.tesseract_cmd == "/usr/local/bin/tesseract"

    def test_invalid_timeout(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("engine:\n  timeout_seconds: soon\n")

        with pytest.raises(ConfigValidationError):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("engine: [unclosed\n")

        with pytest.raises(ConfigValidationError):
            load_config(path)

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path).log_level == "INFO"


class TestValidate:
    """Tests for Config.validate()."""

    def test_defaults_valid(self):
        assert Config().validate() == []

    def test_negative_timeout(self):
        config = Config(engine=EngineConfig(timeout_seconds=-1))
        assert "engine.timeout_seconds must be >= 0" in config.validate()

    def test_unknown_log_level(self):
        config = Config(log_level="CHATTY")
        assert len(config.validate()) == 1

    def test_log_level_case_insensitive(self):
        assert Config(log_level="debug").validate() == []


class TestDefaultConfig:
    """Tests for create_default_config()."""

    def test_default_config_loads(self, tmp_path: Path):
        path = tmp_path / "nested" / "config.yaml"

        create_default_config(path)
        config = load_config(path)

        assert path.exists()
        assert config.engine.tesseract_config == "--oem 3 --psm 6"
        assert config.engine.tesseract_cmd is None
        assert config.log_level == "INFO"
