"""
Unit tests for intake settings loading.
"""

import pytest
from pydantic import ValidationError

from patient_intake.core.config import (
    DEFAULT_TIMEOUT_SECONDS,
    ConfigError,
    IntakeSettings,
    SettingsLoader,
    load_settings,
)


class TestIntakeSettings:
    """Tests for IntakeSettings defaults and validation"""

    def test_defaults(self):
        """Test default settings"""
        settings = IntakeSettings()
        assert settings.timeout_seconds == DEFAULT_TIMEOUT_SECONDS == 30.0
        assert settings.encoding == "utf-8"
        assert settings.delimiter == ","
        assert settings.log_format == "json"

    @pytest.mark.parametrize("values", [
        {"timeout_seconds": 0},
        {"timeout_seconds": -1},
        {"delimiter": ";;"},
        {"delimiter": ""},
        {"parse_workers": 0},
        {"log_level": "LOUD"},
        {"log_format": "xml"},
    ])
    def test_invalid_values_rejected(self, values):
        """Test out-of-range settings fail validation"""
        with pytest.raises(ValidationError):
            IntakeSettings(**values)

    def test_frozen(self):
        """Test settings cannot be changed after construction"""
        settings = IntakeSettings()
        with pytest.raises(ValidationError):
            settings.timeout_seconds = 5


class TestSettingsLoader:
    """Tests for SettingsLoader"""

    def test_no_file_uses_defaults(self):
        """Test loading without a file or env"""
        assert SettingsLoader().load(environ={}) == IntakeSettings()

    def test_yaml_section(self, tmp_path):
        """Test values from the intake section are applied"""
        path = tmp_path / "intake.yaml"
        path.write_text("intake:\n  timeout_seconds: 12\n  delimiter: ';'\n  log_format: text\n")

        settings = SettingsLoader(path).load(environ={})

        assert settings.timeout_seconds == 12
        assert settings.delimiter == ";"
        assert settings.log_format == "text"

    def test_env_overrides_file(self, tmp_path):
        """Test environment variables win over the file"""
        path = tmp_path / "intake.yaml"
        path.write_text("intake:\n  timeout_seconds: 12\n  log_level: INFO\n")

        settings = SettingsLoader(path).load(environ={
            "PATIENT_INTAKE_TIMEOUT_SECONDS": "4.5",
            "LOG_LEVEL": "debug",
        })

        assert settings.timeout_seconds == 4.5
        assert settings.log_level == "DEBUG"

    def test_invalid_env_timeout(self):
        """Test a non-numeric timeout is a config error"""
        with pytest.raises(ConfigError, match="PATIENT_INTAKE_TIMEOUT_SECONDS"):
            SettingsLoader().load(environ={"PATIENT_INTAKE_TIMEOUT_SECONDS": "soon"})

    def test_missing_file(self, tmp_path):
        """Test a missing file is reported up front"""
        with pytest.raises(FileNotFoundError):
            SettingsLoader(tmp_path / "absent.yaml")

    def test_missing_section(self, tmp_path):
        """Test a file without the intake section"""
        path = tmp_path / "other.yaml"
        path.write_text("rules:\n  - name: x\n")

        with pytest.raises(ConfigError, match="intake"):
            SettingsLoader(path).load(environ={})

    def test_empty_file_uses_defaults(self, tmp_path):
        """Test an empty file is the same as no file"""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert SettingsLoader(path).load(environ={}) == IntakeSettings()

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML"""
        path = tmp_path / "bad.yaml"
        path.write_text("intake: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            SettingsLoader(path).load(environ={})

    def test_invalid_values_become_config_error(self, tmp_path):
        """Test validation failures are wrapped"""
        path = tmp_path / "intake.yaml"
        path.write_text("intake:\n  timeout_seconds: -3\n")

        with pytest.raises(ConfigError, match="Invalid intake settings"):
            SettingsLoader(path).load(environ={})

    def test_load_settings_reads_process_env(self, monkeypatch):
        """Test the convenience loader uses os.environ"""
        monkeypatch.setenv("PATIENT_INTAKE_TIMEOUT_SECONDS", "7")
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert load_settings().timeout_seconds == 7
