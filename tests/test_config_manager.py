"""
Test cases for the configuration management system.
Tests config loading, validation, and access functionality.
"""

import json
import os
from unittest.mock import patch

import pytest

from config_manager import (
    ConfigManager,
    GeminiConfig,
    AppConfig,
    UploadConfig,
    PathsConfig,
    get_gemini_config,
    get_app_config,
    get_upload_config,
    get_paths_config,
)

ENV_VARS = [
    "GEMINI_API_KEY", "GEMINI_BASE_URL", "GEMINI_MODEL", "GEMINI_TIMEOUT",
    "POLL_INTERVAL_SECONDS", "MAX_POLL_ATTEMPTS", "SUMMARY_STRATEGY",
    "APP_HOST", "APP_PORT", "APP_DEBUG", "MAX_PDF_SIZE_MB", "DATA_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestConfigManager:
    """Test the ConfigManager class functionality."""

    def test_defaults_without_file(self, tmp_path):
        manager = ConfigManager(str(tmp_path / "missing.json"))

        gemini = manager.get_gemini_config()
        assert isinstance(gemini, GeminiConfig)
        assert gemini.api_key == ""
        assert gemini.base_url == "https://generativelanguage.googleapis.com/v1beta"
        assert gemini.model == "gemini-2.5-flash"
        assert gemini.poll_interval == 5.0
        assert gemini.max_poll_attempts == 60
        assert gemini.strategy == "inline"

        assert manager.get_upload_config() == UploadConfig(max_pdf_size_mb=20)
        assert isinstance(manager.get_app_config(), AppConfig)
        assert manager.get_paths_config() == PathsConfig(data_dir="data", credential_file="credentials.json")

    def test_file_values_are_merged(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "gemini": {"model": "gemini-2.0-flash", "strategy": "reference"},
            "app": {"port": 8080},
        }), encoding="utf-8")

        manager = ConfigManager(str(config_file))

        gemini = manager.get_gemini_config()
        assert gemini.model == "gemini-2.0-flash"
        assert gemini.strategy == "reference"
        # Untouched keys keep their defaults
        assert gemini.poll_interval == 5.0
        assert manager.get_app_config().port == 8080
        assert manager.get_app_config().host == "0.0.0.0"

    def test_invalid_json_falls_back_to_defaults(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{broken", encoding="utf-8")

        manager = ConfigManager(str(config_file))

        assert manager.get_gemini_config().model == "gemini-2.5-flash"

    def test_environment_overrides(self, tmp_path):
        env = {
            "GEMINI_API_KEY": "env-key",
            "GEMINI_MODEL": "gemini-env",
            "POLL_INTERVAL_SECONDS": "0.5",
            "MAX_POLL_ATTEMPTS": "3",
            "SUMMARY_STRATEGY": "AUTO",
            "APP_PORT": "9000",
            "APP_DEBUG": "true",
            "MAX_PDF_SIZE_MB": "10",
            "DATA_DIR": "/tmp/pdf-digest",
        }
        with patch.dict(os.environ, env):
            manager = ConfigManager(str(tmp_path / "missing.json"))

        gemini = manager.get_gemini_config()
        assert gemini.api_key == "env-key"
        assert gemini.model == "gemini-env"
        assert gemini.poll_interval == 0.5
        assert gemini.max_poll_attempts == 3
        assert gemini.strategy == "auto"
        assert manager.get_app_config().port == 9000
        assert manager.get_app_config().debug is True
        assert manager.get_upload_config().max_pdf_size_mb == 10
        assert manager.get_paths_config().data_dir == "/tmp/pdf-digest"

    @pytest.mark.parametrize("value", ["0", "-1"])
    def test_non_positive_poll_limit_means_unbounded(self, tmp_path, value):
        with patch.dict(os.environ, {"MAX_POLL_ATTEMPTS": value}):
            manager = ConfigManager(str(tmp_path / "missing.json"))

        assert manager.get_gemini_config().max_poll_attempts is None

    def test_null_poll_limit_in_file(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"gemini": {"max_poll_attempts": None}}), encoding="utf-8")

        assert ConfigManager(str(config_file)).get_gemini_config().max_poll_attempts is None

    def test_save_config_omits_api_key(self, tmp_path):
        config_file = tmp_path / "config.json"
        with patch.dict(os.environ, {"GEMINI_API_KEY": "secret"}):
            manager = ConfigManager(str(config_file))
        manager.save_config()

        saved = json.loads(config_file.read_text(encoding="utf-8"))
        assert saved["gemini"]["api_key"] == ""
        assert manager.get_gemini_config().api_key == "secret"

    def test_reload_picks_up_file_changes(self, tmp_path):
        config_file = tmp_path / "config.json"
        manager = ConfigManager(str(config_file))
        config_file.write_text(json.dumps({"upload": {"max_pdf_size_mb": 5}}), encoding="utf-8")

        manager.reload()

        assert manager.get_upload_config().max_pdf_size_mb == 5

    def test_get_config_returns_copy(self, tmp_path):
        manager = ConfigManager(str(tmp_path / "missing.json"))
        raw = manager.get_config()
        raw["new_section"] = {}

        assert "new_section" not in manager.get_config()


def test_module_level_accessors():
    assert isinstance(get_gemini_config(), GeminiConfig)
    assert isinstance(get_app_config(), AppConfig)
    assert isinstance(get_upload_config(), UploadConfig)
    assert isinstance(get_paths_config(), PathsConfig)
