"""
Configuration management for the PDF Digest summarizer.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class GeminiConfig:
    """Gemini API configuration settings."""
    api_key: str
    base_url: str
    model: str
    timeout: int
    poll_interval: float
    max_poll_attempts: Optional[int]
    strategy: str


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool


@dataclass
class UploadConfig:
    """Document upload configuration settings."""
    max_pdf_size_mb: int


@dataclass
class PathsConfig:
    """Path configuration settings."""
    data_dir: str
    credential_file: str


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "web_app_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        self._config = self._get_default_config()

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "gemini": {
                "api_key": "",
                "base_url": "https://generativelanguage.googleapis.com/v1beta",
                "model": "gemini-2.5-flash",
                "timeout": 120,
                "poll_interval": 5.0,
                "max_poll_attempts": 60,
                "strategy": "inline"
            },
            "app": {
                "host": "0.0.0.0",
                "port": 22582,
                "debug": False
            },
            "upload": {
                "max_pdf_size_mb": 20
            },
            "paths": {
                "data_dir": "data",
                "credential_file": "credentials.json"
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config and isinstance(values, dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # Gemini settings
        if os.getenv("GEMINI_API_KEY"):
            self._config["gemini"]["api_key"] = os.getenv("GEMINI_API_KEY")

        if os.getenv("GEMINI_BASE_URL"):
            self._config["gemini"]["base_url"] = os.getenv("GEMINI_BASE_URL")

        if os.getenv("GEMINI_MODEL"):
            self._config["gemini"]["model"] = os.getenv("GEMINI_MODEL")

        if os.getenv("GEMINI_TIMEOUT"):
            self._config["gemini"]["timeout"] = int(os.getenv("GEMINI_TIMEOUT"))

        if os.getenv("POLL_INTERVAL_SECONDS"):
            self._config["gemini"]["poll_interval"] = float(os.getenv("POLL_INTERVAL_SECONDS"))

        if os.getenv("MAX_POLL_ATTEMPTS"):
            self._config["gemini"]["max_poll_attempts"] = int(os.getenv("MAX_POLL_ATTEMPTS"))

        if os.getenv("SUMMARY_STRATEGY"):
            self._config["gemini"]["strategy"] = os.getenv("SUMMARY_STRATEGY").lower()

        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

        # Upload settings
        if os.getenv("MAX_PDF_SIZE_MB"):
            self._config["upload"]["max_pdf_size_mb"] = int(os.getenv("MAX_PDF_SIZE_MB"))

        # Paths
        if os.getenv("DATA_DIR"):
            self._config["paths"]["data_dir"] = os.getenv("DATA_DIR")

    def get_gemini_config(self) -> GeminiConfig:
        """Get Gemini API configuration."""
        gemini_config = self._config["gemini"]
        # 0, negative or null means "poll until the file leaves PROCESSING"
        attempts = gemini_config["max_poll_attempts"]
        return GeminiConfig(
            api_key=gemini_config["api_key"],
            base_url=gemini_config["base_url"],
            model=gemini_config["model"],
            timeout=gemini_config["timeout"],
            poll_interval=gemini_config["poll_interval"],
            max_poll_attempts=attempts if attempts and attempts > 0 else None,
            strategy=gemini_config["strategy"]
        )

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"]
        )

    def get_upload_config(self) -> UploadConfig:
        """Get document upload configuration."""
        upload_config = self._config["upload"]
        return UploadConfig(
            max_pdf_size_mb=upload_config["max_pdf_size_mb"]
        )

    def get_paths_config(self) -> PathsConfig:
        """Get paths configuration."""
        paths_config = self._config["paths"]
        return PathsConfig(
            data_dir=paths_config["data_dir"],
            credential_file=paths_config["credential_file"]
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file, without the API key."""
        data = json.loads(json.dumps(self._config))
        data["gemini"]["api_key"] = ""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_gemini_config() -> GeminiConfig:
    """Get Gemini API configuration."""
    return config_manager.get_gemini_config()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def get_upload_config() -> UploadConfig:
    """Get document upload configuration."""
    return config_manager.get_upload_config()


def get_paths_config() -> PathsConfig:
    """Get paths configuration."""
    return config_manager.get_paths_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()


def save_config() -> None:
    """Save configuration to file."""
    config_manager.save_config()
