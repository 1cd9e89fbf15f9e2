"""
Configuration module for loading and validating environment variables.
"""

import logging
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv


DEFAULT_TRANSPILER_URL = "https://cdnjs.cloudflare.com/ajax/libs/babel-standalone/6.26.0/babel.min.js"
DEFAULT_ASSISTANT_BASE_URL = "http://localhost:3000"
DEFAULT_PROMPT_STORE_PATH = Path(__file__).parent.parent / ".preview_store.json"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        # Load .env file from project root
        env_path = Path(__file__).parent.parent / ".env"
        load_dotenv(dotenv_path=env_path)

        # Compiler resource
        self.transpiler_url = os.getenv("PREVIEW_TRANSPILER_URL", DEFAULT_TRANSPILER_URL)

        # Assistant endpoint
        self.assistant_base_url = os.getenv("PREVIEW_ASSISTANT_BASE_URL", DEFAULT_ASSISTANT_BASE_URL)
        self._request_timeout = os.getenv("PREVIEW_REQUEST_TIMEOUT", "60")

        # Session behaviour
        self.prompt_store_path = Path(os.getenv("PREVIEW_PROMPT_STORE_PATH", str(DEFAULT_PROMPT_STORE_PATH)))
        self._debounce_seconds = os.getenv("PREVIEW_DEBOUNCE_SECONDS", "0.3")

        self.log_level = os.getenv("PREVIEW_LOG_LEVEL", "INFO").upper()

        # Validate settings
        self._validate()

    def _validate(self):
        """Validate and convert the numeric and enumerated settings."""
        problems = []

        try:
            self.request_timeout = float(self._request_timeout)
            if self.request_timeout <= 0:
                problems.append("PREVIEW_REQUEST_TIMEOUT must be positive")
        except ValueError:
            problems.append(f"PREVIEW_REQUEST_TIMEOUT is not a number: {self._request_timeout!r}")

        try:
            self.debounce_seconds = float(self._debounce_seconds)
            if self.debounce_seconds < 0:
                problems.append("PREVIEW_DEBOUNCE_SECONDS must not be negative")
        except ValueError:
            problems.append(f"PREVIEW_DEBOUNCE_SECONDS is not a number: {self._debounce_seconds!r}")

        if not isinstance(logging.getLevelName(self.log_level), int):
            problems.append(f"PREVIEW_LOG_LEVEL is not a logging level: {self.log_level!r}")

        if not self.transpiler_url:
            problems.append("PREVIEW_TRANSPILER_URL must not be empty")

        if problems:
            raise ConfigError(
                f"Invalid configuration: {'; '.join(problems)}\n"
                "Check your environment or .env file. See .env.example for reference."
            )


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next call re-reads the environment."""
    global _config
    _config = None
