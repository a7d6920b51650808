"""Configuration helpers for the node assistant."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import MissingConfigurationError

if TYPE_CHECKING:  # pragma: no cover
    from .settings import SettingsStore

BASE_DIR = Path(__file__).resolve().parent
WORKSPACE_ROOT = BASE_DIR.parent

DEFAULT_SETTINGS_PATH = WORKSPACE_ROOT / "data" / "settings.json"

# Settings keys shared with the rest of the application.
LLM_API_URL_KEY = "llm_api_url"
LLM_API_KEY_KEY = "llm_api_key"
LLM_MODEL_KEY = "llm_model"

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.7
REQUEST_TIMEOUT_SECONDS = 120

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class LLMConfig:
    """Credentials and model used for one chat-completion call."""

    api_url: str
    api_key: str
    model: str = DEFAULT_MODEL

    def __post_init__(self) -> None:
        if not self.model:
            self.model = DEFAULT_MODEL

    def validate(self) -> None:
        """Raise :class:`MissingConfigurationError` unless URL and key are set."""
        if not self.api_url:
            raise MissingConfigurationError("LLM API URL is not configured")
        if not self.api_key:
            raise MissingConfigurationError("LLM API key is not configured")


def load_llm_config(store: "SettingsStore") -> LLMConfig:
    """Read the LLM configuration from *store*.

    Called once per operation; the result is never cached so updates made
    through the settings API apply to the next request.
    """
    return LLMConfig(
        api_url=store.get(LLM_API_URL_KEY),
        api_key=store.get(LLM_API_KEY_KEY),
        model=store.get(LLM_MODEL_KEY),
    )


def get_settings_path() -> Path:
    """Return the settings file location, honouring ``NODE_ASSISTANT_SETTINGS_PATH``."""
    override = os.getenv("NODE_ASSISTANT_SETTINGS_PATH")
    if override:
        return Path(override).expanduser()
    return DEFAULT_SETTINGS_PATH


def demo_mode_enabled() -> bool:
    return os.getenv("NODE_ASSISTANT_DEMO_MODE", "").strip().lower() in _TRUTHY


def get_log_level() -> str:
    return os.getenv("NODE_ASSISTANT_LOG_LEVEL", "INFO").upper()
