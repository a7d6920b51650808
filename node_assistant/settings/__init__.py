"""Settings storage backends."""

from .store import InMemorySettingsStore, JsonFileSettingsStore, SettingsStore

__all__ = ["SettingsStore", "InMemorySettingsStore", "JsonFileSettingsStore"]
