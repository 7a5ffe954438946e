"""Persistência do documento de configurações."""

from .settings_store import SettingsHandle, SettingsStore

__all__ = ["SettingsHandle", "SettingsStore"]
