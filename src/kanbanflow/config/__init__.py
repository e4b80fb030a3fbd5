"""Configuration: provider catalog and application settings."""
from __future__ import annotations

from kanbanflow.config.providers import PROVIDERS, ProviderId, ProviderInfo, provider_info
from kanbanflow.config.settings import (
    AppSettings,
    GeminiSettings,
    ProviderSettings,
    SettingsError,
    ZhipuSettings,
    data_dir,
    load_settings,
    save_settings,
    settings_from_dict,
)

__all__ = [
    "PROVIDERS",
    "ProviderId",
    "ProviderInfo",
    "provider_info",
    "AppSettings",
    "GeminiSettings",
    "ProviderSettings",
    "SettingsError",
    "ZhipuSettings",
    "data_dir",
    "load_settings",
    "save_settings",
    "settings_from_dict",
]
