"""Application settings: the active extraction provider and per-provider config.

Provider configuration is a tagged union keyed by ``ProviderId``: each
provider has its own settings class (``GeminiSettings``,
``ZhipuSettings``) carrying ``api_key``, ``model`` and ``endpoint``.
Raw documents are validated once, in :func:`settings_from_dict`, so the
rest of the code can rely on well-formed values.

Settings are stored as YAML::

    provider: zhipu
    providers:
      gemini:
        api_key: ''
        model: gemini-3.0-flash
        endpoint: ''
      zhipu:
        api_key: sk-...
        model: glm-4.7
        endpoint: ''

Two older layouts are migrated on read: the flat
``{provider, apiKey, model}`` document and the camelCase
``{provider, providerSettings: {...}}`` document.  Zhipu model names
written with dashes (``glm-4-7``) are rewritten to the dotted form.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import ClassVar, Union

import yaml

from kanbanflow.config.providers import PROVIDERS, ProviderId
from kanbanflow.errors import ValidationError

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "KANBANFLOW_HOME"
API_KEY_ENV_VAR = "KANBANFLOW_API_KEY"
SETTINGS_FILENAME = "settings.yaml"

_LEGACY_ZHIPU_MODELS = {"glm-4-7": "glm-4.7", "glm-4-6": "glm-4.6"}


class SettingsError(ValidationError):
    """Raised when a settings document cannot be turned into ``AppSettings``."""


def data_dir() -> Path:
    """Return the directory holding settings and saved boards.

    ``$KANBANFLOW_HOME`` when set, otherwise ``~/.local/share/kanbanflow``.
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".local" / "share" / "kanbanflow"


# ---------------------------------------------------------------------------
# Per-provider settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _ProviderSettingsBase:
    provider: ClassVar[ProviderId]

    api_key: str = ""
    model: str = ""
    endpoint: str = ""

    @property
    def effective_model(self) -> str:
        """The configured model, or the provider's default."""
        return self.model.strip() or PROVIDERS[self.provider].default_model

    @property
    def effective_endpoint(self) -> str:
        """The configured endpoint, or the provider's default."""
        return self.endpoint.strip() or PROVIDERS[self.provider].endpoint

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())

    def to_dict(self) -> dict[str, str]:
        return {"api_key": self.api_key, "model": self.model, "endpoint": self.endpoint}


@dataclass(frozen=True)
class GeminiSettings(_ProviderSettingsBase):
    """Settings for Google Gemini."""

    provider: ClassVar[ProviderId] = ProviderId.GEMINI


@dataclass(frozen=True)
class ZhipuSettings(_ProviderSettingsBase):
    """Settings for Zhipu AI (OpenAI-compatible chat completions).

    Model names are stored trimmed and lower-cased.
    """

    provider: ClassVar[ProviderId] = ProviderId.ZHIPU

    def __post_init__(self) -> None:
        model = self.model.strip().lower()
        object.__setattr__(self, "model", _LEGACY_ZHIPU_MODELS.get(model, model))


ProviderSettings = Union[GeminiSettings, ZhipuSettings]

SETTINGS_CLASSES: dict[ProviderId, type[_ProviderSettingsBase]] = {
    ProviderId.GEMINI: GeminiSettings,
    ProviderId.ZHIPU: ZhipuSettings,
}


def _default_provider_settings() -> dict[ProviderId, ProviderSettings]:
    return {pid: cls() for pid, cls in SETTINGS_CLASSES.items()}  # type: ignore[misc]


@dataclass(frozen=True)
class AppSettings:
    """The active provider plus settings for every known provider.

    Parameters
    ----------
    provider:
        The provider used by extraction.
    providers:
        ``ProviderId`` -> that provider's settings object.  Missing
        providers are filled with empty settings.
    """

    provider: ProviderId = ProviderId.GEMINI
    providers: Mapping[ProviderId, ProviderSettings] = field(
        default_factory=_default_provider_settings
    )

    def __post_init__(self) -> None:
        merged = _default_provider_settings()
        for pid, settings in self.providers.items():
            if settings.provider is not pid:
                raise SettingsError(
                    f"Settings for {pid.value!r} are of type {type(settings).__name__}",
                    field="providers",
                )
            merged[pid] = settings
        object.__setattr__(self, "providers", merged)

    @property
    def active(self) -> ProviderSettings:
        """Settings of the active provider."""
        return self.providers[self.provider]

    def with_provider(self, provider: ProviderId) -> "AppSettings":
        """Return a copy with *provider* active."""
        return replace(self, provider=provider)

    def with_settings(self, settings: ProviderSettings) -> "AppSettings":
        """Return a copy with *settings* replacing its provider's entry."""
        providers = dict(self.providers)
        providers[settings.provider] = settings
        return replace(self, providers=providers)

    def to_dict(self) -> dict[str, object]:
        return {
            "provider": self.provider.value,
            "providers": {pid.value: s.to_dict() for pid, s in self.providers.items()},
        }


# ---------------------------------------------------------------------------
# Parsing and migration
# ---------------------------------------------------------------------------


def _parse_provider_id(value: object) -> ProviderId:
    try:
        return ProviderId(str(value).strip().lower())
    except ValueError:
        known = ", ".join(p.value for p in ProviderId)
        raise SettingsError(
            f"Unknown provider {value!r} (known: {known})", field="provider"
        ) from None


def _string(entry: Mapping[str, object], *keys: str) -> str:
    for key in keys:
        value = entry.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise SettingsError(f"{key!r} must be a string, got {type(value).__name__}", field=key)
        return value
    return ""


def _provider_settings(pid: ProviderId, entry: object) -> ProviderSettings:
    if not isinstance(entry, Mapping):
        raise SettingsError(f"Settings for {pid.value!r} must be a mapping", field=pid.value)
    cls = SETTINGS_CLASSES[pid]
    return cls(  # type: ignore[return-value]
        api_key=_string(entry, "api_key", "apiKey"),
        model=_string(entry, "model"),
        endpoint=_string(entry, "endpoint"),
    )


def settings_from_dict(data: object) -> AppSettings:
    """Validate a raw settings document and build ``AppSettings``.

    Raises
    ------
    SettingsError
        If the document is not a mapping, names an unknown provider, or
        carries a non-string field.
    """
    if data is None:
        return AppSettings()
    if not isinstance(data, Mapping):
        raise SettingsError("Settings document must be a mapping")

    provider = _parse_provider_id(data.get("provider", ProviderId.GEMINI.value))

    if "providers" in data or "providerSettings" in data:
        raw = data.get("providers", data.get("providerSettings")) or {}
        if not isinstance(raw, Mapping):
            raise SettingsError("'providers' must be a mapping", field="providers")
        providers = {
            _parse_provider_id(key): _provider_settings(_parse_provider_id(key), entry)
            for key, entry in raw.items()
        }
        return AppSettings(provider=provider, providers=providers)

    if "apiKey" in data or "model" in data:
        logger.info("Migrating flat settings layout for provider %r", provider.value)
        legacy = _provider_settings(provider, data)
        return AppSettings(provider=provider, providers={provider: legacy})

    return AppSettings(provider=provider)


def load_settings(path: Path | None = None) -> AppSettings:
    """Read settings from *path* (default ``data_dir() / settings.yaml``).

    A missing file yields default settings.  An empty Gemini API key is
    filled from ``$KANBANFLOW_API_KEY`` when that variable is set.

    Raises
    ------
    SettingsError
        If the file exists but is not valid YAML or fails validation.
    """
    path = path or data_dir() / SETTINGS_FILENAME
    if path.exists():
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise SettingsError(f"{path} is not valid YAML: {exc}") from exc
        settings = settings_from_dict(raw)
    else:
        logger.debug("No settings file at %s; using defaults", path)
        settings = AppSettings()

    env_key = os.environ.get(API_KEY_ENV_VAR, "").strip()
    gemini = settings.providers[ProviderId.GEMINI]
    if env_key and not gemini.has_api_key:
        settings = settings.with_settings(replace(gemini, api_key=env_key))
    return settings


def save_settings(settings: AppSettings, path: Path | None = None) -> Path:
    """Write *settings* as YAML and return the path written."""
    path = path or data_dir() / SETTINGS_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(settings.to_dict(), default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    return path


__all__ = [
    "API_KEY_ENV_VAR",
    "HOME_ENV_VAR",
    "SETTINGS_FILENAME",
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
