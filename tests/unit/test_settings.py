"""Unit tests for kanbanflow.config — provider catalog, settings parsing and persistence."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from kanbanflow.config import (
    PROVIDERS,
    AppSettings,
    GeminiSettings,
    ProviderId,
    SettingsError,
    ZhipuSettings,
    data_dir,
    load_settings,
    provider_info,
    save_settings,
    settings_from_dict,
)
from kanbanflow.config.settings import API_KEY_ENV_VAR, SETTINGS_FILENAME


# ===========================================================================
# Provider catalog
# ===========================================================================


class TestProviderCatalog:
    def test_every_provider_has_info(self) -> None:
        assert set(PROVIDERS) == set(ProviderId)

    def test_defaults(self) -> None:
        assert provider_info("gemini").default_model == "gemini-3.0-flash"
        assert provider_info(ProviderId.ZHIPU).default_model == "glm-4.7"

    def test_default_model_is_offered(self) -> None:
        for info in PROVIDERS.values():
            assert info.default_model in info.models

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValueError):
            provider_info("openai")


# ===========================================================================
# Per-provider settings
# ===========================================================================


class TestProviderSettings:
    def test_empty_model_uses_provider_default(self) -> None:
        assert GeminiSettings().effective_model == "gemini-3.0-flash"
        assert ZhipuSettings(model="  ").effective_model == "glm-4.7"

    def test_empty_endpoint_uses_provider_default(self) -> None:
        assert ZhipuSettings().effective_endpoint == PROVIDERS[ProviderId.ZHIPU].endpoint

    def test_custom_endpoint(self) -> None:
        assert GeminiSettings(endpoint="http://localhost:8080").effective_endpoint == "http://localhost:8080"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("GLM-4.7", "glm-4.7"), ("glm-4-7", "glm-4.7"), (" glm-4-6 ", "glm-4.6")],
    )
    def test_zhipu_model_normalised(self, raw: str, expected: str) -> None:
        assert ZhipuSettings(model=raw).model == expected

    def test_has_api_key(self) -> None:
        assert not GeminiSettings(api_key="   ").has_api_key
        assert GeminiSettings(api_key="k").has_api_key


# ===========================================================================
# AppSettings
# ===========================================================================


class TestAppSettings:
    def test_defaults_cover_every_provider(self) -> None:
        settings = AppSettings()
        assert settings.provider is ProviderId.GEMINI
        assert set(settings.providers) == set(ProviderId)
        assert isinstance(settings.active, GeminiSettings)

    def test_missing_providers_filled(self) -> None:
        settings = AppSettings(
            provider=ProviderId.ZHIPU, providers={ProviderId.ZHIPU: ZhipuSettings(api_key="z")}
        )
        assert isinstance(settings.providers[ProviderId.GEMINI], GeminiSettings)
        assert settings.active.api_key == "z"

    def test_mismatched_settings_type_rejected(self) -> None:
        with pytest.raises(SettingsError):
            AppSettings(providers={ProviderId.ZHIPU: GeminiSettings()})  # type: ignore[dict-item]

    def test_with_provider_and_settings(self) -> None:
        settings = AppSettings().with_settings(ZhipuSettings(api_key="z")).with_provider(ProviderId.ZHIPU)
        assert settings.active == ZhipuSettings(api_key="z")

    def test_to_dict(self) -> None:
        data = AppSettings().to_dict()
        assert data["provider"] == "gemini"
        assert set(data["providers"]) == {"gemini", "zhipu"}  # type: ignore[arg-type]


# ===========================================================================
# settings_from_dict
# ===========================================================================


class TestSettingsFromDict:
    def test_none_gives_defaults(self) -> None:
        assert settings_from_dict(None) == AppSettings()

    def test_current_layout(self) -> None:
        settings = settings_from_dict(
            {
                "provider": "zhipu",
                "providers": {"zhipu": {"api_key": "abc", "model": "glm-4.6", "endpoint": ""}},
            }
        )
        assert settings.provider is ProviderId.ZHIPU
        assert settings.active == ZhipuSettings(api_key="abc", model="glm-4.6")

    def test_camel_case_provider_settings_layout(self) -> None:
        settings = settings_from_dict(
            {"provider": "gemini", "providerSettings": {"gemini": {"apiKey": "g-key", "model": ""}}}
        )
        assert settings.active.api_key == "g-key"

    def test_legacy_flat_layout_migrated(self) -> None:
        settings = settings_from_dict({"provider": "zhipu", "apiKey": "old", "model": "glm-4-7"})
        assert settings.provider is ProviderId.ZHIPU
        assert settings.active == ZhipuSettings(api_key="old", model="glm-4.7")
        assert settings.providers[ProviderId.GEMINI] == GeminiSettings()

    def test_legacy_flat_layout_defaults_to_gemini(self) -> None:
        settings = settings_from_dict({"apiKey": "k"})
        assert settings.provider is ProviderId.GEMINI
        assert settings.active.api_key == "k"

    def test_unknown_provider(self) -> None:
        with pytest.raises(SettingsError, match="openai"):
            settings_from_dict({"provider": "openai"})

    def test_non_string_field(self) -> None:
        with pytest.raises(SettingsError):
            settings_from_dict({"providers": {"gemini": {"api_key": 123}}})

    def test_not_a_mapping(self) -> None:
        with pytest.raises(SettingsError):
            settings_from_dict(["gemini"])


# ===========================================================================
# load_settings / save_settings
# ===========================================================================


class TestPersistence:
    def test_data_dir_follows_env(self, isolated_home: Path) -> None:
        assert data_dir() == isolated_home

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path / "absent.yaml") == AppSettings()

    def test_save_then_load(self, tmp_path: Path) -> None:
        settings = AppSettings(provider=ProviderId.ZHIPU).with_settings(ZhipuSettings(api_key="secret"))
        path = save_settings(settings, tmp_path / "nested" / SETTINGS_FILENAME)
        assert path.exists()
        assert load_settings(path) == settings

    def test_default_path_under_home(self, isolated_home: Path) -> None:
        path = save_settings(AppSettings())
        assert path == isolated_home / SETTINGS_FILENAME

    def test_saved_file_is_plain_yaml(self, tmp_path: Path) -> None:
        path = save_settings(AppSettings(), tmp_path / SETTINGS_FILENAME)
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["provider"] == "gemini"

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / SETTINGS_FILENAME
        path.write_text("provider: [unclosed", encoding="utf-8")
        with pytest.raises(SettingsError):
            load_settings(path)

    def test_env_key_fills_empty_gemini_key(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(API_KEY_ENV_VAR, "from-env")
        assert load_settings(tmp_path / "absent.yaml").providers[ProviderId.GEMINI].api_key == "from-env"

    def test_env_key_does_not_override_saved_key(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = save_settings(AppSettings().with_settings(GeminiSettings(api_key="saved")), tmp_path / "s.yaml")
        monkeypatch.setenv(API_KEY_ENV_VAR, "from-env")
        assert load_settings(path).active.api_key == "saved"
