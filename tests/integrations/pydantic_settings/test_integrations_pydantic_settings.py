from __future__ import annotations

import pytest

pydantic_settings = pytest.importorskip("pydantic_settings")

from keywire.exceptions import KeywireInvalidRegistrationError  # noqa: E402
from keywire.integrations.pydantic_settings import is_pydantic_settings_subclass  # noqa: E402
from keywire.keys import Key  # noqa: E402
from keywire.markers import inject  # noqa: E402
from keywire.registry import ContainerBuilder  # noqa: E402


class AppSettings(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_prefix="KEYWIRE_TEST_")

    api_url: str = "https://api.example.com"
    retries: int = 3


class ApiClient:
    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings


SETTINGS = Key("AppSettings", AppSettings)
CLIENT = Key("ApiClient", ApiClient)


def test_settings_subclass_is_detected() -> None:
    assert is_pydantic_settings_subclass(AppSettings)
    assert not is_pydantic_settings_subclass(pydantic_settings.BaseSettings)
    assert not is_pydantic_settings_subclass(ApiClient)
    assert not is_pydantic_settings_subclass(AppSettings())


def test_register_settings_builds_a_singleton_from_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("KEYWIRE_TEST_RETRIES", "5")
    container = (
        ContainerBuilder.create()
        .register_settings(SETTINGS, AppSettings)
        .register_transient(CLIENT, inject(ApiClient, [SETTINGS]))
        .build()
    )

    settings = container.get(SETTINGS)

    assert settings.retries == 5
    assert settings.api_url == "https://api.example.com"
    assert container.is_singleton("AppSettings")
    assert container.get(CLIENT).settings is settings


def test_register_settings_rejects_plain_classes() -> None:
    with pytest.raises(KeywireInvalidRegistrationError, match="BaseSettings subclass"):
        ContainerBuilder.create().register_settings(CLIENT, ApiClient)  # type: ignore[arg-type]
