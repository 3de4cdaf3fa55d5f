import pytest

from art_curator.adapters import build_adapters, get_adapter_class, list_adapters
from art_curator.adapters.harvard import DirectRequestBuilder, ProxiedRequestBuilder
from art_curator.config import Settings
from art_curator.errors import UnknownSource


@pytest.fixture
def clean_env(monkeypatch):
    for name in [
        "HARVARD_API_MODE",
        "HARVARD_API_KEY",
        "HARVARD_RELAY_URL",
        "CURATOR_REQUEST_TIMEOUT",
        "CURATOR_MAX_WORKERS",
        "CURATOR_EXHIBITIONS_PATH",
    ]:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the picture
    monkeypatch.setattr("art_curator.config.load_dotenv", lambda *args, **kwargs: False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings.from_env()

    assert settings.harvard_mode == "proxy"
    assert settings.harvard_api_key == ""
    assert settings.request_timeout == 15
    assert settings.max_workers == 20


def test_reads_environment(clean_env):
    clean_env.setenv("HARVARD_API_MODE", "Direct")
    clean_env.setenv("HARVARD_API_KEY", "abc")
    clean_env.setenv("CURATOR_REQUEST_TIMEOUT", "2.5")
    clean_env.setenv("CURATOR_MAX_WORKERS", "4")

    settings = Settings.from_env()

    assert settings.harvard_mode == "direct"
    assert settings.harvard_api_key == "abc"
    assert settings.request_timeout == 2.5
    assert settings.max_workers == 4


def test_invalid_mode_rejected(clean_env):
    clean_env.setenv("HARVARD_API_MODE", "sometimes")

    with pytest.raises(ValueError):
        Settings.from_env()


def test_registry_order_and_lookup():
    assert [name for name, _ in list_adapters()] == ["metropolitan", "harvard"]
    assert get_adapter_class("harvard").name == "Harvard Art Museums"
    with pytest.raises(UnknownSource):
        get_adapter_class("louvre")


def test_build_adapters_applies_settings():
    adapters = build_adapters(Settings(request_timeout=4, max_workers=6))

    assert list(adapters) == ["metropolitan", "harvard"]
    assert adapters["metropolitan"].fetch_timeout == 4
    assert adapters["metropolitan"].max_workers == 6
    assert isinstance(adapters["harvard"].request_builder, ProxiedRequestBuilder)


def test_build_adapters_direct_mode():
    adapters = build_adapters(Settings(harvard_mode="direct", harvard_api_key="k"))

    assert isinstance(adapters["harvard"].request_builder, DirectRequestBuilder)


def test_direct_mode_without_key_fails_fast():
    with pytest.raises(ValueError):
        build_adapters(Settings(harvard_mode="direct"))
