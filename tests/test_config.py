import pytest
from pydantic import ValidationError

from pikamc_bot.config.settings import Settings


def test_settings_normalizes_values(settings):
    assert settings.pikamc_base_url == "https://panel.test/api/client"
    assert settings.error_channel_id == 424242
    assert settings.panel_server_url == "https://cp.pikamc.vn/server/abc123"


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("PIKAMC_SERVER_ID", "  srv-1 ")
    monkeypatch.setenv("DEEPSEEK_BASE_URL", "https://api.example.com/v1/")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.pikamc_server_id == "srv-1"
    assert settings.deepseek_base_url == "https://api.example.com/v1"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["", "   ", "not-a-number", "-5"])
def test_settings_unusable_channel_id_becomes_none(monkeypatch, raw):
    monkeypatch.setenv("ERROR_CHANNEL_ID", raw)

    assert Settings(_env_file=None).error_channel_id is None


def test_settings_missing_secrets_are_not_validated(monkeypatch):
    for name in ("DISCORD_TOKEN", "PIKAMC_API_KEY", "DEEPSEEK_API_KEY", "PIKAMC_SERVER_ID"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.discord_token == ""
    assert settings.pikamc_api_key == ""
    assert settings.deepseek_model == "deepseek-chat"


def test_settings_are_immutable(settings):
    with pytest.raises(ValidationError):
        settings.pikamc_api_key = "other"
