"""Tests for environment-driven configuration."""

import pytest

from zara.config import APPLICATIONS, Settings, load_settings


@pytest.fixture
def no_dotenv(tmp_path):
    return str(tmp_path / "missing.env")


def test_defaults(monkeypatch, no_dotenv):
    for name in ("ZARA_NAME", "ZARA_ALIASES", "ZARA_LISTEN_TIMEOUT", "ZARA_PORT"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings(no_dotenv)
    assert settings.name == "Zara"
    assert settings.aliases == ("zara", "shipra", "shifra")
    assert settings.listen_timeout is None
    assert settings.port == 8000


def test_environment_overrides(monkeypatch, no_dotenv):
    monkeypatch.setenv("ZARA_NAME", "Nova")
    monkeypatch.setenv("ZARA_ALIASES", " Nova, ,NOVAH ")
    monkeypatch.setenv("ZARA_LISTEN_TIMEOUT", "7.5")
    monkeypatch.setenv("ZARA_PORT", "9000")
    monkeypatch.setenv("ZARA_LOG_LEVEL", "debug")
    settings = load_settings(no_dotenv)
    assert settings.name == "Nova"
    assert settings.aliases == ("nova", "novah")
    assert settings.listen_timeout == 7.5
    assert settings.port == 9000
    assert settings.log_level == "DEBUG"


def test_dotenv_file_is_read(monkeypatch, tmp_path):
    # Set then delete so monkeypatch restores the variable's absence afterwards.
    monkeypatch.setenv("ZARA_WAKE_WORD", "placeholder")
    monkeypatch.delenv("ZARA_WAKE_WORD")
    env_file = tmp_path / ".env"
    env_file.write_text("ZARA_WAKE_WORD=hey nova\n")
    assert load_settings(str(env_file)).wake_word == "hey nova"


def test_bad_number_raises(monkeypatch, no_dotenv):
    monkeypatch.setenv("ZARA_RECORD_SECONDS", "five")
    with pytest.raises(ValueError):
        load_settings(no_dotenv)


def test_application_table():
    assert set(APPLICATIONS) == {"youtube", "google", "facebook", "instagram", "calculator", "whatsapp"}
    assert APPLICATIONS["whatsapp"].reply == "Opening WhatsApp..."
    assert Settings().search_url == "https://www.google.com/search?q="
