"""Runtime configuration.

Values come from environment variables; an optional ``.env`` file in the
working directory is loaded first. The application table is static data.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv


@dataclass(frozen=True)
class Application:
    """Something the assistant knows how to open."""

    name: str
    locator: str

    @property
    def reply(self) -> str:
        return f"Opening {self.name}..."


# Keyed by the lower-cased word captured from "open <word>".
APPLICATIONS: Dict[str, Application] = {
    "youtube": Application("YouTube", "https://youtube.com"),
    "google": Application("Google", "https://google.com"),
    "facebook": Application("Facebook", "https://facebook.com"),
    "instagram": Application("Instagram", "https://instagram.com"),
    "calculator": Application("calculator", "calculator://"),
    "whatsapp": Application("WhatsApp", "whatsapp://"),
}


@dataclass(frozen=True)
class Settings:
    name: str = "Zara"
    aliases: Tuple[str, ...] = ("zara", "shipra", "shifra")
    search_url: str = "https://www.google.com/search?q="
    language: str = "en"
    whisper_model: str = "base"
    tts_model: str = "tts_models/en/ljspeech/tacotron2-DDC"
    wake_word: str = "hey zara"
    record_seconds: int = 5
    listen_timeout: Optional[float] = None
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"


def _split_aliases(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip().lower() for part in raw.split(",") if part.strip())


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build :class:`Settings` from the environment.

    Args:
        env_file: Path of a dotenv file to read. ``None`` searches for
            ``.env`` the way ``python-dotenv`` does by default.
    Raises:
        ValueError: if a numeric variable cannot be parsed.
    """
    load_dotenv(env_file)
    defaults = Settings()

    timeout = os.getenv("ZARA_LISTEN_TIMEOUT")
    return Settings(
        name=os.getenv("ZARA_NAME", defaults.name),
        aliases=_split_aliases(os.getenv("ZARA_ALIASES", ",".join(defaults.aliases))),
        search_url=os.getenv("ZARA_SEARCH_URL", defaults.search_url),
        language=os.getenv("ZARA_LANGUAGE", defaults.language),
        whisper_model=os.getenv("ZARA_WHISPER_MODEL", defaults.whisper_model),
        tts_model=os.getenv("ZARA_TTS_MODEL", defaults.tts_model),
        wake_word=os.getenv("ZARA_WAKE_WORD", defaults.wake_word),
        record_seconds=int(os.getenv("ZARA_RECORD_SECONDS", defaults.record_seconds)),
        listen_timeout=float(timeout) if timeout else None,
        host=os.getenv("ZARA_HOST", defaults.host),
        port=int(os.getenv("ZARA_PORT", defaults.port)),
        log_level=os.getenv("ZARA_LOG_LEVEL", defaults.log_level).upper(),
    )
