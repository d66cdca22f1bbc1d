"""Integration tests for the HTTP front end."""

import io
import wave
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from zara.api_voice import create_app
from zara.assistant import NO_SPEECH_REPLY
from zara.config import Settings
from zara.errors import RecognitionError


class FakeTranscriber:
    def __init__(self, text: str = "", error: Exception = None):
        self.text = text
        self.error = error
        self.received = []

    def transcribe(self, wav_bytes: bytes) -> str:
        self.received.append(wav_bytes)
        if self.error:
            raise self.error
        return self.text


def _client(transcriber=None) -> TestClient:
    return TestClient(create_app(settings=Settings(), transcriber=transcriber or FakeTranscriber()))


def _make_wav_bytes(duration_sec: float = 0.5, rate: int = 16000) -> bytes:
    """Create a short silent WAV file in memory for testing."""
    n_frames = int(duration_sec * rate)
    with io.BytesIO() as buf:
        with wave.open(buf, "wb") as wf:
            wf.setnchannels(1)
            wf.setsampwidth(2)  # 16-bit
            wf.setframerate(rate)
            wf.writeframes(b"\x00\x00" * n_frames)
        return buf.getvalue()


def test_index_serves_page():
    response = _client().get("/")
    assert response.status_code == 200
    assert "Talk to Zara" in response.text


@pytest.mark.parametrize("hour,speech", [(9, "Good morning sir"), (13, "Good afternoon sir"), (20, "Good evening sir")])
def test_greeting_for_browser_hour(hour, speech):
    response = _client().get("/greeting", params={"hour": hour})
    assert response.json() == {"speech": speech}


def test_greeting_defaults_to_injected_clock():
    app = create_app(settings=Settings(), transcriber=FakeTranscriber(), clock=lambda: datetime(2024, 1, 1, 7, 30))
    assert TestClient(app).get("/greeting").json() == {"speech": "Good morning sir"}


def test_greeting_rejects_invalid_hour():
    assert _client().get("/greeting", params={"hour": 24}).status_code == 422


def test_command_returns_action():
    client = _client()
    response = client.post("/command", json={"transcript": "  Search for Zara cheap flights "})
    assert response.status_code == 200
    assert response.json() == {
        "transcript": "Search for Zara cheap flights",
        "intent": "search",
        "speech": "Searching for cheap flights",
        "open_url": "https://www.google.com/search?q=cheap%20flights",
    }
    assert client.get("/last_transcript").json() == {"last_transcript": "Search for Zara cheap flights"}


def test_command_rejects_empty_transcript():
    assert _client().post("/command", json={"transcript": "   "}).status_code == 422
    assert _client().post("/command", json={}).status_code == 422


def test_voice_endpoint_transcribes_and_routes():
    transcriber = FakeTranscriber("open instagram")
    wav_bytes = _make_wav_bytes()
    files = {"file": ("test.wav", wav_bytes, "audio/wav")}
    response = _client(transcriber).post("/voice", files=files)
    assert response.status_code == 200
    data = response.json()
    assert data["transcript"] == "open instagram"
    assert data["intent"] == "applications"
    assert data["open_url"] == "https://instagram.com"
    assert transcriber.received == [wav_bytes]


def test_voice_endpoint_silence_reports_no_speech():
    files = {"file": ("test.wav", _make_wav_bytes(), "audio/wav")}
    data = _client(FakeTranscriber("")).post("/voice", files=files).json()
    assert data["transcript"] == ""
    assert data["intent"] is None
    assert data["speech"] == NO_SPEECH_REPLY


def test_voice_endpoint_transcription_failure():
    files = {"file": ("test.wav", _make_wav_bytes(), "audio/wav")}
    response = _client(FakeTranscriber(error=RecognitionError("model crashed"))).post("/voice", files=files)
    assert response.status_code == 502


def test_invalid_content_type():
    files = {"file": ("test.txt", b"not audio", "text/plain")}
    response = _client().post("/voice", files=files)
    assert response.status_code == 400
    assert response.json()["detail"] == "Only WAV audio is supported"
