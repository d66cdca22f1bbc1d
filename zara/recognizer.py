"""Speech-to-text using Whisper, plus an optional PocketSphinx wake word.

* :class:`WhisperRecognizer` records a short snippet with
  :class:`~zara.voice_input.Microphone` and transcribes it with
  ``whisper.load_model(...)``. One call to :meth:`WhisperRecognizer.listen`
  is one listen session and yields at most one transcript.
* :class:`WakeWordTrigger` listens continuously for a keyphrase
  (default: "hey zara") and calls back when it is heard, as a hands-free
  alternative to pressing the activation key.
"""

import asyncio
import logging
import os
import tempfile
import threading
from typing import Any, Callable, Optional

from .errors import NoSpeechDetected, RecognitionError
from .voice_input import Microphone

log = logging.getLogger(__name__)


class WhisperTranscriber:
    """Load a Whisper model on first use and transcribe WAV bytes with it."""

    def __init__(self, model_name: str = "base", language: Optional[str] = "en"):
        self.model_name = model_name
        self.language = language
        self._model: Any = None
        self._lock = threading.Lock()

    def _load(self):
        with self._lock:
            if self._model is None:
                import whisper

                log.info("Loading Whisper model %r", self.model_name)
                self._model = whisper.load_model(self.model_name)
        return self._model

    def transcribe(self, wav_bytes: bytes) -> str:
        """Return the stripped transcript of ``wav_bytes`` (may be empty).

        Raises:
            RecognitionError: if the model fails on the audio.
        """
        model = self._load()
        # Whisper expects a file path or numpy array; write to temp file
        with tempfile.NamedTemporaryFile(delete=False, suffix=".wav") as tmp:
            tmp.write(wav_bytes)
            tmp_path = tmp.name
        try:
            result = model.transcribe(tmp_path, fp16=False, language=self.language)
        except Exception as exc:
            raise RecognitionError(f"transcription failed: {exc}") from exc
        finally:
            os.remove(tmp_path)
        return result.get("text", "").strip()


class WhisperRecognizer:
    """:class:`~zara.protocols.SpeechRecognizer` backed by the microphone and Whisper."""

    def __init__(
        self,
        transcriber: Optional[WhisperTranscriber] = None,
        record_seconds: float = 5,
        microphone_factory: Callable[[], Microphone] = Microphone,
    ):
        self.transcriber = transcriber or WhisperTranscriber()
        self.record_seconds = record_seconds
        self._microphone_factory = microphone_factory

    def _listen_sync(self) -> str:
        mic = self._microphone_factory()
        try:
            audio = mic.record(self.record_seconds)
        finally:
            mic.close()
        text = self.transcriber.transcribe(audio)
        if not text:
            raise NoSpeechDetected("no speech in the recorded snippet")
        return text

    async def listen(self) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._listen_sync)


class WakeWordTrigger:
    """Spot a keyphrase with PocketSphinx and call ``on_wake`` each time.

    Example usage::
        trigger = WakeWordTrigger(on_wake=lambda: print("woke"))
        trigger.start()
        # ... later
        trigger.stop()

    ``on_wake`` runs on the detection thread; detection is paused until it
    returns, so a listen cycle started from it never overlaps another.
    """

    def __init__(self, on_wake: Callable[[], None],
                 wake_word: str = "hey zara",
                 kws_threshold: float = 1e-20,
                 microphone_factory: Callable[[], Microphone] = Microphone):
        from pocketsphinx import Decoder, get_model_path

        self.on_wake = on_wake
        self.wake_word = wake_word
        self.kws_threshold = kws_threshold
        self._microphone_factory = microphone_factory
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._mic: Optional[Microphone] = None
        self._stream: Optional[Any] = None
        model_path = get_model_path()
        self._decoder = Decoder(
            hmm=os.path.join(model_path, "en-us/en-us"),
            dict=os.path.join(model_path, "en-us/cmudict-en-us.dict"),
            keyphrase=self.wake_word,
            kws_threshold=self.kws_threshold,
        )

    def _detect_loop(self):
        try:
            while self._running:
                data = self._stream.read(self._mic.chunk, exception_on_overflow=False)
                if not data:
                    continue
                self._decoder.process_raw(data, False, False)
                if self._decoder.hyp() is not None:
                    log.info("Wake word %r detected", self.wake_word)
                    self._decoder.end_utt()
                    self._stream.stop_stream()
                    try:
                        self.on_wake()
                    except Exception:
                        log.exception("Wake word callback failed")
                    self._stream.start_stream()
                    self._decoder.start_utt()
        finally:
            self._decoder.end_utt()

    def start(self):
        if self._running:
            return
        self._running = True
        self._mic = self._microphone_factory()
        self._stream = self._mic.open_stream()
        self._decoder.start_utt()
        self._thread = threading.Thread(target=self._detect_loop, daemon=True)
        self._thread.start()

    def stop(self):
        self._running = False
        if self._thread:
            self._thread.join()
            self._thread = None
        if self._stream:
            self._stream.stop_stream()
            self._stream.close()
            self._stream = None
        if self._mic:
            self._mic.close()
            self._mic = None
