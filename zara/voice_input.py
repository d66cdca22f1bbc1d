"""Microphone capture.

Records fixed-length snippets from the default (or a chosen) input device
and returns them as WAV bytes ready for speech-to-text.
"""

import io
import logging
import wave
from typing import Optional

from .errors import ListenStartError, RecognitionError

log = logging.getLogger(__name__)


class Microphone:
    """Capture microphone audio with PyAudio.

    Usage::
        mic = Microphone()
        audio = mic.record(duration=5)
        # hand `audio` to a recognizer
        mic.close()

    Raises :class:`~zara.errors.ListenStartError` when the audio system or
    the input device cannot be opened, and
    :class:`~zara.errors.RecognitionError` when reading from it fails.
    """

    def __init__(self, device_index: Optional[int] = None, rate: int = 16000, chunk: int = 1024):
        import pyaudio

        self.rate = rate
        self.chunk = chunk
        self.device_index = device_index
        self._format = pyaudio.paInt16
        try:
            self._audio = pyaudio.PyAudio()
        except OSError as exc:
            raise ListenStartError(f"audio system unavailable: {exc}") from exc

    def open_stream(self):
        try:
            return self._audio.open(
                format=self._format,
                channels=1,
                rate=self.rate,
                input=True,
                input_device_index=self.device_index,
                frames_per_buffer=self.chunk,
            )
        except OSError as exc:
            raise ListenStartError(f"cannot open microphone: {exc}") from exc

    def record(self, duration: float = 5) -> bytes:
        """Record ``duration`` seconds of audio and return WAV bytes."""
        stream = self.open_stream()
        frames = []
        try:
            for _ in range(int(self.rate / self.chunk * duration)):
                frames.append(stream.read(self.chunk))
        except OSError as exc:
            raise RecognitionError(f"microphone read failed: {exc}") from exc
        finally:
            stream.stop_stream()
            stream.close()
        log.debug("Recorded %d frames", len(frames))

        wav_io = io.BytesIO()
        with wave.open(wav_io, "wb") as wf:
            wf.setnchannels(1)
            wf.setsampwidth(self._audio.get_sample_size(self._format))
            wf.setframerate(self.rate)
            wf.writeframes(b"".join(frames))
        return wav_io.getvalue()

    def close(self):
        """Terminate the underlying PyAudio instance."""
        self._audio.terminate()
