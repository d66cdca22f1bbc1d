"""Coqui TTS playback.

Provides an async ``speak`` method that synthesizes the text with Coqui and
plays the waveform on the default output device with ``sounddevice``.
``speak`` returns when playback finishes; ``cancel`` cuts it short.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Optional

import numpy as np

log = logging.getLogger(__name__)


class CoquiSpeaker:
    """:class:`~zara.protocols.SpeechSpeaker` using Coqui TTS."""

    def __init__(
        self,
        model_name: str = "tts_models/en/ljspeech/tacotron2-DDC",
        speaker: Optional[str] = None,
        language: Optional[str] = None,
        sample_rate: Optional[int] = None,
        warm_up: bool = True,
    ):
        """Create a CoquiSpeaker instance.

        Parameters
        ----------
        model_name: str
            Identifier of the Coqui model to load. The default is a small
            Tacotron-2 model that runs fast on CPU.
        speaker, language: Optional[str]
            Used for multi-speaker / multi-language models.
        sample_rate: Optional[int]
            Output sample rate. Defaults to the model's native rate.
        warm_up: bool
            Run one throwaway synthesis so the first reply is not slow.
        """
        from TTS.api import TTS  # type: ignore
        import sounddevice as sd

        self._sd = sd
        self.speaker = speaker
        self.language = language
        engine = TTS(model_name=model_name, progress_bar=False, gpu=False)
        self.sample_rate = sample_rate or engine.synthesizer.output_sample_rate
        self._tts: Callable[..., list] = engine.tts
        self._cancelled = threading.Event()
        if warm_up:
            self._synthesize("warm up")

    def _synthesize(self, text: str) -> np.ndarray:
        kwargs = {}
        if self.speaker:
            kwargs["speaker"] = self.speaker
        if self.language:
            kwargs["language"] = self.language
        return np.asarray(self._tts(text, **kwargs), dtype=np.float32)

    async def speak(self, text: str) -> None:
        log.info("Speaking: %s", text)
        self._cancelled.clear()
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._speak_sync, text)

    def _speak_sync(self, text: str) -> None:
        wav = self._synthesize(text)
        if self._cancelled.is_set():
            return
        self._sd.play(wav, self.sample_rate)
        self._sd.wait()

    def cancel(self) -> None:
        """Stop any playback in progress."""
        self._cancelled.set()
        self._sd.stop()
