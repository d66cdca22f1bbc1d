"""Structural types for the capabilities the assistant is built from."""

from datetime import datetime
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class SpeechRecognizer(Protocol):
    """Produces at most one final transcript per call to :meth:`listen`.

    Raises ``ListenStartError`` if capture cannot begin, ``NoSpeechDetected``
    if nothing was said and ``RecognitionError`` if the engine failed.
    """

    async def listen(self) -> str: ...


class SpeechSpeaker(Protocol):
    """Renders text as audio. ``speak`` returns once playback has finished."""

    async def speak(self, text: str) -> None: ...

    def cancel(self) -> None: ...


class ActionOpener(Protocol):
    """Opens a locator (URL or URI scheme) in a new browsing context."""

    def open(self, locator: str) -> None: ...


class Clock(Protocol):
    def __call__(self) -> datetime: ...


class RandomSource(Protocol):
    def choice(self, seq: Sequence[T]) -> T: ...
