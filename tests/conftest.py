"""Shared fakes standing in for audio hardware and the browser."""

from __future__ import annotations

from datetime import datetime
from typing import List, Sequence, Union

import pytest

from zara.config import Settings
from zara.handlers import HandlerContext
from zara.router import default_router


class FirstChoice:
    """Random source that always picks the first element."""

    def choice(self, seq: Sequence):
        return seq[0]


class FakeSpeaker:
    def __init__(self, events: List[str], fail: bool = False):
        self.events = events
        self.spoken: List[str] = []
        self.cancelled = 0
        self.fail = fail

    async def speak(self, text: str) -> None:
        if self.fail:
            raise RuntimeError("audio device gone")
        self.spoken.append(text)
        self.events.append(f"speak:{text}")

    def cancel(self) -> None:
        self.cancelled += 1
        self.events.append("cancel")


class FakeOpener:
    def __init__(self, events: List[str]):
        self.events = events
        self.opened: List[str] = []

    def open(self, locator: str) -> None:
        self.opened.append(locator)
        self.events.append(f"open:{locator}")


class FakeRecognizer:
    """Replays scripted outcomes: a transcript string or an exception to raise."""

    def __init__(self, outcomes: Sequence[Union[str, Exception]]):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def listen(self) -> str:
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


FIXED_NOW = datetime(2024, 3, 5, 14, 7)


@pytest.fixture
def ctx() -> HandlerContext:
    return HandlerContext(settings=Settings(), clock=lambda: FIXED_NOW, rng=FirstChoice())


@pytest.fixture
def router(ctx):
    return default_router(ctx)


@pytest.fixture
def events() -> List[str]:
    return []


@pytest.fixture
def speaker(events):
    return FakeSpeaker(events)


@pytest.fixture
def opener(events):
    return FakeOpener(events)
