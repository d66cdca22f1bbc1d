"""Action values returned by intent handlers and the executor that runs them.

A handler never talks to the speaker or the browser directly. It returns an
:class:`Action` saying what to say and, optionally, what to open afterwards;
:class:`ActionExecutor` performs it, waiting for speech to finish before the
follow-up so the user hears the confirmation first.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional

from .protocols import ActionOpener, SpeechSpeaker

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Action:
    intent: str
    speech: str
    open_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def speak(intent: str, text: str) -> Action:
    return Action(intent=intent, speech=text)


def speak_then_open(intent: str, text: str, locator: str) -> Action:
    return Action(intent=intent, speech=text, open_url=locator)


class ActionExecutor:
    """Interpret :class:`Action` values against a speaker and an opener."""

    def __init__(self, speaker: SpeechSpeaker, opener: ActionOpener):
        self.speaker = speaker
        self.opener = opener

    async def execute(self, action: Action, proceed: Callable[[], bool] = lambda: True) -> None:
        """Speak, then open the follow-up locator if ``proceed()`` still holds.

        ``proceed`` lets the caller drop the follow-up when the reply was
        interrupted while it was being spoken.
        """
        await self.speaker.speak(action.speech)
        if action.open_url and not proceed():
            log.info("Reply interrupted; not opening %s", action.open_url)
            return
        if action.open_url:
            log.info("Opening %s", action.open_url)
            self.opener.open(action.open_url)
