"""Voice assistant session: one listen-match-respond cycle at a time.

State machine:
    IDLE -> (activation) -> LISTENING -> (transcript) -> RESPONDING -> IDLE
                                      -> (no speech / error) -> apology -> IDLE

Every path ends in IDLE. Activating during a reply cancels its speech and
starts a new cycle; the interrupted reply then neither opens its follow-up
nor touches the state. A failed listen speaks exactly one apology: a
recognition error and "no speech" are separate terminal outcomes.
"""

import asyncio
import logging
from datetime import datetime
from enum import Enum, auto
from typing import Callable, Optional

from .actions import Action, ActionExecutor
from .errors import ListenStartError, NoSpeechDetected, RecognitionError
from .handlers import greeting_for
from .protocols import ActionOpener, Clock, SpeechRecognizer, SpeechSpeaker
from .router import CommandRouter

log = logging.getLogger(__name__)

RECOGNITION_ERROR_REPLY = "Sorry, I didn't catch that. Could you please repeat?"
NO_SPEECH_REPLY = "I didn't hear anything. Please try again."
MICROPHONE_REPLY = "Sorry, I'm having trouble with the microphone. Please check your settings."


class State(Enum):
    IDLE = auto()        # Ready for the activation control
    LISTENING = auto()   # Waiting on the recognizer; indicator shown
    RESPONDING = auto()  # Speaking the reply / running its follow-up


class VoiceAssistant:
    """Coordinates recognizer, router, speaker and opener.

    ``on_state_change`` is called with the new :class:`State` on every
    transition; front ends use it to show the listening indicator and to
    hide the activation control.
    """

    def __init__(
        self,
        router: CommandRouter,
        recognizer: SpeechRecognizer,
        speaker: SpeechSpeaker,
        opener: ActionOpener,
        clock: Clock = datetime.now,
        listen_timeout: Optional[float] = None,
        on_state_change: Optional[Callable[[State], None]] = None,
    ):
        self.router = router
        self.recognizer = recognizer
        self.speaker = speaker
        self.executor = ActionExecutor(speaker, opener)
        self.clock = clock
        self.listen_timeout = listen_timeout
        self.on_state_change = on_state_change
        self._state = State.IDLE
        self._cycle = 0

    @property
    def state(self) -> State:
        return self._state

    @state.setter
    def state(self, new_state: State):
        old = self._state
        self._state = new_state
        log.debug("Assistant: %s -> %s", old.name, new_state.name)
        if self.on_state_change:
            self.on_state_change(new_state)

    @property
    def listening(self) -> bool:
        return self._state is State.LISTENING

    async def greet(self) -> str:
        """Speak the time-of-day greeting."""
        text = greeting_for(self.clock().hour)
        await self._say(text)
        return text

    async def listen_once(self) -> Optional[Action]:
        """Run one listen cycle.

        Returns the action that was performed, or ``None`` if the cycle
        ended in a recovery prompt or a cycle was already in progress.
        """
        if self.listening:
            log.warning("Listen requested while already listening; ignored")
            return None

        self.speaker.cancel()
        cycle = self._begin(State.LISTENING)
        try:
            transcript = await self._recognize()
        except ListenStartError as exc:
            log.warning("Could not start listening: %s", exc)
            return await self._recover(cycle, MICROPHONE_REPLY)
        except NoSpeechDetected:
            log.info("No speech detected")
            return await self._recover(cycle, NO_SPEECH_REPLY)
        except RecognitionError as exc:
            log.warning("Speech recognition error: %s", exc)
            return await self._recover(cycle, RECOGNITION_ERROR_REPLY)
        except Exception:
            log.exception("Speech recognizer failed")
            return await self._recover(cycle, RECOGNITION_ERROR_REPLY)
        except asyncio.CancelledError:
            self._finish(cycle)
            raise

        log.info("Heard: %s", transcript)
        return await self._respond(cycle, transcript)

    async def handle(self, transcript: str) -> Action:
        """Dispatch ``transcript`` and perform the resulting action."""
        return await self._respond(self._begin(State.RESPONDING), transcript)

    async def _respond(self, cycle: int, transcript: str) -> Action:
        if self._state is not State.RESPONDING:
            self.state = State.RESPONDING
        try:
            action = self.router.route(transcript)
            try:
                await self.executor.execute(action, proceed=lambda: cycle == self._cycle)
            except Exception:
                log.exception("Failed to perform %r", action)
        finally:
            self._finish(cycle)
        return action

    def _begin(self, state: State) -> int:
        self._cycle += 1
        self.state = state
        return self._cycle

    def _finish(self, cycle: int) -> None:
        # A newer cycle (a listen started during the reply) owns the state now.
        if cycle == self._cycle and self._state is not State.IDLE:
            self.state = State.IDLE

    async def _recognize(self) -> str:
        if self.listen_timeout is None:
            return await self.recognizer.listen()
        try:
            return await asyncio.wait_for(self.recognizer.listen(), self.listen_timeout)
        except asyncio.TimeoutError as exc:
            raise NoSpeechDetected(f"nothing heard within {self.listen_timeout}s") from exc

    async def _recover(self, cycle: int, prompt: str) -> None:
        self._finish(cycle)
        await self._say(prompt)
        return None

    async def _say(self, text: str) -> None:
        try:
            await self.speaker.speak(text)
        except Exception:
            log.exception("Failed to speak %r", text)
