"""Command router for the voice assistant.

Maps transcripts to intents by regular expression. Intents are checked in the
order they were registered and the first pattern that matches wins, so
"open youtube" must be registered before a catch-all search pattern would
swallow it. A transcript that matches nothing goes to the fallback intent.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable, List, Optional, Pattern, Tuple

from . import matcher
from .actions import Action
from .handlers import DEFAULT_TABLE, HandlerContext, unknown_command

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Intent:
    """A named request category.

    ``handler`` receives the ``re.Match`` of the winning pattern. The
    fallback intent has no patterns and its handler receives the normalized
    utterance instead.
    """

    name: str
    patterns: Tuple[Pattern[str], ...]
    handler: Callable[..., Action]

    @classmethod
    def build(cls, name: str, patterns: Iterable[matcher.PatternLike], handler: Callable[..., Action]) -> "Intent":
        return cls(name, matcher.compile_patterns(patterns), handler)

    @property
    def is_fallback(self) -> bool:
        return not self.patterns


@dataclass(frozen=True)
class MatchResult:
    intent: Intent
    pattern: Pattern[str]
    match: "re.Match[str]"

    @property
    def groups(self) -> Tuple[Optional[str], ...]:
        return self.match.groups()


def normalize(transcript: str) -> str:
    return transcript.strip().lower()


class CommandRouter:
    def __init__(self, intents: Iterable[Intent] = ()):
        self._intents: List[Intent] = []
        self._fallback: Optional[Intent] = None
        self._sealed = False
        for intent in intents:
            self.register(intent)

    def register(self, intent: Intent) -> None:
        """Append ``intent`` to the table.

        Registration order is dispatch order. An intent without patterns
        becomes the fallback; there can only be one.
        """
        if self._sealed:
            raise ValueError("cannot register intents after the router has been sealed")
        if intent.name in self.names or (self._fallback and self._fallback.name == intent.name):
            raise ValueError(f"intent {intent.name!r} is already registered")
        if intent.is_fallback:
            if self._fallback is not None:
                raise ValueError("a fallback intent is already registered")
            self._fallback = intent
        else:
            self._intents.append(intent)

    def seal(self) -> "CommandRouter":
        """Freeze the table; further :meth:`register` calls raise."""
        self._sealed = True
        return self

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(intent.name for intent in self._intents)

    @property
    def fallback(self) -> Optional[Intent]:
        return self._fallback

    def resolve(self, transcript: str) -> Optional[MatchResult]:
        """Find the winning intent for ``transcript`` without running it."""
        utterance = normalize(transcript)
        for intent in self._intents:
            found = matcher.match(utterance, intent.patterns)
            if found:
                pattern, match = found
                return MatchResult(intent, pattern, match)
        return None

    def route(self, transcript: str) -> Action:
        result = self.resolve(transcript)
        if result is not None:
            log.info("Matched intent %r with pattern %r", result.intent.name, result.pattern.pattern)
            return result.intent.handler(result.match)
        utterance = normalize(transcript)
        if self._fallback is None:
            raise LookupError(f"no intent matched {utterance!r} and no fallback is registered")
        log.debug("No intent matched %r, using fallback", utterance)
        return self._fallback.handler(utterance)


def default_router(ctx: Optional[HandlerContext] = None) -> CommandRouter:
    """Router with the assistant's built-in intents, sealed."""
    ctx = ctx or HandlerContext()
    intents = [Intent.build(name, patterns, partial(handler, ctx)) for name, patterns, handler in DEFAULT_TABLE]
    intents.append(Intent.build("default", (), partial(unknown_command, ctx)))
    return CommandRouter(intents).seal()
