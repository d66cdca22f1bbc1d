"""Intent handlers.

Every handler maps the captured groups of a match to an
:class:`~zara.actions.Action`. Handlers that depend on the outside world
(clock, randomness, configuration) receive it through :class:`HandlerContext`.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Sequence, Tuple
from urllib.parse import quote

from .actions import Action, speak, speak_then_open
from .config import APPLICATIONS, Application, Settings
from .protocols import Clock, RandomSource

GREETING_REPLIES = (
    "Hello sir, what can I help you with?",
    "Hey there! How can I assist you today?",
    "Hi! What would you like me to do?",
)

UNKNOWN_REPLIES = (
    "I'm not sure I understand. Could you rephrase that?",
    "I don't know that command yet. Try asking me something else.",
    "Sorry, I didn't get that. Can you say it differently?",
)

EMPTY_SEARCH_REPLY = "What would you like me to search for?"

# Characters encodeURIComponent leaves alone besides the ones quote() keeps.
_URI_COMPONENT_SAFE = "!'()*"


@dataclass
class HandlerContext:
    settings: Settings = field(default_factory=Settings)
    clock: Clock = datetime.now
    rng: RandomSource = field(default_factory=random.Random)
    applications: Mapping[str, Application] = field(default_factory=lambda: dict(APPLICATIONS))

    def pick(self, responses: Sequence[str]) -> str:
        return self.rng.choice(responses)


def greeting_for(hour: int) -> str:
    """Time-of-day greeting spoken when the assistant starts."""
    if 0 <= hour < 12:
        return "Good morning sir"
    if 12 <= hour < 16:
        return "Good afternoon sir"
    return "Good evening sir"


def identity_reply(settings: Settings) -> str:
    return f"I'm {settings.name}, your virtual assistant created by Nirav sir."


def strip_aliases(query: str, aliases: Sequence[str]) -> str:
    """Remove every occurrence of the assistant's names from ``query``.

    Only surrounding whitespace is trimmed afterwards.
    """
    if aliases:
        names = "|".join(re.escape(a) for a in aliases if a)
        query = re.sub(names, "", query, flags=re.IGNORECASE)
    return query.strip()


def build_search_url(query: str, endpoint: str) -> str:
    return endpoint + quote(query, safe=_URI_COMPONENT_SAFE)


def greetings(ctx: HandlerContext, found: "re.Match[str]") -> Action:
    return speak("greetings", ctx.pick(GREETING_REPLIES))


def identity(ctx: HandlerContext, found: "re.Match[str]") -> Action:
    return speak("identity", identity_reply(ctx.settings))


def current_time(ctx: HandlerContext, found: "re.Match[str]") -> Action:
    return speak("time", f"The time is {ctx.clock():%H:%M}")


def current_date(ctx: HandlerContext, found: "re.Match[str]") -> Action:
    now = ctx.clock()
    return speak("date", f"Today's date is {now.day} {now:%B %Y}")


def open_application(ctx: HandlerContext, found: "re.Match[str]") -> Action:
    name = found.group(1)
    app = ctx.applications.get(name.lower())
    if app is None:
        return speak(
            "applications",
            f"I don't know how to open {name}. Would you like me to search for it?",
        )
    return speak_then_open("applications", app.reply, app.locator)


def web_search(ctx: HandlerContext, found: "re.Match[str]") -> Action:
    query = strip_aliases(found.group(1), ctx.settings.aliases)
    if not query:
        return speak("search", EMPTY_SEARCH_REPLY)
    return speak_then_open(
        "search",
        f"Searching for {query}",
        build_search_url(query, ctx.settings.search_url),
    )


def unknown_command(ctx: HandlerContext, utterance: str) -> Action:
    return speak("default", ctx.pick(UNKNOWN_REPLIES))


# (intent name, patterns, handler) in dispatch order. Keyword intents match
# whole words; parameterized ones capture their argument.
DEFAULT_TABLE: Tuple[Tuple[str, Tuple[str, ...], object], ...] = (
    ("greetings", (r"\bhello\b", r"\bhey\b", r"\bhi\b"), greetings),
    ("identity", (r"\bwhat is your name\b", r"\bwho are you\b"), identity),
    ("time", (r"\btime\b", r"\bwhat time is it\b", r"\bcurrent time\b"), current_time),
    ("date", (r"\bdate\b", r"\btoday's date\b", r"\bwhat date is it\b"), current_date),
    ("applications", (r"open (\w+)", r"launch (\w+)"), open_application),
    ("search", (r"search for (.*)", r"find (.*)", r"look up (.*)"), web_search),
)
