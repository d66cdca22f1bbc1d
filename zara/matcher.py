"""Case-insensitive regular expression matching for transcripts."""

import re
from typing import Iterable, Optional, Pattern, Sequence, Tuple, Union

PatternLike = Union[str, Pattern[str]]


def compile_pattern(pattern: PatternLike) -> Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern, re.IGNORECASE)
    return pattern


def compile_patterns(patterns: Iterable[PatternLike]) -> Tuple[Pattern[str], ...]:
    return tuple(compile_pattern(p) for p in patterns)


def match(
    utterance: str, patterns: Sequence[Pattern[str]]
) -> Optional[Tuple[Pattern[str], "re.Match[str]"]]:
    """Return the first pattern that matches ``utterance`` with its match object.

    Patterns are tried in order and ``re.search`` semantics apply, so a
    pattern may match anywhere in the utterance.
    """
    for pattern in patterns:
        found = pattern.search(utterance)
        if found:
            return pattern, found
    return None
