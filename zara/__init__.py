"""Zara: a small voice command assistant.

Transcripts are matched against an ordered table of intents; the winning
handler returns an :class:`~zara.actions.Action` that is spoken and, when
it carries a locator, opened once speech has finished.
"""

__version__ = "0.1.0"
