"""Exceptions raised by the speech adapters and the assistant session."""


class AssistantError(Exception):
    """Base class for every error the assistant knows how to recover from."""


class ListenStartError(AssistantError):
    """Audio capture could not start (no microphone, permission denied...)."""


class RecognitionError(AssistantError):
    """The speech-to-text engine failed while processing a listen session."""


class NoSpeechDetected(AssistantError):
    """A listen session finished without producing any transcript."""
