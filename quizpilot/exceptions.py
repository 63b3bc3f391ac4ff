"""Exception types raised by QuizPilot components."""


class QuizPilotError(Exception):
    """Base class for all QuizPilot errors."""


class UnknownActionError(QuizPilotError):
    """Raised when a protocol message names an action with no handler."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Unknown action: {action}")


class SelectorError(QuizPilotError):
    """Raised when no selector can be produced for an element."""


class AnswerProviderError(QuizPilotError):
    """Raised when the answer provider fails or returns malformed content."""
