"""Playback error types.

All errors derive from PlaybackError, which carries:
- message: human readable reason, forwarded to the listener's error event
- code: optional backend diagnostic code
"""


class PlaybackError(Exception):
    """Base class for playback errors."""

    def __init__(self, message: str, code: int | None = None):
        self.message = message
        self.code = code
        super().__init__(message)

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"{self.message} (code {self.code})"


class InvalidSourceError(PlaybackError):
    """The track has no usable audio reference. Raised before any backend call."""


class PrepareError(PlaybackError):
    """The backend could not open or decode the source."""


class PlaybackFailure(PlaybackError):
    """Playback failed after the source was prepared, e.g. an I/O interruption."""
