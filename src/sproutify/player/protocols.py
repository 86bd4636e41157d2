"""Protocol definitions for dependency injection in PlaybackController."""

from typing import Protocol

from sproutify.track import Track


class AudioBackend(Protocol):
    """Protocol for the platform media primitive that decodes and plays audio.

    The controller owns exactly one backend and drives a single source through
    it at a time. Implementations handle decoding and output details; the
    controller never sees them.
    """

    async def prepare(self, source: str) -> int | None:
        """Open a source and get it ready to play.

        Args:
            source: Audio reference (local path or URL) of the track.

        Returns:
            Total duration in milliseconds, or None if the backend cannot tell.

        Raises:
            PrepareError: The source could not be opened or decoded.
        """
        ...

    async def play(self) -> None:
        """Start playing the prepared source, awaiting until it ends.

        Returns when the end of media is reached or stop() is called. Pausing
        does not cause this call to return.

        Raises:
            PlaybackFailure: Playback failed after it had started.
        """
        ...

    def pause(self) -> None:
        """Pause playback, retaining the current position."""
        ...

    def resume(self) -> None:
        """Resume playback after pause()."""
        ...

    def seek(self, position_ms: int) -> None:
        """Move the playback position of the prepared source.

        Args:
            position_ms: Target position in milliseconds, already clamped.
        """
        ...

    def position(self) -> int:
        """Current playback position in milliseconds."""
        ...

    def set_volume(self, volume: int) -> None:
        """Set output volume.

        Args:
            volume: Volume as a percentage between 0 and 100.
        """
        ...

    def stop(self) -> None:
        """Stop playback immediately.

        Calling this causes any pending play() call to return.
        Safe to call when nothing is playing.
        """
        ...

    def release(self) -> None:
        """Free resources held for the current source.

        The backend may be prepared again afterwards. Safe to call repeatedly.
        """
        ...


class PlaybackListener(Protocol):
    """Protocol for the single observer of playback events.

    Callbacks run on the controller's event loop and may call back into the
    controller, for example to start another track.
    """

    def on_playback_state_changed(self, is_playing: bool) -> None:
        """Called when playback starts, resumes, pauses, stops or completes."""
        ...

    def on_error(self, message: str) -> None:
        """Called when preparing or playing the current track fails."""
        ...

    def on_track_changed(self, track: Track) -> None:
        """Called when a new track has been prepared."""
        ...
