"""PlaybackController for driving a single audio session."""

import asyncio
import logging

from sproutify.config import constants
from sproutify.player.errors import (
    InvalidSourceError,
    PlaybackError,
    PlaybackFailure,
    PrepareError,
)
from sproutify.player.models import PREPARED_STATES, PlaybackSession, PlayerState
from sproutify.player.protocols import AudioBackend, PlaybackListener
from sproutify.player.queue import QueueEngine
from sproutify.track import Track

logger = logging.getLogger(__name__)


def _clamp_volume(volume: int) -> int:
    return max(constants.MIN_VOLUME, min(constants.MAX_VOLUME, volume))


def _running_task() -> "asyncio.Task[object] | None":
    try:
        return asyncio.current_task()
    except RuntimeError:
        # No running event loop
        return None


class PlaybackController:
    """Drives one audio session at a time and reports what happens to a listener.

    play_track() returns immediately; preparation and playback run in an
    asyncio task. When a track ends naturally the controller asks the queue for
    the next one and keeps going. When a track fails it stops and reports the
    error instead.

    Every session carries a generation number. Starting a new track or resetting
    bumps it, and a session whose generation is no longer current never touches
    state or emits events again.
    """

    def __init__(
        self,
        queue: QueueEngine,
        backend: AudioBackend,
        volume: int = constants.DEFAULT_VOLUME,
    ):
        self.queue = queue
        self._backend = backend
        self._listener: PlaybackListener | None = None
        self._session: PlaybackSession | None = None
        self._generation = 0
        self._volume = _clamp_volume(volume)
        self.state = PlayerState.IDLE
        self.last_error: PlaybackError | None = None

    @property
    def current_track(self) -> Track | None:
        """Track bound to the current session, if any."""
        if self._session is None:
            return None
        return self._session.track

    @property
    def is_playing(self) -> bool:
        return self.state == PlayerState.PLAYING

    @property
    def is_prepared(self) -> bool:
        return self._session is not None and self._session.prepared

    @property
    def position_ms(self) -> int:
        """Current position in milliseconds, 0 when nothing is prepared."""
        if not self.is_prepared:
            return 0
        position = max(0, self._backend.position())
        if self.duration_ms:
            position = min(position, self.duration_ms)
        return position

    @property
    def duration_ms(self) -> int:
        """Total duration of the prepared track in milliseconds, 0 if unknown."""
        if self._session is None or not self._session.prepared:
            return 0
        return self._session.duration_ms

    @property
    def is_effectively_complete(self) -> bool:
        """Whether the position is close enough to the end to display as finished.

        Only for display. Auto-advance is driven by the backend's completion.
        """
        duration = self.duration_ms
        if duration <= 0:
            return False
        return self.position_ms >= duration - constants.COMPLETION_TOLERANCE_MS

    @property
    def volume(self) -> int:
        return self._volume

    def set_listener(self, listener: PlaybackListener | None) -> None:
        """Register the playback observer, replacing any previous one."""
        self._listener = listener

    def set_volume(self, volume: int) -> None:
        """Set output volume as a percentage, clamped to 0-100."""
        self._volume = _clamp_volume(volume)
        self._backend.set_volume(self._volume)
        logger.debug(f"Volume set to {self._volume}")

    def play_track(self, track: Track, autoplay: bool = True) -> None:
        """Start preparing a track, replacing whatever session was active.

        Returns immediately. The listener hears about the track once it is
        prepared, or gets an error event if it cannot be played.

        Args:
            track: Track to play.
            autoplay: Start playing as soon as the track is prepared. When False
                the controller stops in READY until toggle_play_pause() or
                resume() is called.
        """
        self._teardown_session()
        self._generation += 1
        session = PlaybackSession(
            track=track, generation=self._generation, autoplay=autoplay
        )
        self._session = session
        self.last_error = None

        if not track.has_source:
            self._fail(
                session,
                InvalidSourceError(f"Track {track.formatted_title!r} has no audio source"),
            )
            return

        self._set_state(PlayerState.PREPARING)
        logger.info(f"Preparing {track.formatted_title}")
        session.task = asyncio.create_task(self._run_session(session))

    def play_next(self) -> None:
        """Play the track after the current one, committing the queue move.

        When neither the queue nor the catalog has a next track, the listener
        is told playback is not running and the current state is kept.
        """
        if not self._advance():
            self._notify_state_changed(False)

    def play_previous(self) -> None:
        """Play the track before the current one, committing the queue move."""
        track = self.queue.get_previous_track()
        if track is None:
            logger.info("No previous track available")
            self._notify_state_changed(False)
            return

        self.queue.move_to_previous()
        self.play_track(track)

    def toggle_play_pause(self) -> None:
        if self.state == PlayerState.PLAYING:
            self.pause()
        elif self.state in (PlayerState.PAUSED, PlayerState.READY):
            self.resume()
        else:
            logger.debug(f"Ignoring play/pause toggle while {self.state.name}")

    def pause(self) -> None:
        """Pause playback, retaining the position."""
        if self.state != PlayerState.PLAYING:
            logger.debug(f"Ignoring pause while {self.state.name}")
            return

        self._backend.pause()
        self._set_state(PlayerState.PAUSED)
        self._notify_state_changed(False)

    def resume(self) -> None:
        """Resume a paused track, or start one that was prepared without autoplay."""
        session = self._session
        if session is None or self.state not in (PlayerState.PAUSED, PlayerState.READY):
            logger.debug(f"Ignoring resume while {self.state.name}")
            return

        if self.state == PlayerState.READY:
            # The session task is waiting for this before it starts the backend
            session.start_requested.set()
        else:
            self._backend.resume()

        self._set_state(PlayerState.PLAYING)
        self._notify_state_changed(True)

    def seek_to(self, position_ms: int) -> None:
        """Seek the prepared track. Ignored while nothing is prepared."""
        if not self.is_prepared or self.state not in PREPARED_STATES:
            logger.debug(f"Ignoring seek to {position_ms}ms while {self.state.name}")
            return

        position_ms = max(0, position_ms)
        if self.duration_ms:
            position_ms = min(position_ms, self.duration_ms)
        self._backend.seek(position_ms)
        logger.debug(f"Seeked to {position_ms}ms")

    def reset(self) -> None:
        """Return to IDLE, discarding any session or in-flight preparation.

        Safe to call repeatedly.
        """
        self._teardown_session()
        self._generation += 1
        self._set_state(PlayerState.IDLE)

    def stop(self) -> None:
        """Stop playback and tell the listener if something was playing."""
        was_playing = self.state == PlayerState.PLAYING
        self.reset()
        if was_playing:
            self._notify_state_changed(False)

    def close(self) -> None:
        """Tear everything down at the end of a session."""
        self.reset()
        self._backend.release()

    async def _run_session(self, session: PlaybackSession) -> None:
        """Prepare and play one track, then chain to the next on completion."""
        track = session.track
        try:
            try:
                duration_ms = await self._backend.prepare(track.audio_url)
            except PrepareError as e:
                self._release_and_fail(session, e)
                return

            if not self._is_current(session):
                return

            session.prepared = True
            session.duration_ms = duration_ms or track.duration_ms or 0
            self._backend.set_volume(self._volume)

            if session.autoplay:
                self._set_state(PlayerState.PLAYING)
                self._notify_track_changed(track)
                if not self._is_current(session):
                    return
                self._notify_state_changed(True)
            else:
                self._set_state(PlayerState.READY)
                self._notify_track_changed(track)
                # resume() sets PLAYING and notifies before releasing us
                await session.start_requested.wait()

            if not self._is_current(session):
                return

            try:
                await self._backend.play()
            except PlaybackFailure as e:
                self._release_and_fail(session, e)
                return

            if not self._is_current(session):
                return

            self._complete(session)
        except Exception as e:
            logger.exception(f"Unexpected error while playing {track.formatted_title}")
            self._release_and_fail(
                session, PlaybackFailure(f"Unexpected playback error: {e}")
            )

    def _advance(self) -> bool:
        track = self.queue.get_next_track()
        if track is None:
            logger.info("No next track available")
            return False

        self.queue.move_to_next()
        self.play_track(track)
        return True

    def _complete(self, session: PlaybackSession) -> None:
        session.prepared = False
        self._set_state(PlayerState.COMPLETED)
        logger.info(f"Finished {session.track.formatted_title}")
        self._notify_state_changed(False)

        # The listener may already have started another track
        if not self._is_current(session):
            return

        # Completion already reported is_playing=False
        self._advance()

    def _release_and_fail(self, session: PlaybackSession, error: PlaybackError) -> None:
        if not self._is_current(session):
            return
        self._backend.release()
        self._fail(session, error)

    def _fail(self, session: PlaybackSession, error: PlaybackError) -> None:
        """Move to ERROR and report. Never advances to another track."""
        if not self._is_current(session):
            return

        session.prepared = False
        self.last_error = error
        self._set_state(PlayerState.ERROR)
        logger.error(f"Cannot play {session.track.formatted_title}: {error}")
        self._notify_error(str(error))

    def _teardown_session(self) -> None:
        session = self._session
        if session is None:
            return

        self._session = None
        task = session.task
        if task is not None and not task.done() and task is not _running_task():
            task.cancel()

        self._backend.stop()
        self._backend.release()

    def _is_current(self, session: PlaybackSession) -> bool:
        return (
            self._session is session and session.generation == self._generation
        )

    def _set_state(self, state: PlayerState) -> None:
        if state != self.state:
            logger.debug(f"Playback state {self.state.name} -> {state.name}")
        self.state = state

    def _notify_state_changed(self, is_playing: bool) -> None:
        if self._listener is None:
            return
        try:
            self._listener.on_playback_state_changed(is_playing)
        except Exception:
            logger.exception("Playback listener failed handling a state change")

    def _notify_error(self, message: str) -> None:
        if self._listener is None:
            return
        try:
            self._listener.on_error(message)
        except Exception:
            logger.exception("Playback listener failed handling an error")

    def _notify_track_changed(self, track: Track) -> None:
        if self._listener is None:
            return
        try:
            self._listener.on_track_changed(track)
        except Exception:
            logger.exception("Playback listener failed handling a track change")
