"""ffplay implementation of the AudioBackend protocol."""

import asyncio
import logging
import signal
import time

from sproutify.catalog import is_local_source, local_path, probe_duration_ms
from sproutify.config import constants
from sproutify.player.errors import PlaybackFailure, PrepareError

logger = logging.getLogger(__name__)


class FfplayBackend:
    """Plays audio through an ffplay subprocess without a display window.

    Pausing stops the process with SIGSTOP. Seeking, and any volume change that
    must take effect, restart ffplay at the requested offset. Local files are
    probed with mutagen during prepare(); remote sources are trusted until
    ffplay opens them.
    """

    def __init__(self, ffplay_path: str = constants.FFPLAY_BINARY):
        self._ffplay_path = ffplay_path
        self._source: str | None = None
        self._duration_ms: int | None = None
        self._process: asyncio.subprocess.Process | None = None
        self._volume = constants.DEFAULT_VOLUME

        # Position bookkeeping: ffplay reports nothing back, so the position is
        # the offset the process was started at plus wall time since then.
        self._offset_ms = 0
        self._started_at: float | None = None
        self._paused = False
        self._restart = False
        self._stopped = False

    async def prepare(self, source: str) -> int | None:
        """Check the source can be opened and measure it when it is local."""
        self.release()

        duration_ms = None
        if is_local_source(source):
            path = local_path(source)
            if not path.is_file():
                raise PrepareError(f"Audio file not found: {path}")
            duration_ms = await asyncio.to_thread(probe_duration_ms, path)
            if duration_ms is None:
                raise PrepareError(f"Unrecognised audio file: {path}")

        self._source = source
        self._duration_ms = duration_ms
        self._stopped = False
        logger.debug(f"Prepared {source} ({duration_ms}ms)")
        return duration_ms

    async def play(self) -> None:
        """Play the prepared source. Awaits until it ends or stop() is called."""
        if self._source is None:
            raise PlaybackFailure("Nothing has been prepared")

        self._stopped = False
        while True:
            self._restart = False
            self._process = await self._spawn()
            _, stderr = await self._process.communicate()
            returncode = self._process.returncode
            self._process = None

            if self._stopped:
                return
            if self._restart:
                continue

            if returncode != 0:
                detail = stderr.decode(errors="replace").strip()
                raise PlaybackFailure(
                    f"ffplay exited with status {returncode}: {detail}",
                    code=returncode,
                )

            self._offset_ms = self._duration_ms or self.position()
            self._started_at = None
            return

    def pause(self) -> None:
        if self._paused:
            return
        self._offset_ms = self.position()
        self._started_at = None
        self._paused = True
        self._signal(signal.SIGSTOP)

    def resume(self) -> None:
        if not self._paused:
            return
        self._paused = False
        self._started_at = time.monotonic()
        self._signal(signal.SIGCONT)

    def seek(self, position_ms: int) -> None:
        self._offset_ms = position_ms
        self._started_at = None if self._paused else time.monotonic()
        if self._process is not None:
            self._restart = True
            self._terminate()

    def position(self) -> int:
        if self._started_at is None:
            return self._offset_ms

        elapsed_ms = int((time.monotonic() - self._started_at) * 1000)
        position = self._offset_ms + elapsed_ms
        if self._duration_ms:
            position = min(position, self._duration_ms)
        return position

    def set_volume(self, volume: int) -> None:
        """Set volume for the next ffplay start; restarts a running process to apply it."""
        if volume == self._volume:
            return
        self._volume = volume
        if self._process is not None:
            self.seek(self.position())

    def stop(self) -> None:
        self._stopped = True
        self._terminate()

    def release(self) -> None:
        self.stop()
        self._source = None
        self._duration_ms = None
        self._offset_ms = 0
        self._started_at = None
        self._paused = False

    async def _spawn(self) -> asyncio.subprocess.Process:
        assert self._source is not None
        command = [
            self._ffplay_path,
            "-nodisp",
            "-autoexit",
            "-hide_banner",
            "-loglevel",
            "error",
            "-volume",
            str(self._volume),
        ]
        if self._offset_ms:
            command += ["-ss", f"{self._offset_ms / 1000:.3f}"]
        command.append(self._source)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise PlaybackFailure(f"Could not start {self._ffplay_path}: {e}")

        if self._paused:
            process.send_signal(signal.SIGSTOP)
        else:
            self._started_at = time.monotonic()
        return process

    def _signal(self, signum: int) -> None:
        if self._process is None or self._process.returncode is not None:
            return
        try:
            self._process.send_signal(signum)
        except ProcessLookupError:
            pass

    def _terminate(self) -> None:
        if self._process is None or self._process.returncode is not None:
            return
        try:
            self._process.terminate()
            # A stopped process only acts on the termination once continued
            self._process.send_signal(signal.SIGCONT)
        except ProcessLookupError:
            pass
