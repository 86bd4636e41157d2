import asyncio
import logging
import sys

import colorlog

from sproutify.catalog import format_time
from sproutify.config.settings import SproutifySettings
from sproutify.player import FfplayBackend, PlayerSession, create_session
from sproutify.track import Track

logger = logging.getLogger(__name__)


def setup_logging(log_level: int) -> None:
    formatter = colorlog.ColoredFormatter(
        "%(cyan)s%(asctime)s%(reset)s %(log_color)s%(levelname)-8s%(reset)s %(light_purple)s%(name)s:%(reset)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "purple",
            "INFO": "blue",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
    )

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)

    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.addHandler(handler)


class ConsoleListener:
    """Logs playback events and ends the run when playback fails."""

    def __init__(self, session: PlayerSession, finished: asyncio.Event):
        self._session = session
        self._finished = finished

    def on_playback_state_changed(self, is_playing: bool) -> None:
        if is_playing:
            duration = self._session.controller.duration_ms
            logger.info(f"Playing ({format_time(duration)})")
        else:
            logger.info("Playback paused or finished")

    def on_error(self, message: str) -> None:
        logger.error(f"Playback stopped: {message}")
        self._finished.set()

    def on_track_changed(self, track: Track) -> None:
        favorite = " ♥" if self._session.is_favorite(track) else ""
        logger.info(f"Now playing: {track.formatted_title}{favorite}")


async def run_player(settings: SproutifySettings) -> int:
    """Play the configured catalog until a track fails or the process is interrupted."""
    session = create_session(settings, FfplayBackend(settings.ffplay_path))
    if session is None:
        return 1

    finished = asyncio.Event()
    session.set_listener(ConsoleListener(session, finished))
    try:
        session.play_current()
        await finished.wait()
    finally:
        session.close()
    return 1 if session.controller.last_error else 0


def run() -> None:
    """Entry point for the sproutify script."""
    settings = SproutifySettings.from_environment()
    setup_logging(settings.log_level)
    settings.validate(logger)

    logger.info("Starting sproutify player")
    try:
        exit_code = asyncio.run(run_player(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        exit_code = 0
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
