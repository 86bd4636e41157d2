"""PlayerSession wiring the queue, the controller and favorites together."""

import logging
import random
from typing import Iterable

from sproutify.catalog import fill_missing_durations, load_catalog
from sproutify.config.settings import SproutifySettings
from sproutify.favorites import FavoritesStore
from sproutify.player.controller import PlaybackController
from sproutify.player.protocols import AudioBackend, PlaybackListener
from sproutify.player.queue import QueueEngine
from sproutify.track import Track

logger = logging.getLogger(__name__)


class PlayerSession:
    """Owns every playback component for one listening session.

    This is the command surface the presentation layer talks to. Components are
    built here rather than looked up globally, and start()/close() bracket their
    lifetime.
    """

    def __init__(
        self,
        settings: SproutifySettings,
        backend: AudioBackend,
        favorites: FavoritesStore | None = None,
        rng: random.Random | None = None,
    ):
        self.settings = settings
        self.queue = QueueEngine(seed_size=settings.queue_seed_size, rng=rng)
        self.controller = PlaybackController(
            self.queue, backend, volume=settings.default_volume
        )
        self.favorites = favorites if favorites is not None else FavoritesStore()
        self.queue.set_shuffle_mode(settings.shuffle)

    @property
    def catalog(self) -> list[Track]:
        return self.queue.base_list

    @property
    def current_track(self) -> Track | None:
        """Track bound to the controller, falling back to the queue's pointer."""
        return self.controller.current_track or self.queue.get_current_track()

    def start(self, catalog: Iterable[Track]) -> None:
        """Begin a session over a catalog. Discards any previous queue."""
        self.controller.reset()
        self.queue.set_base_list(catalog)
        logger.info(
            f"Session started with {len(self.catalog)} catalog tracks, "
            f"{len(self.queue)} queued"
        )

    def close(self) -> None:
        """End the session and release the audio backend."""
        self.controller.close()
        self.queue.clear_queue()
        logger.info("Session closed")

    def set_listener(self, listener: PlaybackListener | None) -> None:
        self.controller.set_listener(listener)

    # Playback commands

    def play(self, track: Track) -> None:
        """Play an explicitly chosen track, making it the queue's current one."""
        self.queue.update_queue_for_new_track(track)
        self.controller.play_track(track)

    def play_current(self) -> None:
        """Play whatever the queue currently points at."""
        track = self.queue.get_current_track()
        if track is None:
            logger.info("Nothing queued to play")
            return
        self.controller.play_track(track)

    def play_next(self) -> None:
        self.controller.play_next()

    def play_previous(self) -> None:
        self.controller.play_previous()

    def toggle_play_pause(self) -> None:
        self.controller.toggle_play_pause()

    def seek_to(self, position_ms: int) -> None:
        self.controller.seek_to(position_ms)

    def set_volume(self, volume: int) -> None:
        self.controller.set_volume(volume)

    def stop(self) -> None:
        self.controller.stop()

    # Queue commands

    def add_to_queue(self, tracks: Track | Iterable[Track]) -> None:
        """Append one track or several to the end of the queue."""
        if isinstance(tracks, Track):
            self.queue.add_to_queue(tracks)
        else:
            self.queue.add_tracks_to_queue(tracks)

    def add_after_current(self, tracks: Track | Iterable[Track]) -> None:
        """Queue one track or several right after the current one."""
        if isinstance(tracks, Track):
            self.queue.add_after_current(tracks)
        else:
            self.queue.add_tracks_after_current(tracks)

    def remove_from_queue(self, position: int) -> None:
        self.queue.remove_from_queue(position)

    def move_track(self, from_position: int, to_position: int) -> None:
        self.queue.move_track(from_position, to_position)

    def set_shuffle_mode(self, shuffle: bool) -> None:
        self.queue.set_shuffle_mode(shuffle)

    def is_shuffle_mode(self) -> bool:
        return self.queue.is_shuffle_mode()

    def clear_queue(self) -> None:
        self.queue.clear_queue()

    # Favorites

    def is_favorite(self, track: Track | None) -> bool:
        return self.favorites.is_favorite(track)

    def toggle_favorite(self, track: Track) -> bool:
        return self.favorites.toggle_favorite(track)

    def favorite_tracks(self) -> list[Track]:
        """Favorites among the catalog tracks, in catalog order."""
        return self.favorites.favorite_tracks(self.catalog)


def create_session(
    settings: SproutifySettings,
    backend: AudioBackend,
    favorites: FavoritesStore | None = None,
) -> PlayerSession | None:
    """Create and start a PlayerSession from the configured catalog file.

    Args:
        settings: Player settings.
        backend: Audio backend the controller will drive.
        favorites: Optional pre-loaded favorites.

    Returns:
        Started session, or None if the catalog is empty or unreadable.
    """
    catalog = fill_missing_durations(load_catalog(settings.catalog_file))
    if not catalog:
        logger.error(f"No tracks found in {settings.catalog_file}")
        return None

    session = PlayerSession(settings, backend, favorites)
    session.start(catalog)
    return session
