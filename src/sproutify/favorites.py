"""Favorite tracks management."""

import logging
from typing import Iterable

from sproutify.track import Track

logger = logging.getLogger(__name__)


class FavoritesStore:
    """Holds the set of liked track identifiers for a session.

    This class provides a clean interface for querying and toggling favorites
    without exposing how identifiers are stored. Persisting the set is left to
    the caller, who can seed it with ``initial_ids`` and read it back via ``ids``.
    """

    def __init__(self, initial_ids: Iterable[str] = ()):
        """Initialize the store.

        Args:
            initial_ids: Track identifiers that start out as favorites.
        """
        self._favorite_ids: set[str] = set(initial_ids)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._favorite_ids)

    def __len__(self) -> int:
        return len(self._favorite_ids)

    def is_favorite(self, track: Track | None) -> bool:
        """Check if a track is a favorite.

        Args:
            track: The track to check. None is never a favorite.

        Returns:
            True if the track's identifier is in the favorite set.
        """
        return track is not None and track.id in self._favorite_ids

    def toggle_favorite(self, track: Track) -> bool:
        """Add or remove a track from favorites.

        Args:
            track: The track to toggle.

        Returns:
            True if the track is now a favorite, False if it was removed.
        """
        if track.id in self._favorite_ids:
            self._favorite_ids.remove(track.id)
            logger.debug(f"Removed {track.formatted_title} from favorites")
            return False

        self._favorite_ids.add(track.id)
        logger.debug(f"Added {track.formatted_title} to favorites")
        return True

    def favorite_tracks(self, tracks: Iterable[Track]) -> list[Track]:
        """Filter a track list down to favorites, preserving order."""
        return [track for track in tracks if self.is_favorite(track)]
