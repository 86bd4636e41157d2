"""QueueEngine for deciding what plays next."""

import logging
import random
from typing import Iterable

from sproutify.config import constants
from sproutify.track import Track

logger = logging.getLogger(__name__)


class QueueEngine:
    """Owns the play queue, the current-track pointer and the catalog fallback.

    The queue is a small, user-editable "up next" list. Once it runs out,
    playback continues from the full catalog, either sequentially through a
    separate catalog cursor or at random when shuffle is on.

    All methods are plain in-memory list operations meant to be called from the
    thread that owns the event loop; no locking is done. Invalid indices are
    ignored rather than reported.
    """

    def __init__(
        self,
        seed_size: int = constants.QUEUE_SEED_SIZE,
        rng: random.Random | None = None,
    ) -> None:
        self.seed_size = seed_size
        self._rng = rng or random.Random()
        self._queue: list[Track] = []
        self._base_list: list[Track] = []
        self._current_index = -1
        self._base_list_index = 0
        self._shuffle = False

    @property
    def queue(self) -> list[Track]:
        """Copy of the current queue."""
        return list(self._queue)

    @property
    def base_list(self) -> list[Track]:
        """Copy of the catalog backing the queue."""
        return list(self._base_list)

    @property
    def current_index(self) -> int:
        """Index of the current track in the queue, or -1 if there is none."""
        return self._current_index

    @property
    def base_list_index(self) -> int:
        """Catalog cursor used once the queue is exhausted."""
        return self._base_list_index

    def __len__(self) -> int:
        return len(self._queue)

    def has_queue(self) -> bool:
        return bool(self._queue)

    def set_base_list(self, tracks: Iterable[Track]) -> None:
        """Replace the catalog and re-seed the queue from its start.

        Any previous queue contents are discarded. The catalog cursor is moved
        past the seeded tracks, so falling back to the catalog picks up where the
        seed ended. base_list_index therefore reads seed_count % len(catalog)
        right after seeding, not 0, unless the whole catalog fit in the seed.

        Args:
            tracks: The full catalog, in order.
        """
        self._base_list = list(tracks)
        self._base_list_index = 0

        seed_count = min(max(self.seed_size, 0), len(self._base_list))
        self._queue = self._base_list[:seed_count]
        if self._base_list:
            self._base_list_index = seed_count % len(self._base_list)

        self._current_index = 0 if self._queue else -1
        logger.debug(
            f"Seeded queue with {seed_count} of {len(self._base_list)} catalog tracks"
        )

    def set_queue(self, tracks: Iterable[Track], start_index: int = 0) -> None:
        """Replace the queue contents without touching the catalog.

        Args:
            tracks: New queue contents.
            start_index: Index of the current track. Out of range values fall
                back to the first track.
        """
        self._queue = list(tracks)
        if 0 <= start_index < len(self._queue):
            self._current_index = start_index
        else:
            self._current_index = 0 if self._queue else -1

    def update_queue_for_new_track(self, track: Track) -> None:
        """Make an explicitly chosen track the current one.

        If the track is already queued the pointer moves to it. Otherwise it is
        inserted at the front. An empty queue is re-seeded from the catalog
        first.

        Args:
            track: The track the user asked to play.
        """
        if not self._queue:
            logger.debug("Queue is empty, re-seeding from the catalog")
            self.set_base_list(self._base_list)

        for index, queued in enumerate(self._queue):
            if queued == track:
                logger.debug(f"{track.formatted_title} found in queue at {index}")
                self._current_index = index
                return

        logger.debug(f"{track.formatted_title} not queued, inserting at the front")
        self._queue.insert(0, track)
        self._current_index = 0

    def add_to_queue(self, track: Track) -> None:
        self._queue.append(track)

    def add_tracks_to_queue(self, tracks: Iterable[Track]) -> None:
        self._queue.extend(tracks)

    def add_after_current(self, track: Track) -> None:
        """Insert a track right after the current one, or at the end if there is none."""
        self.add_tracks_after_current([track])

    def add_tracks_after_current(self, tracks: Iterable[Track]) -> None:
        if self._has_valid_current():
            insert_at = self._current_index + 1
            self._queue[insert_at:insert_at] = list(tracks)
        else:
            self._queue.extend(tracks)

    def remove_from_queue(self, position: int) -> None:
        """Remove the track at a queue position.

        Removing a track before the current one shifts the pointer back so it
        still designates the same track. Removing the current track itself
        leaves the pointer on whatever follows it.
        """
        if not 0 <= position < len(self._queue):
            logger.debug(
                f"Ignoring removal at {position}, queue has {len(self._queue)} tracks"
            )
            return

        del self._queue[position]
        if position < self._current_index:
            self._current_index -= 1

        # Keep the pointer in bounds when the last track was the current one
        if self._current_index >= len(self._queue):
            self._current_index = len(self._queue) - 1

    def move_track(self, from_position: int, to_position: int) -> None:
        """Move a track within the queue, keeping the pointer on the same track."""
        size = len(self._queue)
        if not (0 <= from_position < size and 0 <= to_position < size):
            logger.debug(
                f"Ignoring move {from_position} -> {to_position}, "
                f"queue has {size} tracks"
            )
            return

        track = self._queue.pop(from_position)
        self._queue.insert(to_position, track)

        current = self._current_index
        if from_position == current:
            self._current_index = to_position
        elif from_position < current <= to_position:
            self._current_index -= 1
        elif to_position <= current < from_position:
            self._current_index += 1

    def get_current_track(self) -> Track | None:
        if self._has_valid_current():
            return self._queue[self._current_index]
        return None

    def get_next_track(self) -> Track | None:
        """Return the track that would play next.

        The queue is left untouched, but falling back to the catalog in
        sequential mode advances the catalog cursor.

        Returns:
            The next queued track, else a catalog track, else None when both
            the queue and the catalog are empty.
        """
        next_index = self._current_index + 1
        if 0 <= next_index < len(self._queue):
            return self._queue[next_index]

        if not self._base_list:
            logger.debug("No next track: queue exhausted and catalog empty")
            return None

        if self._shuffle:
            track = self._rng.choice(self._base_list)
            logger.debug(f"Next track picked at random from catalog: {track.title}")
            return track

        track = self._base_list[self._base_list_index]
        logger.debug(
            f"Next track from catalog at {self._base_list_index}: {track.title}"
        )
        self._base_list_index = (self._base_list_index + 1) % len(self._base_list)
        return track

    def get_previous_track(self) -> Track | None:
        """Return the track that would play before the current one.

        Falling back to the catalog is only possible in sequential mode, and it
        moves the catalog cursor back by one.
        """
        previous_index = self._current_index - 1
        if 0 <= previous_index < len(self._queue):
            return self._queue[previous_index]

        if self._base_list and not self._shuffle:
            self._base_list_index = (self._base_list_index - 1) % len(self._base_list)
            return self._base_list[self._base_list_index]

        return None

    def move_to_next(self) -> None:
        """Advance the pointer to the next queued track.

        At the end of the queue the queue is cleared instead, leaving playback to
        the catalog fallback. Callers fetch the replacement track with
        get_next_track() before calling this.
        """
        if self._current_index + 1 < len(self._queue):
            self._current_index += 1
        elif self._queue:
            logger.debug(f"End of queue reached, clearing {len(self._queue)} tracks")
            self.clear_queue()

    def move_to_previous(self) -> None:
        if self._current_index - 1 >= 0:
            self._current_index -= 1

    def set_shuffle_mode(self, shuffle: bool) -> None:
        self._shuffle = shuffle
        logger.debug(f"Shuffle mode {'on' if shuffle else 'off'}")

    def is_shuffle_mode(self) -> bool:
        return self._shuffle

    def clear_queue(self) -> None:
        self._queue.clear()
        self._current_index = -1

    def _has_valid_current(self) -> bool:
        return 0 <= self._current_index < len(self._queue)
