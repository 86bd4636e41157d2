"""Data models for playback sessions."""

import asyncio
from dataclasses import dataclass, field
from enum import Enum, auto

from sproutify.track import Track


class PlayerState(Enum):
    """Represents the current phase of the playback controller."""

    IDLE = auto()  # No session bound
    PREPARING = auto()  # Backend is opening the source
    READY = auto()  # Prepared, waiting for a start request
    PLAYING = auto()  # Audio is playing
    PAUSED = auto()  # Prepared and paused, position retained
    COMPLETED = auto()  # Reached the end of the media
    ERROR = auto()  # Preparation or playback failed


# States in which the backend holds a prepared source
PREPARED_STATES = frozenset({PlayerState.READY, PlayerState.PLAYING, PlayerState.PAUSED})


@dataclass
class PlaybackSession:
    """Mutable state of the one live playback session, bound to a single track."""

    track: Track
    generation: int
    autoplay: bool = True
    prepared: bool = False
    duration_ms: int = 0
    task: asyncio.Task[None] | None = None
    start_requested: asyncio.Event = field(default_factory=asyncio.Event)
