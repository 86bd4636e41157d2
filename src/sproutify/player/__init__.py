"""Player package: queue sequencing and playback control."""

from sproutify.player.controller import PlaybackController
from sproutify.player.errors import (
    InvalidSourceError,
    PlaybackError,
    PlaybackFailure,
    PrepareError,
)
from sproutify.player.ffplay import FfplayBackend
from sproutify.player.models import PlaybackSession, PlayerState
from sproutify.player.protocols import AudioBackend, PlaybackListener
from sproutify.player.queue import QueueEngine
from sproutify.player.session import PlayerSession, create_session

__all__ = [
    "AudioBackend",
    "FfplayBackend",
    "InvalidSourceError",
    "PlaybackController",
    "PlaybackError",
    "PlaybackFailure",
    "PlaybackListener",
    "PlaybackSession",
    "PlayerSession",
    "PlayerState",
    "PrepareError",
    "QueueEngine",
    "create_session",
]
