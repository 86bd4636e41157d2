"""Shared test fixtures and utilities."""

import asyncio
import logging
import random
from pathlib import Path

import pytest

from sproutify.config.settings import SproutifySettings
from sproutify.player.controller import PlaybackController
from sproutify.player.queue import QueueEngine
from sproutify.track import Track
from tests.mocks.mock_backend import MockAudioBackend
from tests.mocks.mock_listener import RecordingListener


@pytest.fixture
def settings() -> SproutifySettings:
    """SproutifySettings with defaults suitable for tests."""
    return SproutifySettings(
        catalog_file=Path("data/lyrics.csv"),
        queue_seed_size=10,
        default_volume=50,
        shuffle=False,
        ffplay_path="ffplay",
        log_level=logging.INFO,  # Default log level for tests
    )


@pytest.fixture
def mock_backend() -> MockAudioBackend:
    """Fresh MockAudioBackend instance (prepare completes on its own)."""
    return MockAudioBackend(auto_prepare=True)


@pytest.fixture
def mock_backend_manual() -> MockAudioBackend:
    """MockAudioBackend where the test decides when prepare() returns."""
    return MockAudioBackend(auto_prepare=False)


@pytest.fixture
def listener() -> RecordingListener:
    """Fresh RecordingListener instance."""
    return RecordingListener()


def make_track(
    track_id: str,
    title: str | None = None,
    artist: str = "TestArtist",
    audio_url: str | None = None,
    duration_ms: int | None = 180_000,
) -> Track:
    """Helper to create test Track instances."""
    return Track(
        id=track_id,
        title=title or f"Song {track_id}",
        artist=artist,
        album="TestAlbum",
        release_date="2024",
        cover_url=f"https://example.com/covers/{track_id}.jpg",
        lyrics="la la la",
        audio_url=f"https://example.com/audio/{track_id}.mp3"
        if audio_url is None
        else audio_url,
        duration_ms=duration_ms,
    )


def make_catalog(size: int) -> list[Track]:
    """Catalog of tracks t0..t{size-1}."""
    return [make_track(f"t{i}") for i in range(size)]


async def settle() -> None:
    """Let scheduled playback tasks run."""
    await asyncio.sleep(0.01)


@pytest.fixture
def sample_tracks() -> list[Track]:
    """Sample catalog for testing."""
    return make_catalog(20)


@pytest.fixture
def queue() -> QueueEngine:
    """Empty queue with a seeded random generator."""
    return QueueEngine(rng=random.Random(1234))


@pytest.fixture
def controller(queue, mock_backend, listener) -> PlaybackController:
    """Controller wired to the mock backend and recording listener."""
    controller = PlaybackController(queue, mock_backend)
    controller.set_listener(listener)
    return controller
