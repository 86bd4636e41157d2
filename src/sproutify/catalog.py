"""Catalog parsing - turns the remote lyrics listing into Track records."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable
from urllib.parse import urlparse

from mutagen import File as MutagenFile
from mutagen import MutagenError

from sproutify.config import constants
from sproutify.track import Track

logger = logging.getLogger(__name__)


def parse_catalog(lines: Iterable[str]) -> list[Track]:
    """Parse catalog lines into tracks.

    The first line is a header and is always skipped. Each following line holds
    ``title#album#artist#date#cover#lyrics#mp3#duration``. When the header's
    first field is ``id``, every line carries an extra leading id column.
    Fields are read by position; anything after the last expected field is
    ignored. Lines with too few fields are skipped.

    Args:
        lines: Raw catalog lines, with or without trailing newlines.

    Returns:
        Tracks in catalog order.
    """
    tracks: list[Track] = []
    has_id_column = False

    for line_number, line in enumerate(lines):
        line = line.rstrip("\r\n")
        if line_number == 0:
            header = line.split(constants.CATALOG_FIELD_SEPARATOR)
            has_id_column = header[0].strip().lower() == constants.CATALOG_ID_COLUMN
            continue

        if not line.strip():
            continue

        # Keep empty fields, a blank cover or duration is still a valid entry
        parts = line.split(constants.CATALOG_FIELD_SEPARATOR)
        expected = constants.CATALOG_MIN_FIELDS + (1 if has_id_column else 0)
        if len(parts) < expected:
            logger.debug(
                f"Skipping catalog line {line_number + 1}: "
                f"expected {expected} fields, got {len(parts)}"
            )
            continue

        explicit_id = None
        if has_id_column:
            explicit_id, parts = parts[0], parts[1:]

        title, album, artist, date, cover, lyrics, audio_url, duration = parts[
            : constants.CATALOG_MIN_FIELDS
        ]
        tracks.append(
            Track(
                id=track_id_for(title, artist, audio_url, explicit_id),
                title=sanitize_tag(title),
                artist=sanitize_tag(artist),
                album=sanitize_tag(album),
                release_date=date.strip(),
                cover_url=cover.strip(),
                lyrics=lyrics,
                audio_url=audio_url.strip(),
                duration_ms=parse_duration(duration),
            )
        )

    return tracks


def load_catalog(path: Path) -> list[Track]:
    """Read and parse a catalog file.

    I/O failures degrade to an empty catalog rather than propagating.

    Args:
        path: Path of the catalog file on disk.

    Returns:
        Parsed tracks, or an empty list if the file could not be read.
    """
    try:
        with open(path, encoding=constants.CATALOG_ENCODING) as f:
            tracks = parse_catalog(f)
    except OSError as e:
        logger.error(f"Could not read catalog from {path}: {e}")
        return []
    except UnicodeDecodeError as e:
        logger.error(f"Catalog {path} is not valid {constants.CATALOG_ENCODING}: {e}")
        return []

    logger.info(f"Loaded {len(tracks)} tracks from {path}")
    return tracks


def track_id_for(
    title: str, artist: str, audio_url: str, explicit_id: str | None = None
) -> str:
    """Pick the stable identifier for a catalog entry.

    Preference order: an explicit id column, the audio URL, then "artist - title".
    """
    if explicit_id and explicit_id.strip():
        return explicit_id.strip()
    if audio_url.strip():
        return audio_url.strip()
    return f"{artist.strip()} - {title.strip()}"


def parse_duration(value: str) -> int | None:
    """Parse a catalog duration into milliseconds.

    Accepts plain seconds ("225"), "M:SS" and "H:MM:SS". Returns None for blank
    or unparseable values.
    """
    value = value.strip()
    if not value:
        return None

    try:
        parts = [float(part) for part in value.split(":")]
    except ValueError:
        logger.debug(f"Unparseable duration {value!r}")
        return None

    if len(parts) > 3 or any(part < 0 for part in parts):
        logger.debug(f"Unparseable duration {value!r}")
        return None

    seconds = 0.0
    for part in parts:
        seconds = seconds * 60 + part
    return int(seconds * 1000)


def sanitize_tag(tag_value: str) -> str:
    """Remove newlines and surrounding whitespace from a display field."""
    return "".join(tag_value.splitlines()).strip()


def is_local_source(source: str) -> bool:
    """Whether an audio reference points at the local filesystem."""
    scheme = urlparse(source).scheme
    # Single letters are Windows drive names, not URL schemes
    return scheme in ("", "file") or len(scheme) == 1


def local_path(source: str) -> Path:
    parsed = urlparse(source)
    if parsed.scheme == "file":
        return Path(parsed.path)
    return Path(source)


def probe_duration_ms(filename: Path) -> int | None:
    """Get the length of a local audio file in milliseconds."""
    try:
        audio = MutagenFile(filename)
        if audio is not None and audio.info is not None:
            return int(audio.info.length * 1000)
    except MutagenError as e:
        logger.error(f"Error reading length of {filename}: {e}")
    except OSError as e:
        logger.error(f"Could not open {filename}: {e}")
    return None


def fill_missing_durations(tracks: Iterable[Track]) -> list[Track]:
    """Probe local files for tracks whose catalog entry has no duration.

    Remote sources are left untouched; they are only measured once a backend
    prepares them.
    """
    result = []
    for track in tracks:
        if (
            track.duration_ms is None
            and track.has_source
            and is_local_source(track.audio_url)
        ):
            duration_ms = probe_duration_ms(local_path(track.audio_url))
            if duration_ms is not None:
                track = replace(track, duration_ms=duration_ms)
        result.append(track)
    return result


# format an amount of milliseconds into M:SS or H:MM:SS
def format_time(milliseconds: int) -> str:
    seconds = max(0, milliseconds) // 1000
    int_seconds = seconds % 60
    int_minutes = (seconds // 60) % 60
    int_hours = seconds // 3600

    if int_hours:
        return f"{int_hours}:{int_minutes:02d}:{int_seconds:02d}"
    return f"{int_minutes}:{int_seconds:02d}"
