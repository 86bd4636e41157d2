"""Tests for catalog parsing and duration helpers."""

from sproutify.catalog import (
    fill_missing_durations,
    format_time,
    is_local_source,
    load_catalog,
    parse_catalog,
    parse_duration,
    probe_duration_ms,
    track_id_for,
)
from tests.conftest import make_track

HEADER = "title#album#artist#date#cover#contentlines#mp3#duration"


def catalog_line(
    title="Song",
    album="Album",
    artist="Artist",
    date="2020",
    cover="https://example.com/c.jpg",
    lyrics="words",
    mp3="https://example.com/song.mp3",
    duration="3:45",
) -> str:
    return "#".join([title, album, artist, date, cover, lyrics, mp3, duration])


class TestParseCatalog:
    """Tests for parse_catalog()."""

    def test_parses_entries(self):
        """Each line after the header becomes a track."""
        tracks = parse_catalog(
            [HEADER, catalog_line(), catalog_line(title="Other", mp3="b.mp3")]
        )

        assert len(tracks) == 2
        first = tracks[0]
        assert first.title == "Song"
        assert first.album == "Album"
        assert first.artist == "Artist"
        assert first.release_date == "2020"
        assert first.cover_url == "https://example.com/c.jpg"
        assert first.lyrics == "words"
        assert first.audio_url == "https://example.com/song.mp3"
        assert first.duration_ms == 225_000

    def test_header_is_always_skipped(self):
        """The first line is dropped even if it looks like data."""
        tracks = parse_catalog([catalog_line(title="Header"), catalog_line()])

        assert [t.title for t in tracks] == ["Song"]

    def test_short_and_blank_lines_are_skipped(self):
        """Lines with fewer than eight fields are ignored."""
        tracks = parse_catalog([HEADER, "", "a#b#c", catalog_line(), "   \n"])

        assert len(tracks) == 1

    def test_trailing_newlines_are_stripped(self):
        """Lines read from a file keep their newline; it must not leak into fields."""
        tracks = parse_catalog([HEADER + "\n", catalog_line(duration="") + "\r\n"])

        assert tracks[0].duration_ms is None
        assert tracks[0].audio_url == "https://example.com/song.mp3"

    def test_blank_fields_are_kept(self):
        """Empty cover or duration still yields a track."""
        tracks = parse_catalog([HEADER, catalog_line(cover="", duration="")])

        assert tracks[0].cover_url == ""
        assert tracks[0].duration_ms is None

    def test_blank_audio_url_still_parsed(self):
        """A track without audio is kept and reports no source."""
        tracks = parse_catalog([HEADER, catalog_line(mp3="")])

        assert tracks[0].has_source is False
        assert tracks[0].id == "Artist - Song"

    def test_leading_id_column(self):
        """An id header makes the first column the track id."""
        tracks = parse_catalog(["id#" + HEADER, "song-42#" + catalog_line()])

        assert tracks[0].id == "song-42"
        assert tracks[0].title == "Song"
        assert tracks[0].duration_ms == 225_000

    def test_id_header_requires_the_extra_column(self):
        """With an id header, lines missing the id column are skipped."""
        tracks = parse_catalog(["id#" + HEADER, catalog_line()])

        assert tracks == []

    def test_separator_in_lyrics_keeps_leading_fields(self):
        """A stray separator in the lyrics does not shift title, artist or date."""
        tracks = parse_catalog(
            [
                HEADER,
                "Song#Album#Artist#2020#cover.jpg#la la # la#http://x/a.mp3#3:00",
            ]
        )

        track = tracks[0]
        assert track.title == "Song"
        assert track.album == "Album"
        assert track.artist == "Artist"
        assert track.release_date == "2020"
        assert track.id != "Song"

    def test_trailing_separator_is_ignored(self):
        """Extra trailing columns are ignored without an id header."""
        tracks = parse_catalog([HEADER, catalog_line() + "#"])

        track = tracks[0]
        assert track.title == "Song"
        assert track.audio_url == "https://example.com/song.mp3"
        assert track.id == "https://example.com/song.mp3"
        assert track.duration_ms == 225_000

    def test_display_fields_are_sanitized(self):
        """Surrounding whitespace is removed from titles."""
        tracks = parse_catalog([HEADER, catalog_line(title="  Spaced  ")])

        assert tracks[0].title == "Spaced"


class TestTrackIds:
    """Tests for track_id_for()."""

    def test_explicit_id_wins(self):
        assert track_id_for("T", "A", "u.mp3", explicit_id=" id1 ") == "id1"

    def test_audio_url_is_default(self):
        assert track_id_for("T", "A", "u.mp3") == "u.mp3"

    def test_falls_back_to_artist_and_title(self):
        assert track_id_for("T", "A", " ") == "A - T"

    def test_same_url_means_same_track(self):
        """Two catalog entries with one audio URL compare equal."""
        tracks = parse_catalog(
            [HEADER, catalog_line(title="One"), catalog_line(title="Two")]
        )

        assert tracks[0] == tracks[1]


class TestLoadCatalog:
    """Tests for load_catalog()."""

    def test_reads_file(self, tmp_path):
        """A catalog file on disk is parsed."""
        path = tmp_path / "lyrics.csv"
        path.write_text(
            "\n".join([HEADER, catalog_line(), catalog_line(mp3="b.mp3")]) + "\n",
            encoding="utf-8",
        )

        tracks = load_catalog(path)

        assert len(tracks) == 2

    def test_missing_file_gives_empty_catalog(self, tmp_path, caplog):
        """An unreadable file is logged and treated as empty."""
        tracks = load_catalog(tmp_path / "missing.csv")

        assert tracks == []
        assert "Could not read catalog" in caplog.text

    def test_invalid_encoding_gives_empty_catalog(self, tmp_path):
        """Non UTF-8 content is treated as empty."""
        path = tmp_path / "lyrics.csv"
        path.write_bytes(b"header\n\xff\xfe\xfa#bad\n")

        assert load_catalog(path) == []


class TestDurations:
    """Tests for duration parsing, probing and formatting."""

    def test_parse_duration_formats(self):
        """Seconds, M:SS and H:MM:SS are accepted."""
        assert parse_duration("225") == 225_000
        assert parse_duration("3:45") == 225_000
        assert parse_duration("1:02:03") == 3_723_000
        assert parse_duration(" 4:00 ") == 240_000

    def test_parse_duration_rejects_garbage(self):
        """Blank or malformed values give None."""
        assert parse_duration("") is None
        assert parse_duration("abc") is None
        assert parse_duration("-5") is None
        assert parse_duration("1:2:3:4") is None

    def test_format_time(self):
        assert format_time(0) == "0:00"
        assert format_time(225_000) == "3:45"
        assert format_time(3_723_000) == "1:02:03"
        assert format_time(-10) == "0:00"

    def test_probe_unreadable_file(self, tmp_path):
        """Files mutagen cannot read have no duration."""
        path = tmp_path / "not_audio.mp3"
        path.write_text("definitely not audio")

        assert probe_duration_ms(path) is None
        assert probe_duration_ms(tmp_path / "missing.mp3") is None

    def test_fill_missing_durations_skips_remote(self):
        """Remote tracks are not probed and keep their value."""
        remote = make_track("r", duration_ms=None)
        known = make_track("k", duration_ms=1000)

        assert fill_missing_durations([remote, known]) == [remote, known]
        assert fill_missing_durations([remote])[0].duration_ms is None

    def test_fill_missing_durations_keeps_unprobeable_local(self, tmp_path):
        """Local files that cannot be measured stay without a duration."""
        path = tmp_path / "broken.mp3"
        path.write_text("junk")
        track = make_track("l", audio_url=str(path), duration_ms=None)

        assert fill_missing_durations([track])[0].duration_ms is None

    def test_is_local_source(self):
        assert is_local_source("/music/a.mp3")
        assert is_local_source("file:///music/a.mp3")
        assert not is_local_source("https://example.com/a.mp3")


class TestTrack:
    """Tests for Track identity and display helpers."""

    def test_equality_by_id(self):
        """Tracks compare and hash by id only."""
        a = make_track("x", title="One")
        b = make_track("x", title="Two", artist="Else")

        assert a == b
        assert len({a, b}) == 1
        assert a != make_track("y")

    def test_formatted_title(self):
        assert make_track("x", title="Song", artist="Band").formatted_title == (
            "Band - Song"
        )
        assert make_track("x", title="Song", artist="").formatted_title == "Song"
