"""Track data model - pure data representation of a catalog entry."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Track:
    """Pure data representation of a track, independent of any playback backend.

    Two tracks are equal (and hash the same) when their ``id`` matches. Every
    other field is descriptive and takes no part in comparisons.
    """

    id: str
    title: str = field(compare=False)
    artist: str = field(default="", compare=False)
    album: str = field(default="", compare=False)
    release_date: str = field(default="", compare=False)
    cover_url: str = field(default="", compare=False)
    lyrics: str = field(default="", compare=False, repr=False)
    audio_url: str = field(default="", compare=False)
    duration_ms: int | None = field(default=None, compare=False)

    @property
    def has_source(self) -> bool:
        """Whether the track carries a usable audio reference."""
        return bool(self.audio_url.strip())

    @property
    def formatted_title(self) -> str:
        if not self.artist:
            return self.title
        return f"{self.artist} - {self.title}"
