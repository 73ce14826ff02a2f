"""
Data models for nehm.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from nehm.utils import sanitize_filename


@dataclass(frozen=True)
class Track:
    """Descriptor of one remote audio item."""

    title: str
    artist: str
    year: int
    url: str
    artwork_url: Optional[str] = None

    @property
    def fullname(self) -> str:
        """Human-readable "artist - title" name."""
        return f"{self.artist} - {self.title}"

    @property
    def filename(self) -> str:
        """File name the track is saved under."""
        return sanitize_filename(self.fullname) + ".mp3"


@dataclass(frozen=True)
class TrackFailure:
    """A track that couldn't be processed cleanly."""

    fullname: str
    kind: str
    message: str

    def __str__(self) -> str:
        return f"{self.fullname}: {self.message}"


@dataclass
class BatchReport:
    """Outcome of one batch run."""

    processed: List[str] = field(default_factory=list)
    failures: List[TrackFailure] = field(default_factory=list)
    interrupted: bool = False

    @property
    def succeeded(self) -> int:
        return len(self.processed) - len(self.failures)


def _year_from(data: Dict[str, Any]) -> int:
    """Extract year from release_year or the created_at date."""
    release_year = data.get("release_year")
    if release_year:
        try:
            return int(release_year)
        except (TypeError, ValueError):
            pass
    created_at = str(data.get("created_at") or "")
    match = re.match(r"(\d{4})", created_at)
    return int(match.group(1)) if match else 0


def track_from_json(data: Dict[str, Any]) -> Track:
    """
    Convert SoundCloud track JSON to a Track.

    A title of the form "Artist - Title" is split into its parts, otherwise
    the uploader's username is used as the artist.

    Args:
        data: SoundCloud track API response

    Returns:
        Track object
    """
    user = data.get("user") or {}
    title = (data.get("title") or "").strip()
    artist = (user.get("username") or "").strip()
    if " - " in title:
        artist, title = (part.strip() for part in title.split(" - ", 1))

    artwork_url = data.get("artwork_url") or user.get("avatar_url")
    if artwork_url:
        # Ask for the biggest size available
        artwork_url = artwork_url.replace("large", "t500x500")

    return Track(
        title=title,
        artist=artist,
        year=_year_from(data),
        url=data.get("stream_url") or data.get("download_url") or "",
        artwork_url=artwork_url or None,
    )
