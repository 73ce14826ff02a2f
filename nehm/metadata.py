"""
Metadata embedding using mutagen.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol

from mutagen import MutagenError
from mutagen.id3 import APIC, ID3, TIT2, TPE1, TYER, PictureType

from nehm.exceptions import TagError
from nehm.models import Track

logger = logging.getLogger(__name__)


class Tagger(Protocol):
    """Capability to write track metadata into an audio file."""

    def tag(self, path: Path, track: Track, artwork_path: Optional[Path] = None) -> None:
        ...


class ID3Tagger:
    """Writes ID3v2.3 tags into MP3 files."""

    ARTWORK_MIME = "image/jpeg"

    def tag(self, path: Path, track: Track, artwork_path: Optional[Path] = None) -> None:
        """
        Write artist, title, year and optional front cover into path.

        Existing tags are not parsed; the file gets a fresh tag. A failure to
        read the artwork doesn't prevent the other frames from being saved,
        but is still raised afterwards.

        Args:
            path: Audio file
            track: Track metadata
            artwork_path: Image file to embed as front cover

        Raises:
            TagError: If the artwork can't be read or the tag can't be saved
        """
        if not path.exists():
            raise TagError(f"File not found: {path}")

        tags = ID3()
        tags.add(TPE1(encoding=3, text=track.artist))
        tags.add(TIT2(encoding=3, text=track.title))
        if track.year:
            tags.add(TYER(encoding=3, text=str(track.year)))

        error = None
        if artwork_path is not None:
            try:
                artwork = artwork_path.read_bytes()
            except OSError as e:
                error = TagError(f"couldn't read artwork file: {e}")
                artwork = b""
            if artwork:
                tags.add(
                    APIC(
                        encoding=3,
                        mime=self.ARTWORK_MIME,
                        type=PictureType.COVER_FRONT,
                        desc="Cover",
                        data=artwork,
                    )
                )
            else:
                logger.debug(f"No artwork bytes for {track.fullname}")

        try:
            tags.save(str(path), v2_version=3)
        except (MutagenError, OSError) as e:
            raise TagError(f"couldn't save tag: {e}") from e

        if error is not None:
            raise error
