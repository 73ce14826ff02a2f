"""
Single-track pipeline: download audio, download artwork, tag, add to playlist.
"""

import logging
import tempfile
from contextlib import ExitStack
from pathlib import Path
from typing import Optional

from nehm.config import ProcessorSettings
from nehm.downloader import CurlDownloader, Downloader, HTTPDownloader
from nehm.exceptions import (
    ArtworkError,
    DownloadError,
    NehmError,
    PlaylistError,
    TagError,
)
from nehm.metadata import ID3Tagger, Tagger
from nehm.models import Track
from nehm.playlist import ITunesPlaylistClient, PlaylistClient, PlexPlaylistClient

logger = logging.getLogger(__name__)


class TrackProcessor:
    """
    Downloads and tags one track at a time.

    Failing to download the audio is fatal for the track. Every later step
    is best-effort: any exception it raises is wrapped in the step's error
    type, logged and remembered. The remaining steps still run and the most
    recent failure is raised at the end.
    """

    def __init__(
        self,
        download_folder: Path,
        downloader: Downloader,
        tagger: Tagger,
        playlist_client: Optional[PlaylistClient] = None,
        playlist: str = "",
    ):
        """
        Args:
            download_folder: Folder tracks are saved to
            downloader: Fetches audio and artwork
            tagger: Writes metadata into the audio file
            playlist_client: Registers files with a playlist manager
            playlist: Playlist name; empty disables registration
        """
        self.download_folder = Path(download_folder)
        self.downloader = downloader
        self.tagger = tagger
        self.playlist_client = playlist_client
        self.playlist = playlist

    @classmethod
    def from_settings(cls, settings: ProcessorSettings) -> "TrackProcessor":
        """Build a processor with the production backends chosen in settings."""
        if settings.downloader == "http":
            downloader = HTTPDownloader(timeout=settings.download_timeout)
        else:
            downloader = CurlDownloader(timeout=settings.download_timeout)

        playlist_client = None
        if settings.playlist:
            if settings.playlist_backend == "plex":
                playlist_client = PlexPlaylistClient(
                    settings.plex_server,
                    settings.plex_token,
                    library=settings.plex_library,
                )
            else:
                playlist_client = ITunesPlaylistClient()

        return cls(
            download_folder=settings.download_folder,
            downloader=downloader,
            tagger=ID3Tagger(),
            playlist_client=playlist_client,
            playlist=settings.playlist,
        )

    def track_path(self, track: Track) -> Path:
        return self.download_folder / track.filename

    def process(self, track: Track) -> None:
        """
        Run the whole pipeline for one track.

        Raises:
            DownloadError: If the audio couldn't be downloaded
            ArtworkError, TagError, PlaylistError: The last best-effort failure
        """
        logger.info(f"Downloading {track.fullname}")
        track_path = self.track_path(track)
        self._download_track(track, track_path)

        error: Optional[NehmError] = None

        with ExitStack() as stack:
            artwork_path = None
            if track.artwork_url:
                try:
                    artwork_path = self._download_artwork(track, stack)
                except ArtworkError as e:
                    logger.warning(f"{track.fullname}: {e}")
                    error = e

            try:
                self.tagger.tag(track_path, track, artwork_path)
            except Exception as e:
                error = TagError(f"there was an error while tagging track: {e}")
                error.__cause__ = e
                logger.warning(f"{track.fullname}: {error}")

            if self.playlist and self.playlist_client is not None:
                logger.info(f"Adding to playlist {self.playlist!r}")
                try:
                    self.playlist_client.add_track(track_path, self.playlist)
                except Exception as e:
                    error = PlaylistError(f"couldn't add track to playlist: {e}")
                    error.__cause__ = e
                    logger.warning(f"{track.fullname}: {error}")

        if error is not None:
            raise error

    def _download_track(self, track: Track, track_path: Path) -> None:
        try:
            track_path.parent.mkdir(parents=True, exist_ok=True)
            track_path.write_bytes(b"")
        except OSError as e:
            raise DownloadError(f"couldn't create track file: {e}") from e

        try:
            self.downloader.download(track.url, track_path)
        except (NehmError, OSError) as e:
            # Don't leave a half-written file behind
            track_path.unlink(missing_ok=True)
            raise DownloadError(f"couldn't download track: {e}") from e

    def _download_artwork(self, track: Track, stack: ExitStack) -> Path:
        """
        Download artwork into a temporary file owned by stack.

        The file is closed and removed when stack exits.
        """
        logger.info("Downloading artwork")
        try:
            artwork_file = stack.enter_context(
                tempfile.NamedTemporaryFile(prefix="nehm", suffix=".jpg")
            )
        except OSError as e:
            raise ArtworkError(f"couldn't create artwork file: {e}") from e

        artwork_path = Path(artwork_file.name)
        try:
            self.downloader.download(track.artwork_url, artwork_path)
        except Exception as e:
            raise ArtworkError(f"couldn't download artwork file: {e}") from e
        return artwork_path
