"""
Playlist registration backends.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional, Protocol

from plexapi.exceptions import PlexApiException
from plexapi.server import PlexServer

from nehm.exceptions import PlaylistError

logger = logging.getLogger(__name__)


class PlaylistClient(Protocol):
    """Capability to add an audio file to a named playlist."""

    def add_track(self, path: Path, playlist: str) -> None:
        ...


def _applescript_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class ITunesPlaylistClient:
    """Adds tracks to an iTunes (or Music.app) playlist through osascript."""

    def __init__(self, application: str = "iTunes"):
        self.application = application

    def build_script(self, path: Path, playlist: str) -> str:
        return (
            f"tell application {_applescript_string(self.application)} to add "
            f"POSIX file {_applescript_string(str(path))} "
            f"to playlist {_applescript_string(playlist)}"
        )

    def add_track(self, path: Path, playlist: str) -> None:
        """
        Raises:
            PlaylistError: If osascript can't be run or reports an error
        """
        script = self.build_script(path, playlist)
        try:
            subprocess.run(
                ["osascript", "-e", script],
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as e:
            message = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise PlaylistError(f"osascript failed: {message}") from e
        except OSError as e:
            raise PlaylistError(f"couldn't run osascript: {e}") from e


class PlexPlaylistClient:
    """
    Adds tracks to a Plex playlist.

    The library section is refreshed first, then the track whose media file
    matches the downloaded path is added to the playlist. The playlist is
    created if it doesn't exist yet.
    """

    def __init__(
        self,
        baseurl: str,
        token: str,
        library: str = "Music",
        server: Optional[PlexServer] = None,
    ):
        self.baseurl = baseurl
        self.token = token
        self.library = library
        self._server = server

    @property
    def server(self) -> PlexServer:
        if self._server is None:
            if not self.baseurl:
                raise PlaylistError("Plex server URL is not configured")
            self._server = PlexServer(self.baseurl, token=self.token)
        return self._server

    def _find_track(self, section, path: Path):
        wanted = os.path.normpath(str(path))
        for track in section.searchTracks():
            for media in getattr(track, "media", []):
                for part in media.parts:
                    if os.path.normpath(part.file) == wanted:
                        return track
        return None

    def add_track(self, path: Path, playlist: str) -> None:
        """
        Raises:
            PlaylistError: If Plex can't be reached or the track isn't in the library
        """
        try:
            section = self.server.library.section(self.library)
            section.update(path=str(path.parent))

            track = self._find_track(section, path)
            if track is None:
                raise PlaylistError(f"track not found in Plex: {path}")

            existing = next(
                (pl for pl in self.server.playlists() if pl.title == playlist), None
            )
            if existing is None:
                logger.debug(f"Creating Plex playlist {playlist!r}")
                self.server.createPlaylist(playlist, items=[track])
                return

            existing_ids = {item.ratingKey for item in existing.items()}
            if track.ratingKey not in existing_ids:
                existing.addItems([track])
        except PlexApiException as e:
            raise PlaylistError(f"Plex request failed: {e}") from e
        except OSError as e:
            raise PlaylistError(f"couldn't reach Plex: {e}") from e
