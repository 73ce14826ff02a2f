"""
Shared pytest fixtures for nehm tests.
"""
import tempfile
from pathlib import Path

import pytest

from nehm.config import ConfigStore
from nehm.exceptions import DownloadError
from nehm.models import Track
from nehm.track_processor import TrackProcessor


SAMPLE_SOUNDCLOUD_TRACK = {
    "id": 13158665,
    "title": "Flume - Never Be Like You (feat. Kai)",
    "created_at": "2016/01/21 18:00:00 +0000",
    "release_year": None,
    "stream_url": "https://api.soundcloud.com/tracks/13158665/stream",
    "artwork_url": "https://i1.sndcdn.com/artworks-000142383487-large.jpg",
    "user": {
        "username": "flumemusic",
        "avatar_url": "https://i1.sndcdn.com/avatars-000135096101-large.jpg",
    },
}

ARTWORK_BYTES = b"\xff\xd8\xff\xe0fake jpeg"
AUDIO_BYTES = b"fake mp3 content" * 64


class FakeDownloader:
    """Writes canned bytes to the destination and records every call."""

    def __init__(self):
        self.calls = []
        self.failing_urls = set()

    def download(self, url, path):
        self.calls.append((url, Path(path)))
        if url in self.failing_urls:
            raise DownloadError(f"curl exited with status 22 for {url}")
        data = ARTWORK_BYTES if "/artwork/" in url else AUDIO_BYTES
        Path(path).write_bytes(data)


class FakeTagger:
    """Records tagging calls, including the artwork bytes seen at call time."""

    def __init__(self):
        self.calls = []
        self.error = None

    def tag(self, path, track, artwork_path=None):
        artwork = None
        if artwork_path is not None:
            artwork = Path(artwork_path).read_bytes()
        self.calls.append(
            {
                "path": Path(path),
                "track": track,
                "artwork_path": artwork_path,
                "artwork": artwork,
            }
        )
        if self.error is not None:
            raise self.error


class FakePlaylistClient:
    """Records playlist registrations."""

    def __init__(self):
        self.calls = []
        self.error = None

    def add_track(self, path, playlist):
        self.calls.append((Path(path), playlist))
        if self.error is not None:
            raise self.error


@pytest.fixture
def tmp_test_dir():
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_track():
    """Create sample Track object."""
    return Track(
        title="Never Be Like You",
        artist="Flume",
        year=2016,
        url="https://example.com/audio/never-be-like-you",
        artwork_url="https://example.com/artwork/never-be-like-you.jpg",
    )


@pytest.fixture
def other_track():
    """Create a second Track object."""
    return Track(
        title="Say It",
        artist="Flume",
        year=2016,
        url="https://example.com/audio/say-it",
        artwork_url="https://example.com/artwork/say-it.jpg",
    )


@pytest.fixture
def sample_soundcloud_track():
    """SoundCloud track JSON (copy, safe to mutate)."""
    return dict(SAMPLE_SOUNDCLOUD_TRACK, user=dict(SAMPLE_SOUNDCLOUD_TRACK["user"]))


@pytest.fixture
def fake_downloader():
    return FakeDownloader()


@pytest.fixture
def fake_tagger():
    return FakeTagger()


@pytest.fixture
def fake_playlist_client():
    return FakePlaylistClient()


@pytest.fixture
def download_folder(tmp_test_dir):
    return tmp_test_dir / "downloads"


@pytest.fixture
def track_processor(download_folder, fake_downloader, fake_tagger, fake_playlist_client):
    """TrackProcessor wired to in-memory fakes, with a playlist configured."""
    return TrackProcessor(
        download_folder=download_folder,
        downloader=fake_downloader,
        tagger=fake_tagger,
        playlist_client=fake_playlist_client,
        playlist="nehm",
    )


@pytest.fixture
def config_store(tmp_test_dir):
    """ConfigStore pointing at a config file inside the temp dir."""
    return ConfigStore(
        path=tmp_test_dir / ".nehmconfig",
        defaults={"dlFolder": "/default/music", "itunesPlaylist": "", "logLevel": "INFO"},
    )


@pytest.fixture
def audio_bytes():
    """Bytes FakeDownloader writes for audio URLs."""
    return AUDIO_BYTES


@pytest.fixture
def artwork_bytes():
    """Bytes FakeDownloader writes for artwork URLs."""
    return ARTWORK_BYTES
