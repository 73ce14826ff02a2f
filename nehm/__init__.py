"""
Core modules for nehm track downloading and tagging.
"""

from nehm.batch import BatchProcessor
from nehm.config import ConfigStore, ProcessorSettings
from nehm.downloader import CurlDownloader, HTTPDownloader
from nehm.exceptions import (
    ArtworkError,
    BatchInterruptedError,
    ConfigError,
    ConfigNotFoundError,
    DownloadError,
    EmptyBatchError,
    NehmError,
    PlaylistError,
    TagError,
)
from nehm.metadata import ID3Tagger
from nehm.models import BatchReport, Track, TrackFailure, track_from_json
from nehm.playlist import ITunesPlaylistClient, PlexPlaylistClient
from nehm.track_processor import TrackProcessor
from nehm.tracklist import load_tracks

__all__ = [
    "ConfigStore",
    "ProcessorSettings",
    "Track",
    "TrackFailure",
    "BatchReport",
    "track_from_json",
    "CurlDownloader",
    "HTTPDownloader",
    "ID3Tagger",
    "ITunesPlaylistClient",
    "PlexPlaylistClient",
    "TrackProcessor",
    "load_tracks",
    "BatchProcessor",
    "NehmError",
    "ConfigError",
    "ConfigNotFoundError",
    "DownloadError",
    "ArtworkError",
    "TagError",
    "PlaylistError",
    "EmptyBatchError",
    "BatchInterruptedError",
]
