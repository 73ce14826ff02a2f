"""
Custom exceptions for nehm.
"""


class NehmError(Exception):
    """Base exception for all nehm errors."""


class ConfigError(NehmError):
    """Configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Config file doesn't exist."""


class DownloadError(NehmError):
    """Audio download failures."""


class ArtworkError(NehmError):
    """Artwork download failures."""


class TagError(NehmError):
    """Tag embedding errors."""


class PlaylistError(NehmError):
    """Playlist registration errors."""


class EmptyBatchError(NehmError):
    """Raised when there are no tracks to download."""


class BatchInterruptedError(NehmError):
    """
    Raised when a batch is stopped before all tracks were processed.

    The partial report is available as ``report``.
    """

    def __init__(self, report):
        super().__init__("download stopped early")
        self.report = report
