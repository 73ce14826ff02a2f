"""
Layered configuration store and settings model.

Values are resolved from three tiers, in this order:
override (explicit runtime sets), loaded (the config file) and defaults.
"""

import logging
from pathlib import Path
from typing import Dict, Literal, Optional

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from nehm.exceptions import ConfigError, ConfigNotFoundError
from nehm.utils import get_config_path

logger = logging.getLogger(__name__)


def default_values() -> Dict[str, str]:
    """Compiled-in fallback values."""
    return {
        "dlFolder": str(Path.home() / "Music"),
        "itunesPlaylist": "",
        "playlistBackend": "itunes",
        "downloader": "curl",
        "downloadTimeout": "",
        "logLevel": "INFO",
        "plexServer": "",
        "plexToken": "",
        "plexLibrary": "Music",
    }


class ConfigStore:
    """Key/value store with override, loaded and default tiers."""

    def __init__(
        self,
        path: Optional[Path] = None,
        defaults: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the store. Nothing is read from disk until load_file().

        Args:
            path: Config file path (default: get_config_path())
            defaults: Lowest-precedence values (default: default_values())
        """
        self.path = Path(path) if path is not None else get_config_path()
        self.override: Dict[str, str] = {}
        self.loaded: Dict[str, str] = {}
        self.defaults: Dict[str, str] = (
            dict(defaults) if defaults is not None else default_values()
        )

    def get(self, key: str) -> str:
        """
        Return the value from the first tier where key is set.

        Tiers are checked in the order override, loaded, defaults.
        Missing keys resolve to an empty string. Keys are case-sensitive.
        """
        if key in self.override:
            return self.override[key]
        if key in self.loaded:
            return self.loaded[key]
        return self.defaults.get(key, "")

    def set(self, key: str, value: str) -> None:
        """Set the value for key in the override tier."""
        self.override[key] = value

    def load_file(self) -> None:
        """
        Read the config file into the loaded tier, replacing its contents.

        Raises:
            ConfigNotFoundError: If the config file doesn't exist
            ConfigError: If the file can't be read or isn't a flat mapping
        """
        if not self.path.exists():
            raise ConfigNotFoundError(f"Config file doesn't exist: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"couldn't read the config file: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"couldn't parse the config file: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"couldn't parse the config file: expected a mapping, "
                f"got {type(data).__name__}"
            )

        values = {}
        for key, value in data.items():
            if isinstance(value, (dict, list)):
                raise ConfigError(
                    f"couldn't parse the config file: value of {key!r} is not a scalar"
                )
            values[str(key)] = "" if value is None else str(value)

        self.loaded = values
        logger.debug(f"Loaded {len(values)} config values from {self.path}")

    def save_file(self, values: Dict[str, str]) -> None:
        """
        Write values to the config file as a flat YAML mapping.

        Raises:
            ConfigError: If the file can't be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    {str(k): str(v) for k, v in values.items()},
                    f,
                    default_flow_style=False,
                    allow_unicode=True,
                )
        except OSError as e:
            raise ConfigError(f"couldn't write the config file: {e}") from e


class ProcessorSettings(BaseModel):
    """Typed view of the settings used by the tracks pipeline."""

    download_folder: Path
    playlist: str = ""
    playlist_backend: Literal["itunes", "plex"] = "itunes"
    downloader: Literal["curl", "http"] = "curl"
    download_timeout: Optional[float] = None
    log_level: str = "INFO"
    plex_server: str = ""
    plex_token: str = ""
    plex_library: str = "Music"

    @field_validator("download_timeout", mode="before")
    @classmethod
    def empty_timeout_is_none(cls, value):
        if value == "" or value is None:
            return None
        return value

    @field_validator("download_folder", mode="before")
    @classmethod
    def expand_folder(cls, value):
        if not value:
            raise ValueError("download folder is not set")
        return Path(value).expanduser()

    @classmethod
    def from_store(cls, store: ConfigStore) -> "ProcessorSettings":
        """
        Build settings from a ConfigStore.

        Raises:
            ConfigError: If a value is invalid
        """
        try:
            return cls(
                download_folder=store.get("dlFolder"),
                playlist=store.get("itunesPlaylist"),
                playlist_backend=store.get("playlistBackend") or "itunes",
                downloader=store.get("downloader") or "curl",
                download_timeout=store.get("downloadTimeout"),
                log_level=store.get("logLevel") or "INFO",
                plex_server=store.get("plexServer"),
                plex_token=store.get("plexToken"),
                plex_library=store.get("plexLibrary") or "Music",
            )
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
