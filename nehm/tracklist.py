"""
Reading track lists from YAML or JSON files.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from nehm.exceptions import NehmError
from nehm.models import Track, track_from_json

logger = logging.getLogger(__name__)


def track_from_entry(entry: Dict[str, Any]) -> Track:
    """
    Convert one track list entry to a Track.

    Entries with "stream_url" or "user" are treated as SoundCloud JSON,
    anything else must have the Track fields.
    """
    if "stream_url" in entry or "user" in entry:
        return track_from_json(entry)

    missing = [key for key in ("title", "artist", "url") if not entry.get(key)]
    if missing:
        raise NehmError(f"track entry is missing {', '.join(missing)}: {entry}")
    return Track(
        title=str(entry["title"]),
        artist=str(entry["artist"]),
        year=int(entry.get("year") or 0),
        url=str(entry["url"]),
        artwork_url=entry.get("artwork_url") or None,
    )


def load_tracks(path: Path) -> List[Track]:
    """
    Load tracks from a YAML (or JSON) list of mappings.

    Raises:
        NehmError: If the file can't be read or an entry is invalid
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise NehmError(f"couldn't read track list {path}: {e}") from e
    except yaml.YAMLError as e:
        raise NehmError(f"couldn't parse track list {path}: {e}") from e

    if data is None:
        return []
    if isinstance(data, dict) and "collection" in data:
        data = data["collection"]
    if not isinstance(data, list):
        raise NehmError(f"track list {path} must be a list")

    tracks = []
    for entry in data:
        if not isinstance(entry, dict):
            raise NehmError(f"invalid track entry: {entry!r}")
        try:
            tracks.append(track_from_entry(entry))
        except (AttributeError, TypeError, ValueError) as e:
            raise NehmError(f"invalid track entry {entry}: {e}") from e

    logger.debug(f"Loaded {len(tracks)} tracks from {path}")
    return tracks
