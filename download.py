#!/usr/bin/env python3
"""
Download tracks, tag them and add them to a playlist.

USAGE:
    python3 download.py TRACKS [-f FOLDER] [-p PLAYLIST]

SYNOPSIS:
    Reads a YAML or JSON list of tracks, downloads each track with its
    artwork into the download folder, writes ID3 tags and optionally adds
    the file to a playlist. Settings come from ~/.nehmconfig; command line
    options take precedence.

COMMAND LINE ARGUMENT:
    TRACKS        YAML/JSON file with the tracks to download
"""

import argparse
import logging
import signal
import sys
from pathlib import Path

from nehm.batch import BatchProcessor
from nehm.config import ConfigStore, ProcessorSettings
from nehm.exceptions import (
    BatchInterruptedError,
    ConfigError,
    ConfigNotFoundError,
    EmptyBatchError,
    NehmError,
)
from nehm.models import BatchReport
from nehm.track_processor import TrackProcessor
from nehm.tracklist import load_tracks
from nehm.utils import LOG_DATE_FORMAT, LOG_FORMAT, setup_logging

# Configure logging
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="download.py",
        description="Download, tag and add tracks to a playlist.",
    )
    parser.add_argument("tracks", type=str, help="YAML/JSON file with tracks.")
    parser.add_argument("-f", "--folder", help="Download folder.")
    parser.add_argument("-p", "--playlist", help="Playlist to add tracks to.")
    parser.add_argument(
        "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)."
    )
    return parser.parse_args(argv)


def build_store(args: argparse.Namespace) -> ConfigStore:
    """Load the config file and apply command line overrides."""
    store = ConfigStore()
    try:
        store.load_file()
    except ConfigNotFoundError:
        logger.warning(f"No config file at {store.path}, using defaults")

    if args.folder:
        store.set("dlFolder", args.folder)
    if args.playlist is not None:
        store.set("itunesPlaylist", args.playlist)
    if args.log_level:
        store.set("logLevel", args.log_level)
    return store


def print_summary(report: BatchReport) -> None:
    """Print download summary."""
    print("\n" + "=" * 80)
    print("DOWNLOAD SUMMARY")
    print("=" * 80)
    print(f"Processed: {len(report.processed)}, failed: {len(report.failures)}")
    for failure in report.failures:
        print(f"  {failure}")
    if report.interrupted:
        print("Stopped early.")
    print("=" * 80)


def main(argv=None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    try:
        store = build_store(args)
        settings = ProcessorSettings.from_store(store)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    setup_logging(settings.log_level)

    try:
        tracks = load_tracks(Path(args.tracks))
    except NehmError as e:
        logger.error(str(e))
        sys.exit(1)

    batch = BatchProcessor(TrackProcessor.from_settings(settings))
    signal.signal(signal.SIGTERM, lambda signum, frame: batch.request_stop())

    try:
        report = batch.process_all(tracks)
    except EmptyBatchError as e:
        logger.critical(str(e))
        sys.exit(1)
    except BatchInterruptedError as e:
        print_summary(e.report)
        print("\nGoodbye!")
        sys.exit(130)
    except KeyboardInterrupt:
        print("\nGoodbye!")
        sys.exit(130)

    print_summary(report)
    if report.failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
