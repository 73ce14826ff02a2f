"""
Batch processing of tracks.

Tracks are processed one after another, starting with the last one. A
failing track is recorded and the batch moves on; the collected failures
are reported once at the end.
"""

import logging
import threading
from typing import Sequence

from nehm.exceptions import BatchInterruptedError, EmptyBatchError
from nehm.models import BatchReport, Track, TrackFailure
from nehm.track_processor import TrackProcessor

logger = logging.getLogger(__name__)


class BatchProcessor:
    """Runs TrackProcessor over a list of tracks."""

    def __init__(self, processor: TrackProcessor):
        self.processor = processor
        self._stop_requested = threading.Event()

    def request_stop(self) -> None:
        """Ask the running batch to stop before the next track. Safe from signal handlers."""
        self._stop_requested.set()

    def process_all(self, tracks: Sequence[Track]) -> BatchReport:
        """
        Process all tracks, last track first.

        Args:
            tracks: Tracks to download

        Returns:
            BatchReport with failures in the order they occurred

        Raises:
            EmptyBatchError: If tracks is empty
            BatchInterruptedError: If the batch was stopped early
        """
        if not tracks:
            raise EmptyBatchError("there are no tracks to download")

        report = BatchReport()

        try:
            for track in reversed(tracks):
                if self._stop_requested.is_set():
                    report.interrupted = True
                    break
                report.processed.append(track.fullname)
                self._process_one(track, report)
        except KeyboardInterrupt:
            report.interrupted = True
        finally:
            # Reset for the next run
            self._stop_requested.clear()

        if report.interrupted:
            remaining = len(tracks) - len(report.processed)
            logger.warning(
                f"Stopped early: {len(report.processed)} processed, {remaining} left"
            )
            self._log_failures(report)
            raise BatchInterruptedError(report)

        self._log_failures(report)
        return report

    def _process_one(self, track: Track, report: BatchReport) -> None:
        try:
            self.processor.process(track)
        except Exception as e:
            failure = TrackFailure(
                fullname=track.fullname, kind=type(e).__name__, message=str(e)
            )
            report.failures.append(failure)
            logger.error(
                f"there was an error while downloading {track.fullname}: {e}"
            )

    def _log_failures(self, report: BatchReport) -> None:
        if not report.failures:
            return
        lines = "\n".join(f"  {failure}" for failure in report.failures)
        logger.info(f"There were errors while downloading tracks:\n{lines}")
