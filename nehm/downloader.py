"""
File retrieval backends.

A downloader fetches the resource at a URL into a destination path. On
success the destination holds the complete response body; any failure is
raised as DownloadError.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Protocol

import requests

from nehm.exceptions import DownloadError

logger = logging.getLogger(__name__)


class Downloader(Protocol):
    """Capability to fetch a URL into a file."""

    def download(self, url: str, path: Path) -> None:
        ...


class CurlDownloader:
    """Downloader that runs the external curl utility."""

    def __init__(self, timeout: Optional[float] = None, binary: str = "curl"):
        """
        Args:
            timeout: Maximum seconds for one transfer (default: no limit)
            binary: curl executable
        """
        self.timeout = timeout
        self.binary = binary

    def build_command(self, url: str, path: Path) -> list:
        command = [self.binary, "-#", "--fail", "-o", str(path), "-L", url]
        if self.timeout:
            command[1:1] = ["--max-time", str(self.timeout)]
        return command

    def download(self, url: str, path: Path) -> None:
        """
        Download url into path. curl's progress bar goes to the terminal.

        Raises:
            DownloadError: If curl can't be run or exits with non-zero status
        """
        command = self.build_command(url, path)
        logger.debug(f"Running: {' '.join(command)}")
        try:
            subprocess.run(command, check=True)
        except subprocess.CalledProcessError as e:
            raise DownloadError(f"curl exited with status {e.returncode}") from e
        except OSError as e:
            raise DownloadError(f"couldn't run {self.binary}: {e}") from e


class HTTPDownloader:
    """Downloader using requests."""

    CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()

    def download(self, url: str, path: Path) -> None:
        """
        Stream url into path.

        Raises:
            DownloadError: On connection errors, bad status codes or write failures
        """
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                with open(path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            raise DownloadError(f"request for {url} failed: {e}") from e
        except OSError as e:
            raise DownloadError(f"couldn't write {path}: {e}") from e
