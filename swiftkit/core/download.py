"""
Network download client with progress tracking.

This module provides the HTTP collaborator used by swiftkit:
- HTTPS downloads with TLS verification
- Streaming to disk in fixed-size chunks
- Progress reporting (bytes, percentage, speed, ETA)
- Timeout handling
- Optional retry with exponential backoff (disabled by default, the
  installer performs each download once)
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from swiftkit.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


class HTTPClient:
    """
    Downloads files over HTTP(S) with `requests`.

    Example:
        >>> client = HTTPClient()
        >>> client.download_file(
        ...     "https://www.swift.org/keys/all-keys.asc", Path("/tmp/keys.asc")
        ... )
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        max_retries: int = 1,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            session: Optional requests session (a new one is created if None)
            timeout: Request timeout in seconds
            max_retries: Number of attempts per download
            progress_callback: Optional callback for progress updates
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.progress_callback = progress_callback

    def download_file(self, url: str, destination: Path) -> Path:
        """
        Download URL to destination, replacing any existing content.

        Args:
            url: URL to download from
            destination: Local path to save file

        Returns:
            Path to downloaded file

        Raises:
            DownloadError: If the download fails
            ValueError: If URL or destination is invalid
        """
        if not url:
            raise ValueError("URL cannot be empty")

        if not destination:
            raise ValueError("Destination path cannot be empty")

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)

        for attempt in range(self.max_retries):
            try:
                return self._download_with_progress(url, destination)
            except RequestException as e:
                if attempt == self.max_retries - 1:
                    raise DownloadError(f"Failed to download {url}: {e}") from e

                backoff_seconds = 2**attempt
                logger.warning(
                    f"Download attempt {attempt + 1} failed: {e}. "
                    f"Retrying in {backoff_seconds}s..."
                )
                time.sleep(backoff_seconds)

        raise DownloadError(f"Failed to download {url}")

    def _download_with_progress(self, url: str, destination: Path) -> Path:
        """Stream the response body into destination."""
        logger.debug(f"Downloading from {url}")

        with self.session.get(
            url, stream=True, timeout=self.timeout, allow_redirects=True
        ) as response:
            response.raise_for_status()

            content_length = response.headers.get("content-length")
            total_size = int(content_length) if content_length else 0

            downloaded = 0
            start_time = time.time()
            last_progress_time = start_time

            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)

                    # Report progress (max once per 0.5 seconds to avoid spam)
                    current_time = time.time()
                    if self.progress_callback and (
                        current_time - last_progress_time >= 0.5
                        or downloaded == total_size
                    ):
                        elapsed = current_time - start_time
                        speed = downloaded / elapsed if elapsed > 0 else 0
                        remaining = total_size - downloaded if total_size > 0 else 0
                        eta = remaining / speed if speed > 0 else 0

                        self.progress_callback(
                            DownloadProgress(
                                bytes_downloaded=downloaded,
                                total_bytes=total_size if total_size > 0 else downloaded,
                                percentage=(downloaded / total_size * 100)
                                if total_size > 0
                                else 0,
                                speed_bps=speed,
                                eta_seconds=eta,
                            )
                        )
                        last_progress_time = current_time

        logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
        return destination


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Args:
        progress: Download progress information

    Returns:
        Formatted progress string

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB " f"at {speed_mbps:.1f} MB/s"


__all__ = ["DownloadProgress", "HTTPClient", "format_progress"]
