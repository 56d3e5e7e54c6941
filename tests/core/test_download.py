"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

from unittest.mock import MagicMock

import pytest
import requests
import responses

from swiftkit.core.download import (
    DownloadProgress,
    HTTPClient,
    format_progress,
)
from swiftkit.core.exceptions import DownloadError

URL = "https://download.swift.org/swift-5.10.1-release/ubuntu2204/x.tar.gz"


class TestDownloadFile:
    """Test HTTPClient.download_file()."""

    @responses.activate
    def test_successful_download(self, temp_dir):
        """Test body is written to destination."""
        content = b"toolchain archive" * 100
        responses.add(
            responses.GET,
            URL,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )
        dest = temp_dir / "x.tar.gz"

        result = HTTPClient().download_file(URL, dest)

        assert result == dest
        assert dest.read_bytes() == content

    @responses.activate
    def test_replaces_existing_content(self, temp_dir):
        """Test an existing destination is overwritten."""
        responses.add(responses.GET, URL, body=b"new", status=200)
        dest = temp_dir / "x.tar.gz"
        dest.write_bytes(b"old content that is longer")

        HTTPClient().download_file(URL, dest)

        assert dest.read_bytes() == b"new"

    @responses.activate
    def test_creates_parent_directory(self, temp_dir):
        """Test missing parent directories are created."""
        responses.add(responses.GET, URL, body=b"data", status=200)
        dest = temp_dir / "nested" / "dir" / "x.tar.gz"

        HTTPClient().download_file(URL, dest)

        assert dest.exists()

    @responses.activate
    def test_http_error(self, temp_dir):
        """Test an HTTP error status raises DownloadError."""
        responses.add(responses.GET, URL, status=404)

        with pytest.raises(DownloadError, match="Failed to download"):
            HTTPClient().download_file(URL, temp_dir / "x.tar.gz")

        assert len(responses.calls) == 1

    @responses.activate
    def test_connection_error(self, temp_dir):
        """Test a connection failure raises DownloadError."""
        responses.add(
            responses.GET, URL, body=requests.exceptions.ConnectionError("refused")
        )

        with pytest.raises(DownloadError):
            HTTPClient().download_file(URL, temp_dir / "x.tar.gz")

    @responses.activate
    def test_retries_when_configured(self, temp_dir, monkeypatch):
        """Test extra attempts are made only when max_retries > 1."""
        monkeypatch.setattr("swiftkit.core.download.time.sleep", lambda s: None)
        responses.add(responses.GET, URL, status=503)
        responses.add(responses.GET, URL, body=b"data", status=200)
        dest = temp_dir / "x.tar.gz"

        HTTPClient(max_retries=2).download_file(URL, dest)

        assert dest.read_bytes() == b"data"
        assert len(responses.calls) == 2

    @responses.activate
    def test_progress_callback(self, temp_dir):
        """Test the callback sees the completed download."""
        content = b"x" * 20000
        responses.add(
            responses.GET,
            URL,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )
        reports = []

        HTTPClient(progress_callback=reports.append).download_file(
            URL, temp_dir / "x.tar.gz"
        )

        assert reports
        assert reports[-1].bytes_downloaded == len(content)
        assert reports[-1].percentage == pytest.approx(100.0)

    def test_response_closed_on_http_error(self, temp_dir):
        """Test the streamed response is released when the status is bad."""
        response = MagicMock()
        response.__enter__.return_value = response
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("500")
        session = MagicMock(spec=requests.Session)
        session.get.return_value = response

        with pytest.raises(DownloadError):
            HTTPClient(session=session).download_file(URL, temp_dir / "x.tar.gz")

        response.__exit__.assert_called_once()

    def test_response_closed_after_download(self, temp_dir):
        """Test the streamed response is released after a full download."""
        response = MagicMock()
        response.__enter__.return_value = response
        response.headers = {"content-length": "4"}
        response.iter_content.return_value = [b"da", b"ta"]
        session = MagicMock(spec=requests.Session)
        session.get.return_value = response

        HTTPClient(session=session).download_file(URL, temp_dir / "x.tar.gz")

        assert (temp_dir / "x.tar.gz").read_bytes() == b"data"
        response.__exit__.assert_called_once()

    def test_empty_url(self, temp_dir):
        """Test an empty URL is rejected."""
        with pytest.raises(ValueError, match="URL cannot be empty"):
            HTTPClient().download_file("", temp_dir / "x")

    def test_empty_destination(self):
        """Test an empty destination is rejected."""
        with pytest.raises(ValueError, match="Destination path cannot be empty"):
            HTTPClient().download_file(URL, "")


class TestFormatProgress:
    """Test format_progress()."""

    def test_known_total(self):
        """Test formatting with a known size."""
        progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)

        assert format_progress(progress) == (
            "50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s"
        )

    def test_unknown_total(self):
        """Test formatting without a size."""
        progress = DownloadProgress(1048576, 0, 0, 1048576, 0)

        assert str(progress) == "1.0 MB at 1.0 MB/s"
