"""
Unit tests for signature verification.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from swiftkit.core.download import HTTPClient
from swiftkit.core.exceptions import ProcessError, SignatureVerificationError
from swiftkit.core.process import ProcessRunner
from swiftkit.toolchain.signature import SignatureVerifier

ARCHIVE_URL = "https://download.swift.org/swift-5.10.1-release/ubuntu2204/x.tar.gz"


@pytest.fixture
def http_client():
    return MagicMock(spec=HTTPClient)


@pytest.fixture
def runner():
    return MagicMock(spec=ProcessRunner)


@pytest.mark.unit
class TestSignatureVerifier:
    """Test SignatureVerifier."""

    def test_import_keys(self, http_client, runner):
        """Test keys are imported quietly with gpg --import."""
        SignatureVerifier(http_client, runner).import_keys(Path("/tmp/keys.asc"))

        runner.run.assert_called_once_with(
            ["gpg", "--import", "/tmp/keys.asc"], quiet=True
        )

    def test_verify_downloads_signature(self, http_client, runner, tmp_path):
        """Test the .sig next to the archive URL is checked against the archive."""
        archive = tmp_path / "x.tar.gz"
        archive.write_bytes(b"archive")

        SignatureVerifier(http_client, runner).verify(ARCHIVE_URL, archive)

        url, sig_file = http_client.download_file.call_args[0]
        assert url == f"{ARCHIVE_URL}.sig"
        runner.run.assert_called_once_with(
            ["gpg", "--verify", str(sig_file), str(archive)]
        )
        assert not sig_file.exists()

    def test_verify_failure(self, http_client, runner, tmp_path):
        """Test a gpg failure becomes a signature verification error."""
        runner.run.side_effect = ProcessError(["gpg", "--verify"], 1, "BAD signature")

        with pytest.raises(
            SignatureVerificationError, match="Signature verification failed"
        ):
            SignatureVerifier(http_client, runner).verify(
                ARCHIVE_URL, tmp_path / "x.tar.gz"
            )

        assert not http_client.download_file.call_args[0][1].exists()
