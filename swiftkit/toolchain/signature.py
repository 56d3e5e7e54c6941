"""
GPG signature handling for downloaded toolchains.

Swift toolchains are published with a detached `.sig` file next to each
archive. Verification downloads the signature to a private temporary file
and asks gpg to check it against the archive.
"""

import logging
from pathlib import Path
from typing import Optional

from swiftkit.core.download import HTTPClient
from swiftkit.core.exceptions import ProcessError, SignatureVerificationError
from swiftkit.core.filesystem import temporary_file
from swiftkit.core.process import ProcessRunner

logger = logging.getLogger(__name__)


class SignatureVerifier:
    """Imports signing keys and verifies detached toolchain signatures."""

    def __init__(self, http_client: HTTPClient, runner: Optional[ProcessRunner] = None):
        self.http_client = http_client
        self.runner = runner or ProcessRunner()

    def import_keys(self, keys_file: Path) -> None:
        """
        Import a key bundle into the user's gpg keyring.

        Raises:
            ProcessError: If gpg fails
        """
        self.runner.run(["gpg", "--import", str(keys_file)], quiet=True)
        logger.debug(f"Imported signing keys from {keys_file}")

    def verify(self, archive_url: str, archive: Path) -> None:
        """
        Verify archive against the signature published at `<archive_url>.sig`.

        Args:
            archive_url: URL the archive was downloaded from
            archive: Local archive path

        Raises:
            DownloadError: If the signature cannot be downloaded
            SignatureVerificationError: If gpg rejects the signature
        """
        with temporary_file(suffix=".sig") as sig_file:
            logger.info("Downloading toolchain signature...")
            self.http_client.download_file(f"{archive_url}.sig", sig_file)

            logger.info("Verifying toolchain signature...")
            try:
                self.runner.run(["gpg", "--verify", str(sig_file), str(archive)])
            except ProcessError as e:
                raise SignatureVerificationError(
                    f"Signature verification failed: {e}."
                ) from e


__all__ = ["SignatureVerifier"]
