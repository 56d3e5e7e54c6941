"""
Toolchain download, extraction and removal.

This module installs toolchains into the toolchains directory:
1. Build the download URL for a version and platform
2. Download the archive to a temporary file
3. Verify the archive signature (optional)
4. Extract the archive into `<toolchains>/<name>`, dropping the archive's
   top-level directory
5. Remove the temporary file
"""

import logging
import platform as host_platform
import tempfile
from pathlib import Path
from typing import List, Optional

from swiftkit.core.download import HTTPClient
from swiftkit.core.exceptions import InstallError, ToolchainNotInstalledError
from swiftkit.core.filesystem import (
    extract_archive,
    safe_rmtree,
    strip_first_component,
    temporary_file,
)
from swiftkit.core.settings import SWIFT_DOWNLOAD_BASE_URL
from swiftkit.platform.definitions import PlatformDefinition
from swiftkit.toolchain.signature import SignatureVerifier
from swiftkit.toolchain.version import ToolchainVersion

logger = logging.getLogger(__name__)

TOOLCHAIN_FILE_EXTENSION = "tar.gz"


def _host_arch() -> str:
    machine = host_platform.machine().lower()
    if machine in ("aarch64", "arm64"):
        return "aarch64"
    return "x86_64"


class ToolchainInstaller:
    """
    Installs and removes toolchains.

    Example:
        >>> installer = ToolchainInstaller(paths.toolchains_dir, HTTPClient())
        >>> installer.download_and_install(ToolchainVersion.parse("5.10.1"), UBUNTU_2204)
        >>> installer.list_installed()
        ['5.10.1']
    """

    def __init__(
        self,
        toolchains_dir: Path,
        http_client: HTTPClient,
        verifier: Optional[SignatureVerifier] = None,
        download_base_url: str = SWIFT_DOWNLOAD_BASE_URL,
    ):
        """
        Initialize installer.

        Args:
            toolchains_dir: Root of the installed toolchains (created lazily)
            http_client: Client used for archive downloads
            verifier: Signature verifier (one sharing http_client if None)
            download_base_url: Root of the toolchain download tree
        """
        self.toolchains_dir = Path(toolchains_dir)
        self.http_client = http_client
        self.verifier = verifier or SignatureVerifier(http_client)
        self.download_base_url = download_base_url.rstrip("/")

    def toolchain_dir(self, version: ToolchainVersion) -> Path:
        return self.toolchains_dir / version.name

    def download_url(
        self,
        version: ToolchainVersion,
        platform: PlatformDefinition,
        arch: Optional[str] = None,
    ) -> str:
        """
        URL of the toolchain archive for version on platform.

        Example:
            >>> installer.download_url(ToolchainVersion.parse("5.10.1"), UBUNTU_2204)
            'https://download.swift.org/swift-5.10.1-release/ubuntu2204/swift-5.10.1-RELEASE/swift-5.10.1-RELEASE-ubuntu22.04.tar.gz'
        """
        arch = arch or _host_arch()
        suffix = "-aarch64" if arch == "aarch64" else ""
        platform_dir = f"{platform.name}{suffix}"
        platform_full = f"{platform.name_full}{suffix}"

        if not version.is_snapshot:
            tag = f"swift-{version.name}-RELEASE"
            category = f"swift-{version.name}-release"
        elif version.branch == "main":
            tag = f"swift-DEVELOPMENT-SNAPSHOT-{version.date}-a"
            category = "development"
        else:
            tag = f"swift-{version.branch}-DEVELOPMENT-SNAPSHOT-{version.date}-a"
            category = f"swift-{version.branch}-branch"

        return (
            f"{self.download_base_url}/{category}/{platform_dir}/{tag}/"
            f"{tag}-{platform_full}.{TOOLCHAIN_FILE_EXTENSION}"
        )

    def install(self, archive: Path, version: ToolchainVersion) -> Path:
        """
        Extract a downloaded archive as toolchain `version`.

        The archive is extracted into a hidden staging directory next to the
        target and renamed into place once extraction succeeds, so a failed
        install leaves any existing installation of the same name untouched.

        Args:
            archive: Path to the toolchain archive
            version: Toolchain the archive contains

        Returns:
            Path to the installed toolchain

        Raises:
            InstallError: If the archive doesn't exist
            ArchiveExtractionError: If extraction fails
        """
        archive = Path(archive)
        if not archive.exists():
            raise InstallError(f"{archive} doesn't exist")

        self.toolchains_dir.mkdir(parents=True, exist_ok=True)

        toolchain_dir = self.toolchain_dir(version)
        staging = Path(
            tempfile.mkdtemp(prefix=f".{version.name}.", dir=self.toolchains_dir)
        )

        logger.info("Extracting toolchain...")
        try:
            extract_archive(archive, staging, rename=strip_first_component)
        except BaseException:
            safe_rmtree(staging, require_prefix=self.toolchains_dir)
            raise

        if toolchain_dir.exists():
            logger.debug(f"Replacing existing installation {toolchain_dir}")
            safe_rmtree(toolchain_dir, require_prefix=self.toolchains_dir)
        # mkdtemp creates the directory owner-only
        staging.chmod(0o755)
        staging.rename(toolchain_dir)

        logger.debug(f"Installed {version.name} into {toolchain_dir}")
        return toolchain_dir

    def download_and_install(
        self,
        version: ToolchainVersion,
        platform: PlatformDefinition,
        verify: bool = True,
    ) -> Path:
        """
        Download, verify and install a toolchain.

        The downloaded archive is removed whether or not installation
        succeeds.

        Raises:
            DownloadError: If the archive or its signature cannot be downloaded
            SignatureVerificationError: If verification is enabled and fails
            ArchiveExtractionError: If extraction fails
        """
        url = self.download_url(version, platform)

        with temporary_file(suffix=f".{TOOLCHAIN_FILE_EXTENSION}") as archive:
            logger.info(f"Downloading {version.name} from {url}")
            self.http_client.download_file(url, archive)

            if verify:
                self.verifier.verify(url, archive)
            else:
                logger.warning("Skipping signature verification")

            return self.install(archive, version)

    def uninstall(self, version: ToolchainVersion) -> None:
        """
        Remove an installed toolchain.

        Raises:
            ToolchainNotInstalledError: If the toolchain directory is missing
        """
        toolchain_dir = self.toolchain_dir(version)
        if not toolchain_dir.is_dir():
            raise ToolchainNotInstalledError(version.name)

        safe_rmtree(toolchain_dir, require_prefix=self.toolchains_dir)
        logger.debug(f"Removed {toolchain_dir}")

    def is_installed(self, version: ToolchainVersion) -> bool:
        return self.toolchain_dir(version).is_dir()

    def list_installed(self) -> List[str]:
        """Names of the toolchains present in the toolchains directory."""
        if not self.toolchains_dir.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.toolchains_dir.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        )


__all__ = ["TOOLCHAIN_FILE_EXTENSION", "ToolchainInstaller"]
