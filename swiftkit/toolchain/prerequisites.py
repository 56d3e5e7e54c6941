"""
System prerequisite checks.

Before any download swiftkit verifies that a trusted CA bundle is present.
Before an install it verifies gpg (when signatures are checked), refreshes
the Swift signing keys once per KeyRefreshState, and asks the platform's
package manager which of the packages a toolchain needs are missing.

The package requirements are data: PLATFORM_REQUIREMENTS maps a platform
name to its package manager and package list. A platform without an entry
has no known package manager and is assumed to be satisfied.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple

from swiftkit.core.download import HTTPClient
from swiftkit.core.exceptions import PrerequisiteError, ProcessError
from swiftkit.core.filesystem import temporary_file
from swiftkit.core.process import ProcessRunner
from swiftkit.core.settings import SWIFT_KEYS_URL
from swiftkit.platform.definitions import PlatformDefinition
from swiftkit.toolchain.signature import SignatureVerifier
from swiftkit.toolchain.version import ToolchainVersion

logger = logging.getLogger(__name__)

CA_BUNDLE_PATHS = (
    "/etc/ssl/certs/ca-certificates.crt",
    "/etc/pki/tls/certs/ca-bundle.crt",
)

SKIP_VERIFICATION_MESSAGE = (
    "To skip signature verification, specify the --no-verify flag."
)


@dataclass(frozen=True)
class PackageRequirements:
    """Package manager and packages a platform needs for a toolchain."""

    manager: str
    packages: Tuple[str, ...]


# Package lists follow the Swift 5.10 docker images
PLATFORM_REQUIREMENTS: Dict[str, PackageRequirements] = {
    "ubuntu1804": PackageRequirements(
        manager="apt-get",
        packages=(
            "libatomic1",
            "libcurl4-openssl-dev",
            "libxml2-dev",
            "libedit2",
            "libsqlite3-0",
            "libc6-dev",
            "binutils",
            "libgcc-5-dev",
            "libstdc++-5-dev",
            "zlib1g-dev",
            "libpython3.6",
            "tzdata",
            "git",
            "unzip",
            "pkg-config",
        ),
    ),
    "ubuntu2004": PackageRequirements(
        manager="apt-get",
        packages=(
            "binutils",
            "git",
            "unzip",
            "gnupg2",
            "libc6-dev",
            "libcurl4-openssl-dev",
            "libedit2",
            "libgcc-9-dev",
            "libpython3.8",
            "libsqlite3-0",
            "libstdc++-9-dev",
            "libxml2-dev",
            "libz3-dev",
            "pkg-config",
            "tzdata",
            "zlib1g-dev",
        ),
    ),
    "ubuntu2204": PackageRequirements(
        manager="apt-get",
        packages=(
            "binutils",
            "git",
            "unzip",
            "gnupg2",
            "libc6-dev",
            "libcurl4-openssl-dev",
            "libedit2",
            "libgcc-11-dev",
            "libpython3-dev",
            "libsqlite3-0",
            "libstdc++-11-dev",
            "libxml2-dev",
            "libz3-dev",
            "pkg-config",
            "python3-lldb-13",
            "tzdata",
            "zlib1g-dev",
        ),
    ),
    "amazonlinux2": PackageRequirements(
        manager="yum",
        packages=(
            "binutils",
            "gcc",
            "git",
            "unzip",
            "glibc-static",
            "gzip",
            "libcurl-devel",
            "libedit",
            "libicu",
            "libuuid",
            "libxml2-devel",
            "sqlite-devel",
            "tar",
            "tzdata",
            "zlib-devel",
        ),
    ),
    "ubi9": PackageRequirements(
        manager="yum",
        packages=(
            "git",
            "gcc-c++",
            "libcurl-devel",
            "libedit-devel",
            "libuuid-devel",
            "libxml2-devel",
            "ncurses-devel",
            "python3-devel",
            "rsync",
            "sqlite-devel",
            "unzip",
            "zip",
        ),
    ),
}


class KeyRefreshState:
    """
    Remembers whether the signing keys were imported.

    One instance is shared by every check in a process, so the key bundle
    is downloaded and imported at most once per instance.
    """

    def __init__(self, refreshed: bool = False):
        self.refreshed = refreshed


class PrerequisiteChecker:
    """
    Checks system and per-install prerequisites.

    Example:
        >>> checker = PrerequisiteChecker(HTTPClient())
        >>> checker.check_system_prerequisites()
        >>> command = checker.check_install_prerequisites(UBUNTU_2204, version, True)
        >>> if command:
        ...     print(f"Run as root: {command}")
    """

    def __init__(
        self,
        http_client: HTTPClient,
        runner: Optional[ProcessRunner] = None,
        key_state: Optional[KeyRefreshState] = None,
        requirements: Mapping[str, PackageRequirements] = PLATFORM_REQUIREMENTS,
        ca_bundle_paths: Sequence[str] = CA_BUNDLE_PATHS,
        keys_url: str = SWIFT_KEYS_URL,
    ):
        """
        Initialize checker.

        Args:
            http_client: Client used to download the key bundle
            runner: Process runner for gpg and the package managers
            key_state: Shared key refresh state (a fresh one if None)
            requirements: Platform name to package requirements
            ca_bundle_paths: Candidate CA bundle locations
            keys_url: URL of the signing key bundle
        """
        self.http_client = http_client
        self.runner = runner or ProcessRunner()
        self.key_state = key_state if key_state is not None else KeyRefreshState()
        self.requirements = requirements
        self.ca_bundle_paths = tuple(ca_bundle_paths)
        self.keys_url = keys_url

    def check_system_prerequisites(self) -> None:
        """
        Verify that a trusted CA bundle is installed.

        Raises:
            PrerequisiteError: If none of the CA bundle paths exist
        """
        for crt_file in self.ca_bundle_paths:
            if os.path.exists(crt_file):
                logger.debug(f"Found CA bundle: {crt_file}")
                return

        raise PrerequisiteError(
            "The ca-certificates package is not installed. swiftkit won't be "
            "able to trust the sites to perform its downloads.\n\n"
            "You can install the ca-certificates package on your system to fix "
            f"this. Looked for: {', '.join(self.ca_bundle_paths)}"
        )

    def check_install_prerequisites(
        self,
        platform: PlatformDefinition,
        version: ToolchainVersion,
        require_signature_validation: bool,
    ) -> Optional[str]:
        """
        Check what installing `version` on `platform` needs.

        Args:
            platform: Target platform
            version: Toolchain about to be installed
            require_signature_validation: Whether gpg verification will run

        Returns:
            A command installing the missing packages, or None if nothing
            is missing or no package manager is known for the platform

        Raises:
            PrerequisiteError: If gpg is required but not runnable
            DownloadError: If the key bundle cannot be downloaded
            ProcessError: If gpg fails to import the key bundle
        """
        requirement = self.requirements.get(platform.name)
        manager = requirement.manager if requirement else None

        logger.debug(f"Checking install prerequisites for {version} on {platform.name}")

        if require_signature_validation:
            self._require_gpg(manager)
            self._refresh_keys()

        if requirement is None:
            logger.debug(f"No package manager known for {platform.name}")
            return None

        missing = [
            pkg
            for pkg in requirement.packages
            if not self.is_package_installed(manager, pkg)
        ]

        if not missing:
            return None

        logger.debug(f"Missing packages: {', '.join(missing)}")
        return f"{manager} -y install {' '.join(missing)}"

    def is_package_installed(self, manager: Optional[str], package: str) -> bool:
        """
        Ask the package manager whether package is installed.

        apt-get platforms are queried with `dpkg -l`, where only a line in the
        'ii' (installed, no error) state counts. yum platforms use the exit
        status of `yum list installed`. Any other manager is assumed to be
        satisfied.
        """
        try:
            if manager == "apt-get":
                output = self.runner.output(["dpkg", "-l", package])
                return any(line.startswith("ii ") for line in output.splitlines())
            if manager == "yum":
                self.runner.run(["yum", "list", "installed", package], quiet=True)
                return True
            return True
        except ProcessError as e:
            logger.debug(f"Package {package} not installed: {e}")
            return False

    def _require_gpg(self, manager: Optional[str]) -> None:
        try:
            self.runner.run(["gpg", "--version"], quiet=True)
            return
        except ProcessError as e:
            logger.debug(f"gpg not runnable: {e}")

        msg = "gpg is not installed. "
        if manager:
            msg += (
                "You can install it by running this command as root:\n"
                f"    {manager} -y install gpg"
            )
        else:
            msg += "You can install gpg to get signature verifications of the toolchains."
        msg += "\n" + SKIP_VERIFICATION_MESSAGE

        raise PrerequisiteError(msg)

    def _refresh_keys(self) -> None:
        if self.key_state.refreshed:
            logger.debug("Signing keys already refreshed")
            return

        verifier = SignatureVerifier(self.http_client, self.runner)

        with temporary_file(suffix=".asc") as keys_file:
            logger.info("Refreshing Swift signing keys...")
            self.http_client.download_file(self.keys_url, keys_file)
            verifier.import_keys(keys_file)

        self.key_state.refreshed = True


__all__ = [
    "CA_BUNDLE_PATHS",
    "PackageRequirements",
    "PLATFORM_REQUIREMENTS",
    "KeyRefreshState",
    "PrerequisiteChecker",
]
