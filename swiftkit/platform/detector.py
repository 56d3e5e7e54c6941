"""
Linux platform detection.

Classifies the host into one of the supported PlatformDefinitions by reading
the os-release descriptor. When the host cannot be classified, detection
either fails (non-interactive) or falls back to a numbered menu.

Classification looks for family markers as substrings of ID + ID_LIKE, in
the order of FAMILY_MARKERS; the first marker found decides the family.
"""

import logging
from typing import Optional, Sequence

from swiftkit.core.exceptions import DetectionError, PlatformSelectionCancelled
from swiftkit.core.prompt import PromptFn, read_line
from swiftkit.platform.definitions import (
    AMAZON_LINUX_2,
    RHEL_9,
    SELECTION_MENU,
    UBUNTU_CODENAMES,
    PlatformDefinition,
    platform_from_hint,
)
from swiftkit.platform.os_release import (
    OS_RELEASE_PATHS,
    OSRelease,
    find_os_release_file,
    parse_os_release,
)

logger = logging.getLogger(__name__)

FAMILY_MARKERS = ("amzn", "ubuntu", "rhel")

MENU_TEXT = """Please select the platform to use for toolchain downloads:

0) Cancel
1) Ubuntu 22.04
2) Ubuntu 20.04
3) Ubuntu 18.04
4) RHEL 9
5) Amazon Linux 2"""


class UnsupportedPlatformError(DetectionError):
    """Raised when the host cannot be mapped to a supported platform."""

    def __init__(self, reason: str, pretty_name: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.pretty_name = pretty_name


class PlatformDetector:
    """
    Detects the platform swiftkit should download toolchains for.

    Example:
        >>> detector = PlatformDetector()
        >>> detector.detect(interactive=False).name
        'ubuntu2204'
    """

    def __init__(
        self,
        os_release_paths: Sequence[str] = OS_RELEASE_PATHS,
        prompt: PromptFn = read_line,
    ):
        """
        Initialize detector.

        Args:
            os_release_paths: Candidate descriptor paths, checked in order
            prompt: Line reader used by the manual selection menu
        """
        self.os_release_paths = tuple(os_release_paths)
        self.prompt = prompt

    def detect(
        self, hint: Optional[str] = None, interactive: bool = True
    ) -> PlatformDefinition:
        """
        Detect the current platform.

        Args:
            hint: Platform id given by the user (e.g. 'ubuntu22.04'); skips
                file-based detection entirely
            interactive: Offer the manual selection menu when detection fails

        Returns:
            Detected or selected PlatformDefinition

        Raises:
            DetectionError: If the hint is unknown, or detection fails and
                interactive is False
            PlatformSelectionCancelled: If the user cancels the menu
        """
        if hint is not None:
            platform = platform_from_hint(hint)
            if platform is None:
                raise DetectionError(f"Unrecognized platform {hint}")
            logger.debug(f"Using platform from hint: {platform.name}")
            return platform

        try:
            platform = self._detect_from_os_release()
        except UnsupportedPlatformError as e:
            if not interactive:
                raise
            print(e.reason)
            return self.manual_select(e.pretty_name)

        logger.debug(f"Detected platform: {platform.name}")
        return platform

    def _detect_from_os_release(self) -> PlatformDefinition:
        release_file = find_os_release_file(self.os_release_paths)
        if release_file is None:
            raise UnsupportedPlatformError(
                "Unable to detect the type of Linux OS and the release"
            )

        try:
            content = release_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Failed to read {release_file}: {e}")
            raise UnsupportedPlatformError(
                f"Unable to read OS release information from file {release_file}"
            )

        release = parse_os_release(content)

        if release.id is None or release.id_like is None:
            raise UnsupportedPlatformError(
                f"Unable to find release information from file {release_file}",
                release.pretty_name,
            )

        return classify(release)

    def manual_select(self, pretty_name: Optional[str] = None) -> PlatformDefinition:
        """
        Ask the user to pick a platform from the numbered menu.

        Args:
            pretty_name: PRETTY_NAME of the host, if it could be read

        Returns:
            The selected PlatformDefinition

        Raises:
            PlatformSelectionCancelled: On "0", end of input or any
                unrecognized answer
        """
        if pretty_name:
            print(
                f"{pretty_name} is not an officially supported platform, but the "
                "toolchains for another platform may still work on it."
            )
        else:
            print(
                "This platform could not be detected, but a toolchain for one of "
                "the supported platforms may work on it."
            )

        print(MENU_TEXT)

        choice = self.prompt(">")
        choice = (choice or "0").strip()

        platform = SELECTION_MENU.get(choice)
        if platform is None:
            raise PlatformSelectionCancelled()

        logger.debug(f"User selected platform: {platform.name}")
        return platform


def classify(release: OSRelease) -> PlatformDefinition:
    """
    Map parsed os-release fields to a supported platform.

    Raises:
        UnsupportedPlatformError: If the family or its version is not supported
    """
    ids = (release.id or "") + (release.id_like or "")
    pretty = release.pretty_name

    family = next((marker for marker in FAMILY_MARKERS if marker in ids), None)

    if family == "amzn":
        if release.version_id != "2":
            raise UnsupportedPlatformError(
                "Unsupported version of Amazon Linux", pretty
            )
        return AMAZON_LINUX_2

    if family == "ubuntu":
        platform = UBUNTU_CODENAMES.get(release.ubuntu_codename or "")
        if platform is None:
            raise UnsupportedPlatformError(
                "Unsupported version of Ubuntu Linux", pretty
            )
        return platform

    if family == "rhel":
        if not (release.version_id or "").startswith("9"):
            raise UnsupportedPlatformError("Unsupported version of RHEL", pretty)
        return RHEL_9

    raise UnsupportedPlatformError("Unsupported Linux platform", pretty)


__all__ = [
    "FAMILY_MARKERS",
    "UnsupportedPlatformError",
    "PlatformDetector",
    "classify",
]
