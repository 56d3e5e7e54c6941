"""
Platform detection for swiftkit.

This module classifies the host Linux distribution into one of the
platforms Swift toolchains are published for.
"""

from swiftkit.platform.definitions import (
    ALL_PLATFORMS,
    AMAZON_LINUX_2,
    PLATFORM_HINTS,
    RHEL_9,
    UBUNTU_1804,
    UBUNTU_2004,
    UBUNTU_2204,
    PlatformDefinition,
)
from swiftkit.platform.detector import PlatformDetector, UnsupportedPlatformError
from swiftkit.platform.os_release import OSRelease, parse_os_release

__all__ = [
    "ALL_PLATFORMS",
    "AMAZON_LINUX_2",
    "PLATFORM_HINTS",
    "RHEL_9",
    "UBUNTU_1804",
    "UBUNTU_2004",
    "UBUNTU_2204",
    "PlatformDefinition",
    "PlatformDetector",
    "UnsupportedPlatformError",
    "OSRelease",
    "parse_os_release",
]
