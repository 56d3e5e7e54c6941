"""
Supported platform definitions.

A PlatformDefinition names one of the Linux platforms Swift toolchains are
published for. The set is closed: detection and the manual selection menu
only ever return one of the constants below.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class PlatformDefinition:
    """
    Identity of a supported platform.

    Attributes:
        name: Short id, also the download directory name (e.g. 'ubuntu2204')
        name_full: Canonical id used in archive names (e.g. 'ubuntu22.04')
        name_pretty: Display string (e.g. 'Ubuntu 22.04')

    Two definitions are equal when their `name` is equal.
    """

    name: str
    name_full: str = field(compare=False)
    name_pretty: str = field(compare=False)

    def __str__(self) -> str:
        return self.name_pretty

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "name_full": self.name_full,
            "name_pretty": self.name_pretty,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "PlatformDefinition":
        return cls(
            name=data["name"],
            name_full=data["name_full"],
            name_pretty=data["name_pretty"],
        )


UBUNTU_2204 = PlatformDefinition("ubuntu2204", "ubuntu22.04", "Ubuntu 22.04")
UBUNTU_2004 = PlatformDefinition("ubuntu2004", "ubuntu20.04", "Ubuntu 20.04")
UBUNTU_1804 = PlatformDefinition("ubuntu1804", "ubuntu18.04", "Ubuntu 18.04")
AMAZON_LINUX_2 = PlatformDefinition("amazonlinux2", "amazonlinux2", "Amazon Linux 2")
RHEL_9 = PlatformDefinition("ubi9", "ubi9", "RHEL 9")

ALL_PLATFORMS: List[PlatformDefinition] = [
    UBUNTU_2204,
    UBUNTU_2004,
    UBUNTU_1804,
    AMAZON_LINUX_2,
    RHEL_9,
]

# Values accepted by --platform and the `platform` setting
PLATFORM_HINTS: Dict[str, PlatformDefinition] = {
    "ubuntu22.04": UBUNTU_2204,
    "ubuntu20.04": UBUNTU_2004,
    "ubuntu18.04": UBUNTU_1804,
    "amazonlinux2": AMAZON_LINUX_2,
    "rhel9": RHEL_9,
}

UBUNTU_CODENAMES: Dict[str, PlatformDefinition] = {
    "jammy": UBUNTU_2204,
    "focal": UBUNTU_2004,
    "bionic": UBUNTU_1804,
}

# Manual selection menu, in display order; "0" cancels
SELECTION_MENU: Dict[str, PlatformDefinition] = {
    "1": UBUNTU_2204,
    "2": UBUNTU_2004,
    "3": UBUNTU_1804,
    "4": RHEL_9,
    "5": AMAZON_LINUX_2,
}


def platform_from_hint(hint: str) -> Optional[PlatformDefinition]:
    """Look up a --platform value, None if it is not a known hint."""
    return PLATFORM_HINTS.get(hint)


__all__ = [
    "PlatformDefinition",
    "UBUNTU_2204",
    "UBUNTU_2004",
    "UBUNTU_1804",
    "AMAZON_LINUX_2",
    "RHEL_9",
    "ALL_PLATFORMS",
    "PLATFORM_HINTS",
    "UBUNTU_CODENAMES",
    "SELECTION_MENU",
    "platform_from_hint",
]
