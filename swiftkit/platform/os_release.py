"""
os-release descriptor handling.

Locates the os-release file and extracts the handful of fields platform
detection needs. Values are unquoted by deleting every double quote; no
other shell escaping is interpreted.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

OS_RELEASE_PATHS = ("/etc/os-release", "/usr/lib/os-release")


@dataclass
class OSRelease:
    """Fields read from an os-release file. Missing keys are None."""

    id: Optional[str] = None
    id_like: Optional[str] = None
    version_id: Optional[str] = None
    ubuntu_codename: Optional[str] = None
    pretty_name: Optional[str] = None


_FIELDS = {
    "ID=": "id",
    "ID_LIKE=": "id_like",
    "VERSION_ID=": "version_id",
    "UBUNTU_CODENAME=": "ubuntu_codename",
    "PRETTY_NAME=": "pretty_name",
}


def find_os_release_file(candidates: Iterable[str] = OS_RELEASE_PATHS) -> Optional[Path]:
    """
    Return the first candidate path that exists.

    Args:
        candidates: Paths checked in order

    Returns:
        Path of the descriptor, or None if no candidate exists
    """
    for candidate in candidates:
        if os.path.exists(candidate):
            logger.debug(f"Using OS release file {candidate}")
            return Path(candidate)
    return None


def parse_os_release(content: str) -> OSRelease:
    """
    Parse os-release text.

    Example:
        >>> info = parse_os_release('ID="ubuntu"\\nUBUNTU_CODENAME=jammy\\n')
        >>> info.id, info.ubuntu_codename
        ('ubuntu', 'jammy')
    """
    release = OSRelease()

    for line in content.split("\n"):
        for prefix, attr in _FIELDS.items():
            if line.startswith(prefix):
                setattr(release, attr, line[len(prefix):].replace('"', ""))
                break

    return release


__all__ = ["OS_RELEASE_PATHS", "OSRelease", "find_os_release_file", "parse_os_release"]
