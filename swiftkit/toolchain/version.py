"""
Toolchain version identities.

A ToolchainVersion names one installable toolchain. Its `name` is the key of
the toolchain's directory under the toolchains root.

Supported forms:
    5.10.1                    stable release
    5.10                      stable release, patch 0 (name '5.10.0')
    main-snapshot-2024-06-01  development snapshot of the main branch
    6.0-snapshot-2024-06-01   development snapshot of a release branch
"""

import re
from dataclasses import dataclass
from typing import Optional

from swiftkit.core.exceptions import InvalidVersionError

_STABLE_RE = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?$")
_SNAPSHOT_RE = re.compile(r"^(main|\d+\.\d+)-snapshot-(\d{4}-\d{2}-\d{2})$")


@dataclass(frozen=True)
class ToolchainVersion:
    """
    Identity of a toolchain.

    Attributes:
        major, minor, patch: Release numbers (stable releases only)
        branch: 'main' or 'X.Y' for snapshots, None for stable releases
        date: Snapshot date 'YYYY-MM-DD', None for stable releases
    """

    major: Optional[int] = None
    minor: Optional[int] = None
    patch: Optional[int] = None
    branch: Optional[str] = None
    date: Optional[str] = None

    @property
    def is_snapshot(self) -> bool:
        return self.branch is not None

    @property
    def name(self) -> str:
        if self.is_snapshot:
            return f"{self.branch}-snapshot-{self.date}"
        return f"{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        return self.name

    @classmethod
    def stable(cls, major: int, minor: int, patch: int = 0) -> "ToolchainVersion":
        return cls(major=major, minor=minor, patch=patch)

    @classmethod
    def snapshot(cls, branch: str, date: str) -> "ToolchainVersion":
        return cls(branch=branch, date=date)

    @classmethod
    def parse(cls, text: str) -> "ToolchainVersion":
        """
        Parse a version string.

        Raises:
            InvalidVersionError: If text is not a supported version form

        Example:
            >>> ToolchainVersion.parse("5.10").name
            '5.10.0'
        """
        text = text.strip()

        match = _STABLE_RE.match(text)
        if match:
            major, minor, patch = match.groups()
            return cls.stable(int(major), int(minor), int(patch or 0))

        match = _SNAPSHOT_RE.match(text)
        if match:
            return cls.snapshot(match.group(1), match.group(2))

        raise InvalidVersionError(
            f"Invalid toolchain version '{text}'. Expected X.Y[.Z], "
            "main-snapshot-YYYY-MM-DD or X.Y-snapshot-YYYY-MM-DD"
        )


__all__ = ["ToolchainVersion"]
