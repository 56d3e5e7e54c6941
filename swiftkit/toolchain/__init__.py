"""
Toolchain management module for swiftkit.

This module provides functionality for:
- Toolchain version identities
- Prerequisite checks before installing
- Toolchain download, signature verification and extraction
- Switching the toolchain linked into the bin directory
"""

from swiftkit.toolchain.activation import SELF_EXECUTABLE, ToolchainActivator
from swiftkit.toolchain.installer import ToolchainInstaller
from swiftkit.toolchain.prerequisites import (
    PLATFORM_REQUIREMENTS,
    KeyRefreshState,
    PackageRequirements,
    PrerequisiteChecker,
)
from swiftkit.toolchain.signature import SignatureVerifier
from swiftkit.toolchain.version import ToolchainVersion

__all__ = [
    "SELF_EXECUTABLE",
    "ToolchainActivator",
    "ToolchainInstaller",
    "PLATFORM_REQUIREMENTS",
    "KeyRefreshState",
    "PackageRequirements",
    "PrerequisiteChecker",
    "SignatureVerifier",
    "ToolchainVersion",
]
