"""
Core infrastructure for swiftkit.

This module provides the building blocks shared by platform detection and
toolchain management:
- Exception hierarchy
- Directory layout and persistent state
- Settings file loading
- HTTP downloads, subprocess execution and filesystem helpers
"""

from swiftkit.core.exceptions import (
    ActivationError,
    ArchiveExtractionError,
    ConfigurationError,
    DetectionError,
    DownloadError,
    FilesystemError,
    InsecureArchiveError,
    InstallError,
    IntegrityError,
    InvalidVersionError,
    PlatformSelectionCancelled,
    PrerequisiteError,
    ProcessError,
    SignatureVerificationError,
    SwiftkitError,
    ToolchainError,
    ToolchainNotInstalledError,
)
from swiftkit.core.directory import SwiftkitPaths
from swiftkit.core.download import HTTPClient
from swiftkit.core.process import ProcessRunner

__all__ = [
    "ActivationError",
    "ArchiveExtractionError",
    "ConfigurationError",
    "DetectionError",
    "DownloadError",
    "FilesystemError",
    "InsecureArchiveError",
    "InstallError",
    "IntegrityError",
    "InvalidVersionError",
    "PlatformSelectionCancelled",
    "PrerequisiteError",
    "ProcessError",
    "SignatureVerificationError",
    "SwiftkitError",
    "ToolchainError",
    "ToolchainNotInstalledError",
    "SwiftkitPaths",
    "HTTPClient",
    "ProcessRunner",
]
