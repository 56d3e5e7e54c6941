"""
Centralized exception hierarchy for swiftkit.

This module defines all custom exceptions used across the codebase
to provide clear exception semantics for the CLI and library callers.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class SwiftkitError(Exception):
    """Base exception for all swiftkit errors."""

    pass


class ConfigurationError(SwiftkitError):
    """Raised when the settings file cannot be parsed or is invalid."""

    pass


# ============================================================================
# Platform Detection Exceptions
# ============================================================================


class DetectionError(SwiftkitError):
    """Raised when the host platform cannot be classified."""

    pass


class PlatformSelectionCancelled(DetectionError):
    """Raised when the user cancels the manual platform selection menu."""

    def __init__(self, message: str = "Installation canceled"):
        super().__init__(message)


# ============================================================================
# Prerequisite Exceptions
# ============================================================================


class PrerequisiteError(SwiftkitError):
    """
    Raised when a system prerequisite is missing.

    The message always carries a remediation the user can act on.
    """

    pass


# ============================================================================
# Activation Exceptions
# ============================================================================


class ActivationError(SwiftkitError):
    """Base exception for errors while switching the active toolchain."""

    pass


class IntegrityError(ActivationError):
    """Raised when the bin directory holds entries swiftkit does not own."""

    def __init__(self, message: str, path=None):
        self.path = path
        super().__init__(message)


# ============================================================================
# Toolchain-related Exceptions
# ============================================================================


class ToolchainError(SwiftkitError):
    """Base exception for toolchain-related errors."""

    pass


class InvalidVersionError(ToolchainError):
    """Invalid toolchain version format."""

    pass


class ToolchainNotInstalledError(ToolchainError):
    """Raised when an operation targets a toolchain that is not installed."""

    def __init__(self, toolchain_name: str):
        self.toolchain_name = toolchain_name
        super().__init__(f"Toolchain is not installed: {toolchain_name}")


class InstallError(ToolchainError):
    """Raised when a toolchain archive cannot be installed."""

    pass


class SignatureVerificationError(ToolchainError):
    """Raised when gpg rejects a downloaded toolchain signature."""

    pass


# ============================================================================
# Collaborator Exceptions
# ============================================================================


class ProcessError(SwiftkitError):
    """Raised when an external program fails or cannot be started."""

    def __init__(self, args, returncode=None, output: str = ""):
        self.args_list = list(args)
        self.returncode = returncode
        self.output = output
        command = " ".join(str(a) for a in self.args_list)
        if returncode is None:
            msg = f"Unable to run program: {command}"
        else:
            msg = f"Program exited with code {returncode}: {command}"
        super().__init__(msg)


class DownloadError(SwiftkitError):
    """Raised when a download fails."""

    pass


class FilesystemError(SwiftkitError):
    """Base exception for filesystem operation errors."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Raised when archive extraction fails."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Raised when an archive member would be written outside its destination."""

    pass
