"""
Directory layout for swiftkit.

This module resolves the directories swiftkit reads and mutates. All
persistent state lives in these directories; nothing is kept between
invocations in memory.

Directory Structure:
    Data directory ($SWIFTKIT_HOME_DIR, $XDG_DATA_HOME/swiftkit or
    ~/.local/share/swiftkit):
        - toolchains/     : Extracted toolchain installations, one per name
        - state.json      : Platform, in-use toolchain and installed list
        - settings.yaml   : Optional user settings

    Bin directory ($SWIFTKIT_BIN_DIR or ~/.local/bin):
        - swiftkit        : The manager's own executable (never touched)
        - swift, swiftc.. : Symlinks into the in-use toolchain's usr/bin
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

HOME_DIR_ENV = "SWIFTKIT_HOME_DIR"
BIN_DIR_ENV = "SWIFTKIT_BIN_DIR"


def get_data_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the swiftkit data directory.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Path to the data directory (not created)

    Example:
        >>> get_data_dir({"XDG_DATA_HOME": "/data"})
        PosixPath('/data/swiftkit')
    """
    env = os.environ if environ is None else environ

    if env.get(HOME_DIR_ENV):
        return Path(env[HOME_DIR_ENV])
    if env.get("XDG_DATA_HOME"):
        return Path(env["XDG_DATA_HOME"]) / "swiftkit"
    return Path.home() / ".local" / "share" / "swiftkit"


def get_bin_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the shared bin directory holding the toolchain symlinks.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Path to the bin directory (not created)
    """
    env = os.environ if environ is None else environ

    if env.get(BIN_DIR_ENV):
        return Path(env[BIN_DIR_ENV])
    return Path.home() / ".local" / "bin"


def get_toolchains_dir(data_dir: Optional[Path] = None) -> Path:
    """Get the directory holding one subdirectory per installed toolchain."""
    return (data_dir or get_data_dir()) / "toolchains"


@dataclass(frozen=True)
class SwiftkitPaths:
    """
    Resolved swiftkit directories.

    Attributes:
        data_dir: Root of swiftkit's own files
        bin_dir: Shared directory on the user's PATH
        toolchains_dir: Root of the installed toolchains
    """

    data_dir: Path
    bin_dir: Path
    toolchains_dir: Path

    @property
    def state_file(self) -> Path:
        return self.data_dir / "state.json"

    @property
    def settings_file(self) -> Path:
        return self.data_dir / "settings.yaml"

    @classmethod
    def from_environment(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "SwiftkitPaths":
        """Resolve every directory from the environment."""
        data_dir = get_data_dir(environ)
        paths = cls(
            data_dir=data_dir,
            bin_dir=get_bin_dir(environ),
            toolchains_dir=get_toolchains_dir(data_dir),
        )
        logger.debug(f"Resolved swiftkit paths: {paths}")
        return paths

    def toolchain_dir(self, name: str) -> Path:
        """Installation root of the toolchain called `name`."""
        return self.toolchains_dir / name

    def toolchain_bin_dir(self, name: str) -> Path:
        """Executable directory of the toolchain called `name`."""
        return self.toolchains_dir / name / "usr" / "bin"


__all__ = [
    "HOME_DIR_ENV",
    "BIN_DIR_ENV",
    "get_data_dir",
    "get_bin_dir",
    "get_toolchains_dir",
    "SwiftkitPaths",
]
