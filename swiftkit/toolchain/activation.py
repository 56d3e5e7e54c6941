"""
Active toolchain symlink management.

The bin directory on the user's PATH holds one symlink per executable of the
toolchain in use, each pointing into `<toolchains>/<name>/usr/bin`. Switching
toolchains removes the previous toolchain's links (after checking they really
are swiftkit's) and links the new toolchain's executables.

The manager's own executable lives in the same directory and is never
replaced or removed.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Set

from swiftkit.core.exceptions import ActivationError, IntegrityError
from swiftkit.core.filesystem import is_relative_to, path_exists, remove_path
from swiftkit.core.prompt import PromptFn, read_line
from swiftkit.toolchain.version import ToolchainVersion

logger = logging.getLogger(__name__)

SELF_EXECUTABLE = "swiftkit"


def _link_target(link_path: Path) -> Path:
    """Absolute path a symlink points at (one level, not fully resolved)."""
    target = Path(os.readlink(link_path))
    if not target.is_absolute():
        target = link_path.parent / target
    return target


class ToolchainActivator:
    """
    Switches the toolchain linked into the bin directory.

    Example:
        >>> activator = ToolchainActivator(paths.toolchains_dir, paths.bin_dir)
        >>> activator.use(ToolchainVersion.parse("5.10.1"), current=None)
        True
    """

    def __init__(
        self,
        toolchains_dir: Path,
        bin_dir: Path,
        prompt: PromptFn = read_line,
        self_executable: str = SELF_EXECUTABLE,
    ):
        """
        Initialize activator.

        Args:
            toolchains_dir: Root of the installed toolchains
            bin_dir: Shared directory the symlinks live in
            prompt: Line reader for the overwrite confirmation
            self_executable: Name of the manager's own executable
        """
        self.toolchains_dir = Path(toolchains_dir)
        self.bin_dir = Path(bin_dir)
        self.prompt = prompt
        self.self_executable = self_executable

    def toolchain_bin_dir(self, toolchain: ToolchainVersion) -> Path:
        return self.toolchains_dir / toolchain.name / "usr" / "bin"

    def use(
        self, target: ToolchainVersion, current: Optional[ToolchainVersion] = None
    ) -> bool:
        """
        Make target's executables the ones found in the bin directory.

        Args:
            target: Toolchain to activate
            current: Toolchain currently linked, deactivated first

        Returns:
            False if target is not installed or the user declined to
            overwrite existing executables, True once every link exists

        Raises:
            IntegrityError: If deactivating current finds entries swiftkit
                does not own
            ActivationError: If current's bin directory cannot be read
            OSError: If a link cannot be created; links made before the
                failure are kept
        """
        target_bin = self.toolchain_bin_dir(target)

        if not target_bin.is_dir():
            logger.debug(f"Toolchain {target.name} has no {target_bin}")
            return False

        if current is not None:
            self.unuse(current)

        self.bin_dir.mkdir(parents=True, exist_ok=True)

        executables = [
            name
            for name in self._executables(target_bin)
            if name != self.self_executable
        ]

        will_be_overwritten = sorted(self._foreign_entries(executables))
        if will_be_overwritten:
            print("The following existing executables will be overwritten:")
            for name in will_be_overwritten:
                print(f"  {self.bin_dir / name}")

            proceed = self.prompt("Proceed? (y/n)") or "n"
            if proceed.strip() != "y":
                print("Aborting use")
                return False

        for name in executables:
            link_path = self.bin_dir / name
            executable_path = target_bin / name

            # Deletion confirmed with user above
            remove_path(link_path)
            os.symlink(executable_path, link_path)
            logger.debug(f"Linked {link_path} -> {executable_path}")

        logger.info(f"Linked {len(executables)} executables from {target.name}")
        return True

    def unuse(self, current: ToolchainVersion) -> None:
        """
        Remove current's links from the bin directory.

        Every link is checked before it is removed: the entry must be a
        symlink and must point directly into current's bin directory.

        Args:
            current: Toolchain whose links should be removed

        Raises:
            ActivationError: If current's bin directory cannot be read
            IntegrityError: If an entry is not a symlink or points elsewhere
        """
        current_bin = self.toolchain_bin_dir(current)

        try:
            executables = self._executables(current_bin)
        except OSError as e:
            raise ActivationError(
                f"Unable to read executables of toolchain {current.name} "
                f"in {current_bin}: {e}"
            ) from e

        for name in executables:
            if name == self.self_executable:
                continue

            link_path = self.bin_dir / name

            if not path_exists(link_path):
                logger.debug(f"{link_path} already removed")
                continue

            if not link_path.is_symlink():
                raise IntegrityError(
                    "Found executable not managed by swiftkit in the bin "
                    f"directory: {link_path}",
                    path=link_path,
                )

            destination = _link_target(link_path)
            if destination.parent.resolve() != current_bin.resolve():
                raise IntegrityError(
                    "Found symlink that points to non-swiftkit managed "
                    f"executable: {destination}",
                    path=link_path,
                )

            link_path.unlink()
            logger.debug(f"Removed link {link_path}")

    def prune(self, toolchain: ToolchainVersion) -> int:
        """
        Remove links into a toolchain whose directory no longer exists.

        Unlike unuse(), this does not read the toolchain's bin directory, so
        it works after the toolchain was deleted behind swiftkit's back.

        Returns:
            Number of links removed
        """
        toolchain_bin = self.toolchain_bin_dir(toolchain).resolve()
        removed = 0
        for link_path in self.active_links():
            if _link_target(link_path).parent.resolve() == toolchain_bin:
                link_path.unlink()
                logger.debug(f"Removed stale link {link_path}")
                removed += 1
        return removed

    def active_links(self) -> List[Path]:
        """Symlinks in the bin directory that point into an installed toolchain."""
        if not self.bin_dir.is_dir():
            return []
        return sorted(
            entry
            for entry in self.bin_dir.iterdir()
            if entry.name != self.self_executable and self._is_managed_link(entry)
        )

    def _foreign_entries(self, executables: List[str]) -> Set[str]:
        """Names among executables occupied by something swiftkit does not own."""
        return {
            name
            for name in executables
            if path_exists(self.bin_dir / name)
            and not self._is_managed_link(self.bin_dir / name)
        }

    def _is_managed_link(self, path: Path) -> bool:
        if not path.is_symlink():
            return False
        destination = _link_target(path).parent.resolve()
        return is_relative_to(destination, self.toolchains_dir.resolve())

    @staticmethod
    def _executables(bin_dir: Path) -> List[str]:
        return sorted(entry.name for entry in bin_dir.iterdir())


__all__ = ["SELF_EXECUTABLE", "ToolchainActivator"]
