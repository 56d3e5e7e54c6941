"""
Filesystem utilities for swiftkit.

This module provides the file operations the installer and activator rely on:
- Archive extraction with per-member renaming and traversal protection
- Private temporary files that are always cleaned up
- Atomic file writes
- Safe removal of files, links and directory trees
"""

import logging
import os
import shutil
import tarfile
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from swiftkit.core.exceptions import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Args:
        path: Path to check
        parent: Parent directory

    Returns:
        True if path is under parent directory

    Example:
        >>> is_relative_to(Path("/home/user/.local/bin/swift"), Path("/home/user"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def path_exists(path: Path) -> bool:
    """True if anything, including a dangling symlink, exists at path."""
    return os.path.lexists(path)


def remove_path(path: Union[str, Path]) -> bool:
    """
    Remove a file, symlink or directory tree if present.

    Symlinks are removed themselves, never followed.

    Args:
        path: Path to remove

    Returns:
        True if something was removed, False if nothing existed
    """
    path = Path(path)

    if not path_exists(path):
        return False

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()

    logger.debug(f"Removed {path}")
    return True


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Prevents directory traversal attacks (e.g., paths containing '../').

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def _validate_symlink_target(member: tarfile.TarInfo, destination: Path) -> None:
    """
    Validate that a symlink member points inside destination.

    The link target is resolved against the directory holding the link, so
    later members written through the link cannot land outside destination.

    Raises:
        InsecureArchiveError: If the link target leaves destination
    """
    link_dir = (destination / member.name).parent
    target = (link_dir / member.linkname).resolve()

    if not is_relative_to(target, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive symlink '{member.name}' -> '{member.linkname}' points "
            "outside the extraction directory. Extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    rename: Optional[Callable[[str], Optional[str]]] = None,
) -> int:
    """
    Extract a tar archive (any compression tarfile understands).

    Every member name is passed through `rename`, which returns the path
    relative to `destination` the member should be written to, or None/""
    to skip the member.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to
        rename: Optional member-name transform

    Returns:
        Number of members written

    Raises:
        ArchiveExtractionError: If the archive cannot be read or extracted
        InsecureArchiveError: If a member would land outside destination

    Example:
        >>> extract_archive(
        ...     "swift-5.10.1-RELEASE-ubuntu22.04.tar.gz",
        ...     toolchains_dir / "5.10.1",
        ...     rename=strip_first_component,
        ... )
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    try:
        with tarfile.open(archive_path, "r:*") as tar:
            members = tar.getmembers()

            # Rename and validate everything before writing anything
            selected = []
            for member in members:
                new_name = rename(member.name) if rename else member.name
                if not new_name:
                    continue
                _validate_archive_path(new_name, destination)
                member.name = new_name

                if member.issym():
                    _validate_symlink_target(member, destination)
                elif member.islnk():
                    new_link = rename(member.linkname) if rename else member.linkname
                    if not new_link:
                        continue
                    _validate_archive_path(new_link, destination)
                    member.linkname = new_link

                selected.append(member)

            for member in selected:
                if hasattr(tarfile, "data_filter"):
                    tar.extract(member, destination, filter="data")
                else:
                    tar.extract(member, destination)

    except (InsecureArchiveError, ArchiveExtractionError):
        raise
    except tarfile.ReadError as e:
        raise ArchiveExtractionError(
            f"Unsupported or corrupt archive {archive_path}: {e}"
        ) from e
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    logger.debug(f"Extracted {len(selected)} entries from {archive_path}")
    return len(selected)


def strip_first_component(name: str) -> str:
    """
    Drop the leading directory from an archive member name.

    Example:
        >>> strip_first_component("swift-5.10.1-RELEASE-ubuntu22.04/usr/bin/swift")
        'usr/bin/swift'
        >>> strip_first_component("swift-5.10.1-RELEASE-ubuntu22.04/")
        ''
    """
    if name.startswith("./"):
        name = name[2:]
    _, _, rest = name.partition("/")
    return rest.rstrip("/")


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    This ensures the file is never in a partially-written state.
    If the write fails, the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Create temp file in same directory (ensures same filesystem)
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


@contextmanager
def temporary_file(prefix: str = "swiftkit-", suffix: str = "") -> Iterator[Path]:
    """
    Context manager for a private (0600) temporary file.

    The file exists when the block starts and is removed on every exit path.

    Example:
        >>> with temporary_file(suffix=".asc") as keys:
        ...     client.download_file(SWIFT_KEYS_URL, keys)
    """
    fd, path_str = tempfile.mkstemp(prefix=prefix, suffix=suffix)
    os.close(fd)
    temp_path = Path(path_str)

    try:
        yield temp_path
    finally:
        temp_path.unlink(missing_ok=True)


__all__ = [
    "is_relative_to",
    "path_exists",
    "remove_path",
    "safe_rmtree",
    "extract_archive",
    "strip_first_component",
    "atomic_write",
    "temporary_file",
]
