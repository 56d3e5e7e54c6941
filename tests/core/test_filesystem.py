"""
Unit tests for filesystem utilities.
"""

import io
import os
import tarfile

import pytest

from swiftkit.core.exceptions import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
)
from swiftkit.core.filesystem import (
    atomic_write,
    extract_archive,
    is_relative_to,
    path_exists,
    remove_path,
    safe_rmtree,
    strip_first_component,
    temporary_file,
)


def add_file(tar, name, data=b"data"):
    info = tarfile.TarInfo(name)
    info.size = len(data)
    tar.addfile(info, io.BytesIO(data))


class TestStripFirstComponent:
    """Test strip_first_component()."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("swift-5.10.1-RELEASE-ubuntu22.04/usr/bin/swift", "usr/bin/swift"),
            ("swift-5.10.1-RELEASE-ubuntu22.04/", ""),
            ("swift-5.10.1-RELEASE-ubuntu22.04", ""),
            ("./top/usr/lib/", "usr/lib"),
            ("top/.hidden", ".hidden"),
        ],
    )
    def test_strip(self, name, expected):
        """Test the leading directory is dropped."""
        assert strip_first_component(name) == expected


class TestExtractArchive:
    """Test extract_archive()."""

    def test_extract_with_rename(self, temp_dir, make_toolchain_archive):
        """Test members are renamed and the top directory is skipped."""
        archive = make_toolchain_archive(top_dir="top")
        dest = temp_dir / "out"

        count = extract_archive(archive, dest, rename=strip_first_component)

        # usr, usr/bin and three executables
        assert count == 5
        assert (dest / "usr" / "bin" / "swift").read_text().startswith("#!/bin/sh")
        assert os.access(dest / "usr" / "bin" / "swift", os.X_OK)

    def test_extract_without_rename(self, temp_dir, make_toolchain_archive):
        """Test names are kept when no rename is given."""
        archive = make_toolchain_archive(top_dir="top")

        extract_archive(archive, temp_dir / "out")

        assert (temp_dir / "out" / "top" / "usr" / "bin" / "swift").exists()

    def test_traversal_blocked(self, temp_dir, make_toolchain_archive):
        """Test a member escaping the destination aborts extraction."""
        archive = make_toolchain_archive(
            top_dir="top", extra_members=["top/../../evil"]
        )
        dest = temp_dir / "out"

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, dest, rename=strip_first_component)

        assert not (temp_dir / "evil").exists()
        assert not (dest / "usr" / "bin" / "swift").exists()

    def test_symlink_escape_blocked(self, temp_dir):
        """Test a file written through an outward symlink is refused."""
        outside = temp_dir / "outside"
        outside.mkdir()
        archive = temp_dir / "escape.tar.gz"
        with tarfile.open(archive, "w:gz") as tar:
            link = tarfile.TarInfo("swift-x/usr/lib/link")
            link.type = tarfile.SYMTYPE
            link.linkname = str(outside)
            tar.addfile(link)
            add_file(tar, "swift-x/usr/lib/link/pwned", b"owned")

        dest = temp_dir / "out"
        with pytest.raises(InsecureArchiveError, match="points outside"):
            extract_archive(archive, dest, rename=strip_first_component)

        assert not (outside / "pwned").exists()
        assert not os.path.lexists(dest / "usr" / "lib" / "link")

    def test_relative_symlink_escape_blocked(self, temp_dir):
        """Test a relative link climbing out of the destination is refused."""
        archive = temp_dir / "escape.tar.gz"
        with tarfile.open(archive, "w:gz") as tar:
            link = tarfile.TarInfo("top/usr/bin/swift")
            link.type = tarfile.SYMTYPE
            link.linkname = "../../../etc/passwd"
            tar.addfile(link)

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, temp_dir / "out", rename=strip_first_component)

    def test_internal_symlink_kept(self, temp_dir):
        """Test links between toolchain executables are extracted."""
        archive = temp_dir / "links.tar.gz"
        with tarfile.open(archive, "w:gz") as tar:
            add_file(tar, "top/usr/bin/swift-frontend", b"frontend")
            link = tarfile.TarInfo("top/usr/bin/swiftc")
            link.type = tarfile.SYMTYPE
            link.linkname = "swift-frontend"
            tar.addfile(link)

        dest = temp_dir / "out"
        extract_archive(archive, dest, rename=strip_first_component)

        swiftc = dest / "usr" / "bin" / "swiftc"
        assert swiftc.is_symlink()
        assert swiftc.read_bytes() == b"frontend"

    def test_hardlink_target_renamed(self, temp_dir):
        """Test hard link targets go through rename too."""
        archive = temp_dir / "links.tar.gz"
        with tarfile.open(archive, "w:gz") as tar:
            add_file(tar, "top/usr/bin/swift-driver", b"driver")
            link = tarfile.TarInfo("top/usr/bin/swiftc")
            link.type = tarfile.LNKTYPE
            link.linkname = "top/usr/bin/swift-driver"
            tar.addfile(link)

        dest = temp_dir / "out"
        extract_archive(archive, dest, rename=strip_first_component)

        assert (dest / "usr" / "bin" / "swiftc").read_bytes() == b"driver"

    def test_corrupt_archive(self, temp_dir):
        """Test a non-archive file raises ArchiveExtractionError."""
        archive = temp_dir / "bad.tar.gz"
        archive.write_bytes(b"this is not a tarball")

        with pytest.raises(ArchiveExtractionError, match="Unsupported or corrupt"):
            extract_archive(archive, temp_dir / "out")

    def test_missing_archive(self, temp_dir):
        """Test a missing archive raises ArchiveExtractionError."""
        with pytest.raises(ArchiveExtractionError, match="Archive not found"):
            extract_archive(temp_dir / "nope.tar.gz", temp_dir / "out")


class TestRemovePath:
    """Test remove_path() and path_exists()."""

    def test_remove_file(self, temp_dir):
        """Test a regular file is removed."""
        target = temp_dir / "file"
        target.write_text("x")

        assert remove_path(target) is True
        assert not target.exists()

    def test_remove_symlink_not_target(self, temp_dir):
        """Test a symlink to a directory is removed without following it."""
        real = temp_dir / "real"
        real.mkdir()
        (real / "keep").write_text("x")
        link = temp_dir / "link"
        os.symlink(real, link)

        assert remove_path(link) is True
        assert not path_exists(link)
        assert (real / "keep").exists()

    def test_remove_dangling_symlink(self, temp_dir):
        """Test a dangling symlink still counts as existing."""
        link = temp_dir / "dangling"
        os.symlink(temp_dir / "missing", link)

        assert path_exists(link)
        assert remove_path(link) is True
        assert not path_exists(link)

    def test_remove_directory(self, temp_dir):
        """Test a directory tree is removed."""
        tree = temp_dir / "tree"
        (tree / "sub").mkdir(parents=True)

        assert remove_path(tree) is True
        assert not tree.exists()

    def test_remove_missing(self, temp_dir):
        """Test nothing to remove returns False."""
        assert remove_path(temp_dir / "missing") is False


class TestSafeRmtree:
    """Test safe_rmtree()."""

    def test_remove_under_prefix(self, temp_dir):
        """Test removal inside the required prefix."""
        tree = temp_dir / "toolchains" / "5.10.1"
        tree.mkdir(parents=True)

        safe_rmtree(tree, require_prefix=temp_dir / "toolchains")

        assert not tree.exists()

    def test_refuse_outside_prefix(self, temp_dir):
        """Test removal outside the prefix is refused."""
        tree = temp_dir / "elsewhere"
        tree.mkdir()

        with pytest.raises(ValueError, match="Refusing to delete"):
            safe_rmtree(tree, require_prefix=temp_dir / "toolchains")

        assert tree.exists()

    def test_not_a_directory(self, temp_dir):
        """Test a file is refused."""
        target = temp_dir / "file"
        target.write_text("x")

        with pytest.raises(FilesystemError, match="not a directory"):
            safe_rmtree(target)

    def test_missing_is_noop(self, temp_dir):
        """Test a missing path is ignored."""
        safe_rmtree(temp_dir / "missing")


class TestAtomicWrite:
    """Test atomic_write()."""

    def test_write_text(self, temp_dir):
        """Test text content is written and no temp files remain."""
        target = temp_dir / "sub" / "state.json"

        atomic_write(target, "{}")

        assert target.read_text() == "{}"
        assert [p.name for p in target.parent.iterdir()] == ["state.json"]

    def test_write_bytes(self, temp_dir):
        """Test bytes content is written."""
        target = temp_dir / "blob"

        atomic_write(target, b"\x00\x01")

        assert target.read_bytes() == b"\x00\x01"


class TestTemporaryFile:
    """Test temporary_file()."""

    def test_private_and_removed(self):
        """Test the file is 0600 inside the block and gone after it."""
        with temporary_file(suffix=".sig") as path:
            assert path.exists()
            assert path.name.startswith("swiftkit-")
            assert path.suffix == ".sig"
            assert path.stat().st_mode & 0o777 == 0o600

        assert not path.exists()

    def test_removed_on_error(self):
        """Test the file is removed when the block raises."""
        with pytest.raises(RuntimeError):
            with temporary_file() as path:
                raise RuntimeError("boom")

        assert not path.exists()


class TestIsRelativeTo:
    """Test is_relative_to()."""

    def test_inside_and_outside(self, temp_dir):
        """Test containment checks."""
        assert is_relative_to(temp_dir / "a" / "b", temp_dir)
        assert not is_relative_to(temp_dir.parent, temp_dir)
