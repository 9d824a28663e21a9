"""Path arithmetic and identity checks for symlinks."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import InvalidPathError


def common_prefix(path1: str, path2: str) -> list[str]:
    """Return the leading path components shared by both paths."""
    common: list[str] = []
    for c1, c2 in zip(Path(path1).parts, Path(path2).parts):
        if c1 != c2:
            break
        common.append(c1)
    return common


def relative(origin: str, symlink: str) -> str:
    """Compute the target a symlink at ``symlink`` needs to reach ``origin``.

    The result is relative to the symlink's directory, so the link keeps
    working when origin and symlink move together. When the two paths share
    nothing below the root, ``origin`` is returned unchanged.
    """
    if not os.path.isabs(origin) or not os.path.isabs(symlink):
        raise InvalidPathError("Both origin and symlink must be absolute paths")

    origin = os.path.normpath(origin)
    link_dir = os.path.dirname(os.path.normpath(symlink))

    common = common_prefix(origin, link_dir)
    if len(common) <= 1:
        return origin

    base1 = Path(origin).parts[len(common) :]
    base2 = Path(link_dir).parts[len(common) :]

    parts = [os.pardir] * len(base2) + list(base1)
    if not parts:
        return os.curdir
    return os.path.join(*parts)


def symlink_real_path(link: str | Path) -> Path:
    """Read ``link`` and join its target with the link's own directory."""
    link_path = Path(link)
    target = os.readlink(link_path)
    # Path joining keeps an absolute target as is
    return link_path.parent / target


def is_same_file(file1: str | Path, file2: str | Path) -> bool:
    """Check whether two paths are the same file by device and inode.

    Raises OSError if either path cannot be stat'ed.
    """
    stat1 = os.stat(file1)
    stat2 = os.stat(file2)
    return stat1.st_ino == stat2.st_ino and stat1.st_dev == stat2.st_dev
