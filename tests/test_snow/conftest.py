"""Shared fixtures for snow tests."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest


@dataclass
class SnowDirs:
    root: Path
    packages: Path
    target: Path
    lockfile: Path


@pytest.fixture()
def snow_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> SnowDirs:
    """Create a home dir with a dotfiles checkout inside it and chdir there.

    The registry lives in the home dir, located through SNOW_LOCKFILE.
    """
    root = tmp_path.resolve()
    home = root / "home" / "u"
    packages = home / "dotfiles"
    packages.mkdir(parents=True)
    lockfile = home / ".snowlock"

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("SNOW_LOCKFILE", str(lockfile))
    monkeypatch.delenv("SNOW_TARGET", raising=False)
    monkeypatch.chdir(packages)
    return SnowDirs(root=root, packages=packages, target=home, lockfile=lockfile)


def make_package(packages: Path, name: str, files: dict[str, str]) -> Path:
    """Create a package dir holding ``files`` (relative path -> content)."""
    package_dir = packages / name
    package_dir.mkdir(parents=True, exist_ok=True)
    for rel_path, content in files.items():
        full_path = package_dir / rel_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content, encoding="utf-8")
    return package_dir
