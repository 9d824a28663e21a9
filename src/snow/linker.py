"""Recursive merge of package directories into the target tree."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from . import registry as registry_store
from .logger import logger
from .pathutil import is_same_file, relative, symlink_real_path
from .types import LinkOutcome

if TYPE_CHECKING:
    from .types import LinkRegistry


def _outcome(status: str, package: str, origin: Path, target: Path, reason: str | None = None) -> LinkOutcome:
    return LinkOutcome(status=status, package=package, origin=str(origin), symlink=str(target), reason=reason)


def _points_to(link: Path, origin: Path) -> bool:
    try:
        return is_same_file(symlink_real_path(link), origin)
    except OSError:
        return False


def make_symlink(
    origin: Path,
    target: Path,
    package: str,
    registry: LinkRegistry,
    registry_path: Path | None = None,
) -> LinkOutcome:
    """Create ``target`` pointing at ``origin`` and record it right away."""
    link_target = relative(str(origin), str(target))
    try:
        os.symlink(link_target, target)
    except OSError as err:
        logger.info("Failed to create symlink", symlink=str(target), origin=str(origin), error=str(err))
        return _outcome("error", package, origin, target, str(err))

    registry.add(package, str(origin), str(target))
    try:
        registry_store.save(registry, registry_path)
    except OSError as err:
        # every link on disk must be in the registry
        registry.remove_symlink(str(target))
        target.unlink(missing_ok=True)
        logger.info("Failed to record symlink", symlink=str(target), error=str(err))
        return _outcome("error", package, origin, target, f"cannot record link: {err}")

    logger.info("Symlinked", symlink=str(target), target=link_target)
    return _outcome("linked", package, origin, target)


def _link_dir_entry(
    entry: Path,
    target: Path,
    target_dir: Path,
    package_dir: Path,
    package: str,
    force: bool,
    registry: LinkRegistry,
    registry_path: Path | None,
) -> list[LinkOutcome]:
    if target.is_symlink():
        if not force:
            reason = "already linked" if _points_to(target, entry) else "target is a symlink"
            logger.debug("Skipped", symlink=str(target), reason=reason)
            return [_outcome("skipped", package, entry, target, reason)]
        target.unlink()
        logger.info("Removed existing symlink", symlink=str(target))

    if target.is_dir():
        return link_package(target_dir, package_dir, entry, force, registry, registry_path)

    if not os.path.lexists(target):
        return [make_symlink(entry, target, package, registry, registry_path)]

    logger.debug("Skipped", symlink=str(target), reason="target exists and is not a directory")
    return [_outcome("skipped", package, entry, target, "target exists and is not a directory")]


def _link_file_entry(
    entry: Path,
    target: Path,
    package: str,
    force: bool,
    registry: LinkRegistry,
    registry_path: Path | None,
) -> LinkOutcome:
    if os.path.lexists(target):
        if not force:
            reason = "already linked" if target.is_symlink() and _points_to(target, entry) else "target exists"
            logger.debug("Skipped", symlink=str(target), reason=reason)
            return _outcome("skipped", package, entry, target, reason)
        try:
            target.unlink()
        except OSError as err:
            logger.debug("Cannot overwrite target", symlink=str(target), error=str(err))
            return _outcome("skipped", package, entry, target, f"cannot overwrite: {err}")
        logger.info("Removed existing file", symlink=str(target))

    return make_symlink(entry, target, package, registry, registry_path)


def link_package(
    target_dir: Path,
    package_dir: Path,
    current_subdir: Path,
    force: bool,
    registry: LinkRegistry,
    registry_path: Path | None = None,
) -> list[LinkOutcome]:
    """Mirror ``current_subdir`` (inside ``package_dir``) into ``target_dir``.

    Directories already present in the target are merged by recursing into
    them; anything missing is represented by a single symlink. Errors on one
    entry are reported in the returned outcomes and do not stop the walk.
    """
    package = package_dir.name
    outcomes: list[LinkOutcome] = []

    try:
        entries = sorted(current_subdir.iterdir())
    except OSError as err:
        logger.info("Cannot read directory", path=str(current_subdir), error=str(err))
        target = target_dir / current_subdir.relative_to(package_dir)
        return [_outcome("error", package, current_subdir, target, str(err))]

    for entry in entries:
        target = target_dir / entry.relative_to(package_dir)
        try:
            if entry.is_dir():
                outcomes.extend(
                    _link_dir_entry(entry, target, target_dir, package_dir, package, force, registry, registry_path)
                )
            elif entry.is_file():
                outcomes.append(_link_file_entry(entry, target, package, force, registry, registry_path))
            else:
                logger.debug("Skipped unsupported entry", path=str(entry))
                outcomes.append(_outcome("skipped", package, entry, target, "unsupported entry type"))
        except OSError as err:
            logger.info("Failed to link entry", path=str(entry), symlink=str(target), error=str(err))
            outcomes.append(_outcome("error", package, entry, target, str(err)))

    return outcomes


def link_packages(
    target_dir: Path,
    packages: list[str],
    force: bool = False,
    *,
    cwd: Path | None = None,
    registry_path: Path | None = None,
) -> list[LinkOutcome]:
    """Link each package under ``cwd`` into ``target_dir``, one after another."""
    base_dir = (cwd or Path.cwd()).resolve()
    target_dir = target_dir.resolve()
    registry = registry_store.load(registry_path)

    outcomes: list[LinkOutcome] = []
    for name in packages:
        package_dir = Path(os.path.normpath(base_dir / name))
        if not package_dir.is_dir():
            logger.info("Package not found", package=name, path=str(package_dir))
            outcomes.append(_outcome("error", name, package_dir, target_dir, "package not found"))
            continue

        logger.info("Linking package", package=package_dir.name, target=str(target_dir))
        outcomes.extend(link_package(target_dir, package_dir, package_dir, force, registry, registry_path))

    return outcomes
