"""Guarded removal of recorded symlinks."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from . import registry as registry_store
from .config import get_registry_path
from .errors import IdentityCheckError, IdentityMismatchError, PreconditionError
from .logger import logger
from .pathutil import is_same_file, symlink_real_path
from .types import UnlinkOutcome

if TYPE_CHECKING:
    from .types import LinkRecord, LinkRegistry


def _outcome(status: str, record: LinkRecord, reason: str | None = None) -> UnlinkOutcome:
    return UnlinkOutcome(
        status=status,
        package=record.package,
        origin=record.origin,
        symlink=record.symlink,
        reason=reason,
    )


def check_link(record: LinkRecord) -> None:
    """Verify that the recorded symlink still resolves to its origin.

    Raises IdentityMismatchError when it provably points elsewhere, and
    IdentityCheckError when the check itself cannot be carried out.
    """
    link = Path(record.symlink)
    if not link.is_symlink():
        raise IdentityCheckError(record.symlink, "not a symlink")

    try:
        real_path = symlink_real_path(link)
        same = is_same_file(record.origin, real_path)
    except OSError as err:
        raise IdentityCheckError(record.symlink, err.strerror or str(err)) from err

    if not same:
        raise IdentityMismatchError(record.symlink, record.origin)


def unlink_record(
    record: LinkRecord,
    registry: LinkRegistry,
    force: bool = False,
    registry_path: Path | None = None,
) -> UnlinkOutcome:
    """Delete one recorded symlink and drop it from the registry."""
    if not os.path.lexists(record.symlink):
        logger.debug("Symlink already gone, dropping record", symlink=record.symlink)
        registry.remove_symlink(record.symlink)
        return _save_after(registry, registry_path, _outcome("stale", record, "symlink no longer exists"))

    # Even with force, only symlinks are ever deleted
    if not os.path.islink(record.symlink):
        logger.debug("Refusing to unlink", symlink=record.symlink, reason="not a symlink")
        return _outcome("refused", record, "not a symlink")

    if not force:
        try:
            check_link(record)
        except (IdentityMismatchError, IdentityCheckError) as err:
            logger.debug("Refusing to unlink", symlink=record.symlink, reason=str(err))
            return _outcome("refused", record, str(err))

    try:
        os.unlink(record.symlink)
    except OSError as err:
        logger.info("Failed to remove symlink", symlink=record.symlink, error=str(err))
        return _outcome("error", record, str(err))

    logger.info("Unlinked", symlink=record.symlink)
    registry.remove_symlink(record.symlink)
    return _save_after(registry, registry_path, _outcome("unlinked", record))


def _save_after(registry: LinkRegistry, registry_path: Path | None, outcome: UnlinkOutcome) -> UnlinkOutcome:
    """Persist the registry; a write failure turns ``outcome`` into an error."""
    try:
        registry_store.save(registry, registry_path)
    except OSError as err:
        logger.info("Failed to save link registry", symlink=outcome.symlink, error=str(err))
        return outcome.model_copy(update={"status": "error", "reason": f"cannot update registry: {err}"})
    return outcome


def unlink_packages(
    packages: list[str],
    force: bool = False,
    *,
    registry_path: Path | None = None,
) -> list[UnlinkOutcome]:
    """Remove every recorded link of each named package."""
    if not packages:
        raise PreconditionError("No packages specified")

    registry = registry_store.load(registry_path)
    outcomes: list[UnlinkOutcome] = []

    for package in dict.fromkeys(packages):
        records = registry.find_all(package)
        if not records:
            logger.debug("Package is not linked", package=package)
            outcomes.append(UnlinkOutcome(status="error", package=package, reason="not linked"))
            continue
        for record in records:
            outcomes.append(unlink_record(record, registry, force, registry_path))

    return outcomes


def prune(registry_path: Path | None = None) -> list[UnlinkOutcome]:
    """Remove every recorded symlink, then the registry file itself."""
    registry = registry_store.load(registry_path)
    outcomes: list[UnlinkOutcome] = []

    for record in registry.list_links():
        if os.path.lexists(record.symlink) and not os.path.islink(record.symlink):
            logger.info("Not removing, no longer a symlink", symlink=record.symlink)
            outcomes.append(_outcome("error", record, "not a symlink"))
            continue
        try:
            os.unlink(record.symlink)
        except FileNotFoundError:
            outcomes.append(_outcome("stale", record, "symlink no longer exists"))
            continue
        except OSError as err:
            logger.info("Failed to remove symlink", symlink=record.symlink, error=str(err))
            outcomes.append(_outcome("error", record, str(err)))
            continue
        logger.info("Removed", symlink=record.symlink)
        outcomes.append(_outcome("unlinked", record))

    try:
        registry_store.delete_registry_file(registry_path)
    except OSError as err:
        registry_file = registry_path or get_registry_path()
        logger.info("Failed to delete link registry", path=str(registry_file), error=str(err))
        outcomes.append(
            UnlinkOutcome(status="error", package="*", symlink=str(registry_file), reason=f"cannot delete registry: {err}")
        )
    return outcomes
