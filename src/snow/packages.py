"""Resolution of package names to link."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .constants import RESERVED_PREFIX, WILDCARD
from .errors import PreconditionError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    PackageSource = Callable[[Path], set[str]]


def list_available_packages(cwd: Path) -> set[str]:
    """Every directory in ``cwd`` not starting with the reserved marker."""
    try:
        entries = list(cwd.iterdir())
    except OSError:
        return set()
    return {e.name for e in entries if e.is_dir() and not e.name.startswith(RESERVED_PREFIX)}


def expand_packages(
    requested: Iterable[str],
    source: PackageSource = list_available_packages,
    cwd: Path | None = None,
) -> list[str]:
    """Turn the requested names into the list of packages to link.

    A wildcard anywhere in the request means every available package.
    """
    names = list(requested)
    if not names:
        raise PreconditionError("No packages specified")

    if WILDCARD in names:
        return sorted(source(cwd or Path.cwd()))

    return list(dict.fromkeys(n.rstrip("/") or n for n in names))
