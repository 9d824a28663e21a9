"""snow: symlink-farm manager that links package directories into a target tree."""

from __future__ import annotations

from .errors import (
    IdentityCheckError,
    IdentityMismatchError,
    InvalidPathError,
    PreconditionError,
    RegistryCorruptError,
    SnowError,
)
from .linker import link_package, link_packages, make_symlink
from .packages import expand_packages, list_available_packages
from .pathutil import common_prefix, is_same_file, relative, symlink_real_path
from .registry import delete_registry_file, load, save
from .types import LinkOutcome, LinkRecord, LinkRegistry, UnlinkOutcome
from .unlinker import check_link, prune, unlink_packages, unlink_record

__all__ = [
    # errors
    "IdentityCheckError",
    "IdentityMismatchError",
    "InvalidPathError",
    "PreconditionError",
    "RegistryCorruptError",
    "SnowError",
    # linker
    "link_package",
    "link_packages",
    "make_symlink",
    # packages
    "expand_packages",
    "list_available_packages",
    # pathutil
    "common_prefix",
    "is_same_file",
    "relative",
    "symlink_real_path",
    # registry
    "delete_registry_file",
    "load",
    "save",
    # types
    "LinkOutcome",
    "LinkRecord",
    "LinkRegistry",
    "UnlinkOutcome",
    # unlinker
    "check_link",
    "prune",
    "unlink_packages",
    "unlink_record",
]
