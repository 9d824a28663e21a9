"""Error types raised by the snow core."""

from __future__ import annotations


class SnowError(Exception):
    """Base class for snow errors."""


class PreconditionError(SnowError):
    """Invalid input detected before any filesystem mutation."""


class InvalidPathError(SnowError, ValueError):
    """A path that must be absolute was not."""


class RegistryCorruptError(SnowError):
    """The link registry exists but cannot be trusted."""


class IdentityMismatchError(SnowError):
    """A recorded symlink resolves to something other than its origin."""

    def __init__(self, symlink: str, origin: str) -> None:
        super().__init__(f"The symlink is not pointing to the package: {symlink} (expected {origin})")
        self.symlink = symlink
        self.origin = origin


class IdentityCheckError(SnowError):
    """The identity of a recorded symlink could not be verified."""

    def __init__(self, symlink: str, reason: str) -> None:
        super().__init__(f"Cannot verify symlink {symlink}: {reason}")
        self.symlink = symlink
        self.reason = reason
