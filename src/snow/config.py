"""Configuration: environment lookups with a .env fallback."""

from __future__ import annotations

import os
from pathlib import Path

from .constants import LOCK_FILE_NAME
from .errors import PreconditionError


def read_env_file(keys: list[str], directory: Path | None = None) -> dict[str, str]:
    """Parse a .env file and return values for the requested keys.

    Values are returned, not exported into os.environ.
    """
    env_file = (directory or Path.cwd()) / ".env"
    try:
        content = env_file.read_text(encoding="utf-8")
    except OSError:
        return {}

    result: dict[str, str] = {}
    wanted = set(keys)

    for line in content.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        key, sep, value = trimmed.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key not in wanted:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        if value:
            result[key] = value

    return result


def get_setting(key: str, default: str = "") -> str:
    """Look a setting up in os.environ, then in ./.env."""
    return os.environ.get(key) or read_env_file([key]).get(key, default)


LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "WARNING").upper()


def get_registry_path() -> Path:
    """Location of the link registry (SNOW_LOCKFILE, default ~/.snowlock)."""
    configured = get_setting("SNOW_LOCKFILE")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / LOCK_FILE_NAME


def resolve_target_dir(target: str | None = None) -> Path:
    """Resolve the directory packages are linked into.

    An explicit ``target`` wins; ``~`` or no value falls back to SNOW_TARGET
    and then to the home directory. The result must be an existing directory.
    """
    if not target or target == "~":
        target = get_setting("SNOW_TARGET") or "~"

    target_dir = Path(target).expanduser()
    if not target_dir.is_dir():
        raise PreconditionError(f"Target dir does not exist: {target_dir}")
    return target_dir.resolve()
