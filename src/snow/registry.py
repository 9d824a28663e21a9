"""Link registry persistence (the snowlock)."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from .config import get_registry_path
from .constants import REGISTRY_VERSION
from .errors import RegistryCorruptError
from .logger import logger
from .types import LinkRegistry


def _compare_versions(a: str, b: str) -> int:
    """Compare two dotted version strings; negative if a < b."""
    parts_a = [int(x) for x in a.split(".")]
    parts_b = [int(x) for x in b.split(".")]

    for i in range(max(len(parts_a), len(parts_b))):
        val_a = parts_a[i] if i < len(parts_a) else 0
        val_b = parts_b[i] if i < len(parts_b) else 0
        if val_a != val_b:
            return val_a - val_b

    return 0


def load(path: Path | None = None) -> LinkRegistry:
    """Read and validate the registry. A missing file is an empty registry."""
    registry_path = path or get_registry_path()
    if not registry_path.exists():
        return LinkRegistry()

    try:
        raw = yaml.safe_load(registry_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as err:
        raise RegistryCorruptError(f"Cannot read link registry {registry_path}: {err}") from err

    if raw is None:
        return LinkRegistry()
    if not isinstance(raw, dict):
        raise RegistryCorruptError(f"Link registry {registry_path} is not a mapping")

    try:
        registry = LinkRegistry(**raw)
        newer = _compare_versions(registry.version, REGISTRY_VERSION) > 0
    except (ValidationError, ValueError, TypeError) as err:
        raise RegistryCorruptError(f"Invalid link registry {registry_path}: {err}") from err

    if newer:
        raise RegistryCorruptError(
            f"Link registry version {registry.version} is newer than "
            f"tooling version {REGISTRY_VERSION}. Update snow."
        )

    return registry


def save(registry: LinkRegistry, path: Path | None = None) -> None:
    """Atomically rewrite the whole registry file."""
    registry_path = path or get_registry_path()
    registry_path.parent.mkdir(parents=True, exist_ok=True)

    content = yaml.safe_dump(registry.model_dump(), sort_keys=False)

    # Write to temp file then rename so readers never see a half-written file
    tmp_path = registry_path.with_name(registry_path.name + ".tmp")
    tmp_path.write_text(content, encoding="utf-8")
    tmp_path.replace(registry_path)
    logger.debug("Saved link registry", path=str(registry_path), links=len(registry.links))


def delete_registry_file(path: Path | None = None) -> None:
    """Remove the registry file; a missing file is not an error."""
    registry_path = path or get_registry_path()
    registry_path.unlink(missing_ok=True)
    logger.info("Deleted link registry", path=str(registry_path))
