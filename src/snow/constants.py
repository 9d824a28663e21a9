"""snow constants."""

from __future__ import annotations

LOCK_FILE_NAME = ".snowlock"
REGISTRY_VERSION = "0.1.0"
WILDCARD = "*"
RESERVED_PREFIX = "."
