"""snow domain types."""

from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import REGISTRY_VERSION


class LinkRecord(BaseModel):
    package: str = Field(min_length=1)
    origin: str
    symlink: str

    @field_validator("origin", "symlink")
    @classmethod
    def _must_be_absolute(cls, value: str) -> str:
        if not os.path.isabs(value):
            raise ValueError(f"path must be absolute: {value}")
        return value


class LinkRegistry(BaseModel):
    """Every symlink snow has created, in creation order."""

    version: str = REGISTRY_VERSION
    links: list[LinkRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_symlinks(self) -> LinkRegistry:
        seen: set[str] = set()
        for record in self.links:
            if record.symlink in seen:
                raise ValueError(f"symlink recorded twice: {record.symlink}")
            seen.add(record.symlink)
        return self

    def add(self, package: str, origin: str, symlink: str) -> LinkRecord:
        """Record a link, replacing any earlier record for the same symlink."""
        record = LinkRecord(package=package, origin=origin, symlink=symlink)
        self.links = [r for r in self.links if r.symlink != symlink]
        self.links.append(record)
        return record

    def remove_by(self, package: str) -> list[LinkRecord]:
        """Remove every record owned by ``package`` and return them."""
        removed = [r for r in self.links if r.package == package]
        self.links = [r for r in self.links if r.package != package]
        return removed

    def remove_symlink(self, symlink: str) -> LinkRecord | None:
        record = next((r for r in self.links if r.symlink == symlink), None)
        if record is not None:
            self.links = [r for r in self.links if r.symlink != symlink]
        return record

    def find(self, package: str) -> LinkRecord | None:
        return next((r for r in self.links if r.package == package), None)

    def find_all(self, package: str) -> list[LinkRecord]:
        return [r for r in self.links if r.package == package]

    def list_links(self) -> list[LinkRecord]:
        return list(self.links)


class LinkOutcome(BaseModel):
    status: Literal["linked", "skipped", "error"]
    package: str
    origin: str
    symlink: str
    reason: str | None = None


class UnlinkOutcome(BaseModel):
    status: Literal["unlinked", "stale", "refused", "error"]
    package: str
    origin: str | None = None
    symlink: str | None = None
    reason: str | None = None
