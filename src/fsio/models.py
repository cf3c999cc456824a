"""Enums and dataclasses shared across fsio modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AccessMode(str, Enum):
    """Access rights an open file handle was created with."""

    READ = "read"
    WRITE = "write"
    READ_WRITE = "read and write"

    @property
    def can_read(self) -> bool:
        return self in (AccessMode.READ, AccessMode.READ_WRITE)

    @property
    def can_write(self) -> bool:
        return self in (AccessMode.WRITE, AccessMode.READ_WRITE)


class AccessKind(str, Enum):
    """Operation kind attached to file and folder access failures."""

    READ = "read"
    WRITE = "write"
    READ_WRITE = "read and write"
    CREATE = "create"
    DELETE = "delete"


@dataclass(frozen=True)
class PathInfo:
    dirname: str
    basename: str
    extension: str
    filename: str

    def get(self, part: str) -> str:
        if part not in PATHINFO_PARTS:
            raise ValueError(f"Unknown path info part: {part}")
        return getattr(self, part)


PATHINFO_PARTS = ("dirname", "basename", "extension", "filename")


@dataclass(frozen=True)
class ZipEntry:
    """One archive member: a file copied from ``source_path`` or, without one, a folder."""

    arcname: str
    source_path: str | None = None

    @property
    def is_folder(self) -> bool:
        return self.source_path is None
