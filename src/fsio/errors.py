"""Typed exceptions for fsio.

Every IO failure derives from :class:`PathIOError` and carries the path that
triggered it. Access failures additionally carry an :class:`AccessKind` so
callers can branch on the failed operation.
"""

from __future__ import annotations

from typing import TypeVar

from .models import AccessKind


class FsioError(Exception):
    """Base exception for fsio failures."""


class ConfigError(ValueError, FsioError):
    """Raised when settings are missing or malformed."""


class PathIOError(FsioError):
    """Raised when an operation on a filesystem path fails."""

    summary = ""

    def __init__(
        self,
        path: str,
        message: str | None = None,
        *,
        code: int | None = None,
    ) -> None:
        self.path = str(path)
        self.message = message
        self.code = code
        super().__init__(self._render())

    def _summary(self) -> str:
        return self.summary

    def _render(self) -> str:
        parts = [f"I/O failure on path [{self.path}]."]
        summary = self._summary()
        if summary:
            parts.append(summary)
        if self.message:
            parts.append(self.message)
        return " ".join(parts)

    @property
    def cause(self) -> BaseException | None:
        """The chained lower-level exception, if any."""
        return self.__cause__


class MissingFileError(PathIOError):
    """Raised when a required file does not exist."""

    summary = "File does not exist."


class MissingFolderError(PathIOError):
    """Raised when a required folder does not exist."""

    summary = "Folder does not exist."


class FileAlreadyExistsError(PathIOError):
    """Raised when a file exists and overwriting it was refused."""

    summary = "File already exists."


class FileFormatError(PathIOError):
    """Raised when file content is structurally invalid."""

    summary = "File format is wrong or illegal."


_AccessErrorT = TypeVar("_AccessErrorT", bound="_AccessError")


class _AccessError(PathIOError):
    target = ""

    def __init__(
        self,
        path: str,
        access: AccessKind = AccessKind.READ,
        message: str | None = None,
        *,
        code: int | None = None,
    ) -> None:
        self._access = AccessKind(access)
        super().__init__(path, message, code=code)

    @property
    def access(self) -> AccessKind:
        return self._access

    def _summary(self) -> str:
        return f"Could not {self._access.value} {self.target}."

    @classmethod
    def read(
        cls: type[_AccessErrorT], path: str, message: str | None = None
    ) -> _AccessErrorT:
        return cls(path, AccessKind.READ, message)

    @classmethod
    def write(
        cls: type[_AccessErrorT], path: str, message: str | None = None
    ) -> _AccessErrorT:
        return cls(path, AccessKind.WRITE, message)

    @classmethod
    def create(
        cls: type[_AccessErrorT], path: str, message: str | None = None
    ) -> _AccessErrorT:
        return cls(path, AccessKind.CREATE, message)

    @classmethod
    def delete(
        cls: type[_AccessErrorT], path: str, message: str | None = None
    ) -> _AccessErrorT:
        return cls(path, AccessKind.DELETE, message)


class FileAccessError(_AccessError):
    """Raised when reading, writing, creating or deleting a file fails."""

    target = "file"


class FolderAccessError(_AccessError):
    """Raised when reading, writing, creating or deleting a folder fails."""

    target = "folder"
