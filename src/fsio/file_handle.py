"""Open file handles with access-mode checks.

A :class:`FileHandle` goes through one lifecycle only: it is opened by one of
the factories at the bottom of this module and later closed, either
explicitly, by leaving a ``with`` block, or by garbage collection. Read
operations need read access, write operations need write access; passing
``fast=True`` skips those checks.
"""

from __future__ import annotations

import csv
import logging
import os
from collections.abc import Iterable, Sequence
from typing import IO

from .constants import LINE_END_CHARS
from .errors import FileAccessError, FileAlreadyExistsError, MissingFileError, PathIOError
from .models import AccessKind, AccessMode
from .settings import get_settings

if os.name == "nt":
    import msvcrt
else:
    import fcntl

logger = logging.getLogger(__name__)

_READ_ERRORS = (OSError, ValueError, csv.Error)
_WRITE_ERRORS = (OSError, ValueError, csv.Error)


def _acquire_lock(stream: IO[str], exclusive: bool) -> bool:
    """Take an advisory lock on ``stream``; returns False instead of raising.

    The lock lives as long as the underlying descriptor, so closing the
    stream releases it.
    """
    try:
        if os.name == "nt":
            # Windows has no shared locks; lock the first byte exclusively.
            msvcrt.locking(stream.fileno(), msvcrt.LK_LOCK, 1)
        else:
            fcntl.flock(stream.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
    except OSError:
        logger.debug("Advisory lock on %s was not acquired", getattr(stream, "name", "?"), exc_info=True)
        return False
    return True


class FileHandle:
    """An open text file plus the access mode it was opened with.

    Use :func:`create_new`, :func:`open_for_append`, :func:`open_read` or
    :func:`open_read_write` to get one.
    """

    def __init__(
        self,
        path: str,
        access_mode: AccessMode,
        stream: IO[str],
        mode: int,
        locked: bool = False,
    ) -> None:
        self._path = path
        self._encoding = getattr(stream, "encoding", None) or get_settings().encoding
        self._access_mode = AccessMode(access_mode)
        self._stream: IO[str] | None = stream
        self._mode = mode
        self._locked = locked

    def __repr__(self) -> str:
        state = "open" if self.is_open() else "closed"
        return f"<FileHandle {self._path!r} {self._access_mode.value} {state}>"

    def __enter__(self) -> FileHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_stream", None) is None:
            return
        try:
            self.close()
        except PathIOError:
            logger.warning("Closing %s during finalization failed", self._path, exc_info=True)

    @property
    def path(self) -> str:
        return self._path

    @property
    def access_mode(self) -> AccessMode:
        return self._access_mode

    @property
    def mode(self) -> int:
        """Permission bits applied on close when the handle could write."""
        return self._mode

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def encoding(self) -> str:
        return self._encoding

    # Checks

    def is_open(self) -> bool:
        return self._stream is not None

    def has_read_access(self) -> bool:
        return self.is_open() and self._access_mode.can_read

    def has_write_access(self) -> bool:
        return self.is_open() and self._access_mode.can_write

    def _ready_to_read(self, fast: bool) -> bool:
        if fast:
            return True
        if not self.is_open():
            return False
        if not self._access_mode.can_read:
            raise FileAccessError.read(
                self._path,
                f'Current mode of opened file is "{self._access_mode.value}" and not read!',
            )
        return True

    def _ready_to_write(self, fast: bool) -> bool:
        if fast:
            return True
        if not self.is_open():
            return False
        if not self._access_mode.can_write:
            raise FileAccessError.write(
                self._path,
                f'Current mode of opened file is "{self._access_mode.value}" and not write!',
            )
        return True

    def _require_stream(self, access: AccessKind) -> IO[str]:
        if self._stream is None:
            raise FileAccessError(self._path, access, "The file handle is closed.")
        return self._stream

    # Reading

    def read_line(self, remove_newlines: bool = True, *, fast: bool = False) -> str | None:
        """Read the next line, or None at end of file."""
        if not self._ready_to_read(fast):
            return None
        stream = self._require_stream(AccessKind.READ)
        try:
            line = stream.readline()
        except _READ_ERRORS as exc:
            raise FileAccessError.read(self._path) from exc
        if line == "":
            return None
        return line.rstrip(LINE_END_CHARS) if remove_newlines else line

    def read(self, count: int = 1, *, fast: bool = False) -> str | None:
        """Read up to ``count`` characters, or None at end of file."""
        if count < 1:
            raise ValueError("count must be a positive integer")
        if not self._ready_to_read(fast):
            return None
        stream = self._require_stream(AccessKind.READ)
        try:
            data = stream.read(count)
        except _READ_ERRORS as exc:
            raise FileAccessError.read(self._path) from exc
        return data or None

    def read_char(self, *, fast: bool = False) -> str | None:
        return self.read(1, fast=fast)

    def read_csv(
        self,
        delimiter: str = ",",
        quotechar: str = '"',
        *,
        fast: bool = False,
    ) -> list[str] | None:
        """Read the next CSV record, or None at end of file.

        Quoted fields may span several physical lines.
        """
        if not self._ready_to_read(fast):
            return None
        stream = self._require_stream(AccessKind.READ)
        reader = csv.reader(iter(stream.readline, ""), delimiter=delimiter, quotechar=quotechar)
        try:
            return next(reader, None)
        except _READ_ERRORS as exc:
            raise FileAccessError.read(self._path, "Reading of CSV data failed.") from exc

    def read_to_end(
        self,
        get_lines: bool = False,
        remove_newlines: bool = True,
        *,
        fast: bool = False,
    ) -> str | list[str] | None:
        """Read everything from the current position.

        Returns a single string, or a list of lines when ``get_lines`` is set.
        Line endings are only stripped in the list form.
        """
        if not self._ready_to_read(fast):
            return None

        lines: list[str] = []
        while (line := self.read_line(remove_newlines and get_lines, fast=True)) is not None:
            lines.append(line)
        return lines if get_lines else "".join(lines)

    # Writing

    def write_line(self, text: str, newline: str = "\n", *, fast: bool = False) -> bool:
        if not self._ready_to_write(fast):
            return False
        stream = self._require_stream(AccessKind.WRITE)
        try:
            stream.write(text + newline)
        except _WRITE_ERRORS as exc:
            raise FileAccessError.write(self._path) from exc
        return True

    def write_line_fast(self, text: str, newline: str = "\n") -> None:
        self.write_line(text, newline, fast=True)

    def write(
        self,
        text_or_lines: str | Iterable[str],
        newline: str = "\n",
        *,
        fast: bool = False,
    ) -> bool:
        """Write a string as-is, or each line of a sequence with ``newline``.

        Lines from a sequence are stripped of trailing CR/LF before the
        terminator is appended.
        """
        if not self._ready_to_write(fast):
            return False
        stream = self._require_stream(AccessKind.WRITE)
        try:
            if isinstance(text_or_lines, str):
                stream.write(text_or_lines)
            else:
                for line in text_or_lines:
                    stream.write(line.rstrip(LINE_END_CHARS) + newline)
        except _WRITE_ERRORS as exc:
            raise FileAccessError.write(self._path) from exc
        return True

    def write_chars(self, chars: str, *, fast: bool = True) -> None:
        self.write(chars, "", fast=fast)

    def write_csv(self, row: Sequence[object], delimiter: str = ",", *, fast: bool = False) -> bool:
        if not self._ready_to_write(fast):
            return False
        stream = self._require_stream(AccessKind.WRITE)
        try:
            csv.writer(stream, delimiter=delimiter, lineterminator="\n").writerow(row)
        except _WRITE_ERRORS as exc:
            raise FileAccessError.write(self._path, "Writing of CSV data failed.") from exc
        return True

    # Pointer position

    def get_pointer_position(self) -> int | None:
        if self._stream is None:
            return None
        try:
            return self._stream.tell()
        except OSError as exc:
            raise FileAccessError.read(self._path, "Reading the pointer position failed.") from exc

    def set_pointer_position(self, offset: int = 0) -> bool:
        if self._stream is None:
            return False
        try:
            self._stream.seek(offset)
        except (OSError, ValueError) as exc:
            raise FileAccessError.read(self._path, f"Moving the pointer to {offset} failed.") from exc
        return True

    def set_pointer_position_to_end_of_file(self) -> bool:
        if self._stream is None:
            return False
        try:
            self._stream.seek(0, os.SEEK_END)
        except OSError as exc:
            raise FileAccessError.read(self._path, "Moving the pointer to the end failed.") from exc
        return True

    # Closing

    def close(self) -> None:
        """Release the stream; apply permission bits if the handle could write.

        Calling it again is a no-op. Permission bits are skipped on Windows.
        """
        stream = self._stream
        if stream is None:
            return
        self._stream = None

        write_access = self._access_mode.can_write
        try:
            stream.close()
        except OSError as exc:
            access = AccessKind.WRITE if write_access else AccessKind.READ
            raise FileAccessError(self._path, access, "Closing the file failed.") from exc

        if write_access and os.name != "nt":
            try:
                os.chmod(self._path, self._mode)
            except OSError as exc:
                raise FileAccessError.write(
                    self._path, f"Applying mode {oct(self._mode)} failed."
                ) from exc


def _open_stream(path: str, open_mode: str, encoding: str | None) -> IO[str]:
    # newline="" keeps line endings untouched in both directions.
    return open(path, open_mode, encoding=encoding or get_settings().encoding, newline="")


def create_new(
    path: str | os.PathLike[str],
    overwrite: bool = True,
    lock: bool = False,
    lock_exclusive: bool = False,
    mode: int | None = None,
    *,
    encoding: str | None = None,
) -> FileHandle:
    """Create (or truncate) ``path`` and return a write handle."""
    file_path = os.fspath(path)
    if os.path.exists(file_path) and not overwrite:
        raise FileAlreadyExistsError(file_path, "Creation of this file fails!")

    try:
        stream = _open_stream(file_path, "w", encoding)
    except OSError as exc:
        raise FileAccessError.create(file_path) from exc

    locked = _acquire_lock(stream, lock_exclusive) if lock else False
    return FileHandle(
        file_path,
        AccessMode.WRITE,
        stream,
        get_settings().file_mode if mode is None else mode,
        locked,
    )


def open_for_append(
    path: str | os.PathLike[str],
    lock: bool = False,
    lock_exclusive: bool = False,
    mode: int | None = None,
    *,
    encoding: str | None = None,
) -> FileHandle:
    """Open ``path`` for appending, creating it when missing."""
    file_path = os.fspath(path)
    if not os.path.exists(file_path):
        return create_new(file_path, True, lock, lock_exclusive, mode, encoding=encoding)

    try:
        stream = _open_stream(file_path, "a", encoding)
    except OSError as exc:
        raise FileAccessError.create(file_path) from exc

    locked = _acquire_lock(stream, lock_exclusive) if lock else False
    return FileHandle(
        file_path,
        AccessMode.WRITE,
        stream,
        get_settings().file_mode if mode is None else mode,
        locked,
    )


def open_read(
    path: str | os.PathLike[str],
    lock: bool = False,
    lock_exclusive: bool = False,
    *,
    encoding: str | None = None,
) -> FileHandle:
    """Open an existing file for reading."""
    file_path = os.fspath(path)
    if not os.path.exists(file_path):
        raise MissingFileError(file_path, "Open file for reading fails.")

    try:
        stream = _open_stream(file_path, "r", encoding)
    except OSError as exc:
        raise FileAccessError.read(file_path) from exc

    locked = _acquire_lock(stream, lock_exclusive) if lock else False
    return FileHandle(file_path, AccessMode.READ, stream, get_settings().create_file_mode, locked)


def open_read_write(
    path: str | os.PathLike[str],
    lock: bool = False,
    lock_exclusive: bool = False,
    mode: int | None = None,
    *,
    encoding: str | None = None,
) -> FileHandle:
    """Open an existing file for reading and writing, pointer at the start."""
    file_path = os.fspath(path)
    if not os.path.exists(file_path):
        raise MissingFileError(file_path, "Open file for reading and writing fails.")

    try:
        stream = _open_stream(file_path, "r+", encoding)
    except OSError as exc:
        raise FileAccessError(file_path, AccessKind.READ_WRITE) from exc

    locked = _acquire_lock(stream, lock_exclusive) if lock else False
    return FileHandle(
        file_path,
        AccessMode.READ_WRITE,
        stream,
        get_settings().file_mode if mode is None else mode,
        locked,
    )
