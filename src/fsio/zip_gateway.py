"""Zip read/write/extract helpers."""

from __future__ import annotations

import os
import zipfile
import zlib
from pathlib import PurePosixPath
from typing import Iterable

from .errors import FileAccessError, FileFormatError

_ZIP_ERROR_REASONS: list[tuple[type[BaseException], str]] = [
    (zipfile.BadZipFile, "the file is not a zip archive or it is corrupt."),
    (zipfile.LargeZipFile, "the archive needs ZIP64 extensions which are disabled."),
    (NotImplementedError, "the compression method is not supported."),
    (zlib.error, "the compressed data is damaged."),
    (KeyError, "a requested entry does not exist in the archive."),
    (MemoryError, "memory allocation failure."),
    (FileNotFoundError, "no such file."),
    (PermissionError, "permission denied."),
    (OSError, "read or write error."),
    (RuntimeError, "the archive is encrypted or already closed."),
]


def describe_zip_error(exc: BaseException) -> str:
    """Return a human-readable reason for a zip failure."""
    for error_type, reason in _ZIP_ERROR_REASONS:
        if isinstance(exc, error_type):
            return reason
    return "an unknown error is thrown."


def _assert_no_duplicate_entries(zip_path: str, entry_names: list[str]) -> None:
    seen: set[str] = set()
    duplicates: set[str] = set()
    for entry_name in entry_names:
        if entry_name in seen:
            duplicates.add(entry_name)
        seen.add(entry_name)

    if duplicates:
        raise FileFormatError(
            zip_path,
            f"Duplicate zip entry paths detected: {', '.join(sorted(duplicates))}",
        )


def write_zip(zip_path: str, entries: Iterable, comment: str | None = None) -> None:
    """Write ``entries`` (:class:`~fsio.models.ZipEntry`) into a new archive at ``zip_path``."""
    entry_list = list(entries)
    entry_names = [
        f"{entry.arcname.rstrip('/')}/" if entry.is_folder else entry.arcname
        for entry in entry_list
    ]
    _assert_no_duplicate_entries(zip_path, entry_names)

    try:
        with zipfile.ZipFile(zip_path, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
            for entry, entry_name in zip(entry_list, entry_names):
                if entry.is_folder:
                    zf.writestr(entry_name, data=b"")
                else:
                    zf.write(entry.source_path, arcname=entry_name)
            if comment:
                zf.comment = comment.encode("utf-8")
    except (OSError, zipfile.LargeZipFile, ValueError, zlib.error) as exc:
        raise FileAccessError.create(
            zip_path, f"Zipfile could not be created cause {describe_zip_error(exc)}"
        ) from exc


def _validate_members_safe_for_extract(zip_path: str, members: list[zipfile.ZipInfo]) -> None:
    for member in members:
        entry_name = member.filename
        normalised = entry_name.replace("\\", "/")
        if normalised.startswith("/") or (len(normalised) > 1 and normalised[1] == ":"):
            raise FileFormatError(zip_path, f"Unsafe zip entry path: {entry_name}")
        if ".." in PurePosixPath(normalised).parts:
            raise FileFormatError(zip_path, f"Unsafe zip entry path: {entry_name}")


def inspect_zip(zip_path: str) -> list[str]:
    """Validate an archive and return its member names.

    Unsafe member paths raise :class:`FileFormatError`; unreadable or
    corrupt archives raise a read :class:`FileAccessError`.
    """
    try:
        with zipfile.ZipFile(zip_path, mode="r") as zf:
            members = zf.infolist()
            _validate_members_safe_for_extract(zip_path, members)
            corrupt_member = zf.testzip()
    except (zipfile.BadZipFile, OSError, NotImplementedError, RuntimeError, zlib.error) as exc:
        raise FileAccessError.read(
            zip_path, f"Zipfile could not be opened cause {describe_zip_error(exc)}"
        ) from exc

    if corrupt_member is not None:
        raise FileAccessError.read(
            zip_path, f"Zip integrity check failed for member: {corrupt_member}"
        )
    return [member.filename for member in members]


def extract_zip(zip_path: str, target_dir: str) -> None:
    try:
        with zipfile.ZipFile(zip_path, mode="r") as zf:
            _validate_members_safe_for_extract(zip_path, zf.infolist())
            zf.extractall(target_dir)
    except (zipfile.BadZipFile, OSError, NotImplementedError, RuntimeError, zlib.error) as exc:
        raise FileAccessError.read(
            zip_path, f"Zipfile could not be extracted cause {describe_zip_error(exc)}"
        ) from exc


def read_member(zip_path: str, name: str) -> bytes:
    """Return the bytes of one archive member."""
    try:
        with zipfile.ZipFile(zip_path, mode="r") as zf:
            return zf.read(name)
    except (
        zipfile.BadZipFile,
        KeyError,
        OSError,
        NotImplementedError,
        RuntimeError,
        zlib.error,
    ) as exc:
        raise FileAccessError.read(
            zip_path, f'Entry "{name}" could not be read cause {describe_zip_error(exc)}'
        ) from exc


def archive_comment(zip_path: str) -> str:
    try:
        with zipfile.ZipFile(zip_path, mode="r") as zf:
            return zf.comment.decode("utf-8", errors="replace")
    except (zipfile.BadZipFile, OSError) as exc:
        raise FileAccessError.read(
            zip_path, f"Zipfile could not be opened cause {describe_zip_error(exc)}"
        ) from exc


def is_zip(path: str) -> bool:
    return os.path.isfile(path) and zipfile.is_zipfile(path)
