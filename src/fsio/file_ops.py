"""One-shot file operations: create, delete, copy, move, extension helpers."""

from __future__ import annotations

import logging
import os
import re
import shutil
import stat
from collections.abc import Iterable

from .errors import (
    FileAccessError,
    FileAlreadyExistsError,
    MissingFileError,
    PathIOError,
)
from .file_handle import create_new
from .logging_utils import log_event
from .paths import get_pathinfo
from .settings import get_settings
from .shell_fallback import run_copy, run_delete

logger = logging.getLogger(__name__)

_DOUBLE_EXTENSION_RE = re.compile(r"^.+(\.[a-z0-9]{1,6}\.[a-z0-9]{1,6})\Z", re.IGNORECASE)


def _split_name(path: str) -> tuple[str, str]:
    """Split ``path`` after its last separator of either style."""
    cut = max(path.rfind("/"), path.rfind("\\")) + 1
    return path[:cut], path[cut:]


def _remove_file(path: str) -> None:
    """Unlink a file, clearing the read-only bit on Windows if needed."""
    try:
        os.remove(path)
    except PermissionError:
        if os.name != "nt":
            raise
        os.chmod(path, stat.S_IWRITE)
        os.remove(path)


def create(
    path: str | os.PathLike[str],
    mode: int | None = None,
    overwrite: bool = True,
    contents: str | Iterable[str] = "",
) -> None:
    """Create ``path`` with ``contents`` and close it again."""
    file_mode = get_settings().create_file_mode if mode is None else mode
    with create_new(path, overwrite, True, True, file_mode) as handle:
        handle.write(contents)


def delete(path: str | os.PathLike[str]) -> None:
    """Delete a file. Missing files are ignored.

    When the native delete fails and the shell fallback is enabled, the
    platform delete command is tried before giving up.
    """
    file_path = os.fspath(path)
    if not os.path.lexists(file_path):
        return

    native_error: OSError | None = None
    try:
        _remove_file(file_path)
    except OSError as exc:
        native_error = exc
    else:
        if not os.path.lexists(file_path):
            return

    if not get_settings().shell_fallback:
        raise FileAccessError.delete(file_path) from native_error

    log_event(
        "file_delete_fallback",
        level=logging.WARNING,
        path=file_path,
        error=str(native_error) if native_error else "file still exists",
    )
    try:
        run_delete(file_path)
    except PathIOError as exc:
        raise FileAccessError.delete(file_path, "No known delete method works.") from exc

    if os.path.lexists(file_path):
        raise FileAccessError.delete(file_path, "The file still exists after deleting it.")


def copy(
    source: str | os.PathLike[str],
    target: str | os.PathLike[str],
    overwrite: bool = True,
) -> None:
    """Copy a single file, replacing ``target`` unless ``overwrite`` is off."""
    source_path = os.fspath(source)
    target_path = os.fspath(target)

    if not os.path.exists(source_path):
        raise MissingFileError(source_path, "Could not copy a file that does not exist.")

    if os.path.lexists(target_path):
        if not overwrite:
            raise FileAlreadyExistsError(
                target_path, "Could not copy onto an existing file while overwriting is disabled."
            )
        delete(target_path)

    try:
        shutil.copy2(source_path, target_path)
        return
    except OSError as exc:
        native_error = exc

    failure = f'Copying file to "{target_path}" failed.'
    if not get_settings().shell_fallback:
        raise PathIOError(source_path, failure) from native_error

    log_event(
        "file_copy_fallback",
        level=logging.WARNING,
        source=source_path,
        target=target_path,
        error=str(native_error),
    )
    try:
        run_copy(source_path, target_path)
    except PathIOError as exc:
        raise PathIOError(source_path, failure) from exc


def move(
    source: str | os.PathLike[str],
    target: str | os.PathLike[str],
    replace: bool = True,
) -> None:
    copy(source, target, replace)
    delete(source)


def read_first_bytes(path: str | os.PathLike[str], count: int) -> bytes:
    """Return the first ``count`` bytes of a file, for sniffing magic numbers.

    Best effort: any failure, including a missing file, yields ``b""``.
    """
    try:
        with open(os.fspath(path), "rb") as f:
            return f.read(max(count, 0))
    except (OSError, ValueError):
        logger.debug("Reading the head of %s failed", path, exc_info=True)
        return b""


def get_extension(path: str | os.PathLike[str], double_extension: bool = False) -> str | None:
    """Return the extension with its leading dot, or None.

    A URL query string is ignored. With ``double_extension`` two short
    trailing parts count as one extension (``.tar.gz``).
    """
    file_path = os.fspath(path)
    query_at = file_path.find("?")
    if query_at != -1:
        file_path = file_path[:query_at]

    if not double_extension:
        extension = get_pathinfo(file_path, "extension")
        return f".{extension.lstrip('.')}" if extension else None

    _, name = _split_name(file_path)
    match = _DOUBLE_EXTENSION_RE.match(name)
    if match:
        return match.group(1)

    parts = name.split(".")
    if len(parts) < 2 or not parts[-1]:
        return None
    return f".{parts[-1]}"


def get_extension_name(path: str | os.PathLike[str], double_extension: bool = False) -> str | None:
    extension = get_extension(path, double_extension)
    if extension is None:
        return None
    return extension.lstrip(".")


def get_name_without_extension(
    path: str | os.PathLike[str], double_extension: bool = False
) -> str:
    _, name = _split_name(os.fspath(path))
    extension = get_extension(path, double_extension)
    if extension is None or not name.endswith(extension):
        return name
    return name[: -len(extension)]


def change_extension(
    path: str | os.PathLike[str],
    new_extension: str,
    double_extension: bool = False,
    handle: bool = False,
) -> str:
    """Return ``path`` with its extension replaced.

    With ``handle`` an existing file is moved to the new name as well.
    """
    file_path = os.fspath(path)
    folder, _ = _split_name(file_path)
    renamed = (
        folder
        + get_name_without_extension(file_path, double_extension)
        + "."
        + new_extension.lstrip(".")
    )
    if handle and os.path.exists(file_path):
        move(file_path, renamed)
    return renamed
