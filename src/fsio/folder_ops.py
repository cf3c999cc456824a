"""Recursive folder operations: create, delete, list, copy, move."""

from __future__ import annotations

import logging
import ntpath
import os
import posixpath
import re
from collections.abc import Callable
from typing import Union

from . import file_ops
from .errors import FolderAccessError, MissingFolderError, PathIOError
from .logging_utils import log_event
from .paths import foreign_separator, is_absolute, is_windows_separator, normalize
from .settings import get_settings

FileFilter = Union[str, re.Pattern, Callable[[str, str], bool]]

_SEPARATORS = "\\/"


def _strip_trailing_separators(path: str) -> str:
    stripped = path.rstrip(_SEPARATORS)
    return stripped or path[:1]


def _sorted_entries(folder: str) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(folder) as iterator:
            return sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        raise FolderAccessError.read(folder, "Listing the folder contents failed.") from exc


def up(folder: str, levels: int = 1, end_char: str = "") -> str:
    """Go ``levels`` parent folders up without touching the filesystem."""
    for _ in range(levels):
        folder = os.path.dirname(_strip_trailing_separators(folder))
    return folder + end_char


def get_first_existing(folder: str, *, sep: str = os.sep) -> str:
    """Return the nearest existing folder, starting at ``folder`` and walking up.

    A relative path with no existing ancestor resolves to ``"."``.
    """
    path_module = ntpath if is_windows_separator(sep) else posixpath
    folder = _strip_trailing_separators(folder)
    if not folder:
        return os.curdir
    if "/" in folder and "\\" in folder:
        folder = folder.replace(foreign_separator(sep=sep), sep)

    level = len(folder.lstrip(_SEPARATORS).split(sep))
    for _ in range(level):
        if os.path.isdir(folder):
            break
        parent = path_module.dirname(folder)
        if not parent:
            return os.curdir
        if parent == folder:
            return folder
        folder = parent
    return folder


def can_create(path: str) -> bool:
    """Return True when ``path`` is not a folder yet and its nearest existing ancestor is writable."""
    if os.path.isdir(path):
        return False
    return os.access(get_first_existing(path), os.W_OK)


def create(folder: str | os.PathLike[str], mode: int | None = None) -> None:
    """Create ``folder`` and any missing parents. Existing folders are left alone."""
    folder_path = os.fspath(folder)
    if os.path.isdir(folder_path):
        return

    folder_mode = get_settings().folder_mode if mode is None else mode
    if not can_create(folder_path):
        raise FolderAccessError.create(
            folder_path, "The nearest existing parent folder is not writable."
        )

    try:
        os.makedirs(folder_path, folder_mode, exist_ok=True)
    except OSError as exc:
        raise FolderAccessError.create(folder_path, "Folder creation failed.") from exc

    if not os.path.isdir(folder_path):
        raise PathIOError(folder_path, "Unknown error while creating the folder.")
    log_event("folder_created", level=logging.DEBUG, folder=folder_path, mode=oct(folder_mode))


def delete(folder: str | os.PathLike[str], clear: bool = False) -> None:
    """Delete everything inside ``folder``, then ``folder`` itself unless ``clear`` is set.

    Missing folders are ignored. Symbolic links are removed, never followed.
    """
    folder_path = os.fspath(folder)
    if not folder_path or not os.path.isdir(folder_path):
        return

    for entry in _sorted_entries(folder_path):
        if entry.is_dir(follow_symlinks=False):
            delete(entry.path)
        else:
            file_ops.delete(entry.path)

    if clear:
        return

    try:
        os.rmdir(folder_path)
    except OSError as exc:
        raise FolderAccessError.delete(folder_path, "Could not delete the folder.") from exc
    log_event("folder_deleted", level=logging.DEBUG, folder=folder_path)


def clear(folder: str | os.PathLike[str]) -> None:
    delete(folder, clear=True)


def list_all_files(folder: str | os.PathLike[str], recursive: bool = False) -> list[str]:
    """Return the paths of all files in ``folder`` (and below, if ``recursive``)."""
    folder_path = os.fspath(folder)
    files: list[str] = []
    if not os.path.isdir(folder_path):
        return files

    def walk_dir(current: str) -> None:
        for entry in _sorted_entries(current):
            if entry.is_dir(follow_symlinks=False):
                if recursive:
                    walk_dir(entry.path)
                continue
            if entry.is_file():
                files.append(entry.path)

    walk_dir(folder_path)
    return files


def _matches_filter(file_filter: FileFilter, entry_name: str, entry_path: str) -> bool:
    if callable(file_filter):
        return bool(file_filter(entry_name, entry_path))
    try:
        return re.search(file_filter, entry_name) is not None
    except re.error as exc:
        # A broken pattern excludes the entry; the listing goes on.
        log_event(
            "filter_pattern_invalid",
            level=logging.DEBUG,
            pattern=str(getattr(file_filter, "pattern", file_filter)),
            path=entry_path,
            error=str(exc),
        )
        return False


def list_filtered_files(
    folder: str | os.PathLike[str],
    file_filter: FileFilter,
    recursive: bool = False,
) -> list[str]:
    """Return the files in ``folder`` accepted by ``file_filter``.

    ``file_filter`` is a regular expression searched in the entry name, or a
    callable receiving ``(entry_name, entry_path)``.
    """
    folder_path = os.fspath(folder)
    files: list[str] = []
    if not os.path.isdir(folder_path):
        return files

    def walk_dir(current: str) -> None:
        for entry in _sorted_entries(current):
            if entry.is_dir(follow_symlinks=False):
                if recursive:
                    walk_dir(entry.path)
                continue
            if entry.is_file() and _matches_filter(file_filter, entry.name, entry.path):
                files.append(entry.path)

    walk_dir(folder_path)
    return files


def get_real_path(folder: str, base_path: str = "", *, sep: str = os.sep) -> str:
    """Resolve ``folder`` against ``base_path`` (the cwd when empty).

    Leading ``./`` and ``../`` segments are applied to the base path.
    ``..`` segments later in ``folder`` are kept as they are.
    """
    windows = is_windows_separator(sep)
    path_module = ntpath if windows else posixpath

    base = base_path or os.getcwd()
    base = normalize(base, sep=sep).rstrip(sep) or sep
    if not folder:
        return base

    if not windows and folder.startswith("/"):
        return normalize(folder, sep=sep) or sep
    if windows and len(folder) > 2 and is_absolute(folder, sep=sep) and (
        folder[2] in _SEPARATORS or folder.startswith("\\\\")
    ):
        return folder.replace("/", "\\")

    normalized = normalize(folder, sep=sep)
    if len(normalized) == 1:
        if normalized == ".":
            return base
        return f"{base}{sep}{normalized}"
    if len(normalized) == 2:
        if windows and normalized[1] == ":":
            return normalized + sep
        if normalized == "..":
            return path_module.dirname(base)
        return f"{base}{sep}{normalized.strip(sep)}"

    parent_prefix = f"..{sep}"
    current_prefix = f".{sep}"
    while normalized.startswith((parent_prefix, current_prefix)):
        if normalized.startswith(parent_prefix):
            base = path_module.dirname(base)
            normalized = normalized[len(parent_prefix):]
        else:
            normalized = normalized[len(current_prefix):]
    if normalized == "..":
        return path_module.dirname(base)
    if normalized in ("", "."):
        return base
    return f"{base.rstrip(sep)}{sep}{normalized.strip(sep)}"


def _is_inside(child: str, parent: str) -> bool:
    child_abs = os.path.abspath(child)
    parent_abs = os.path.abspath(parent)
    return child_abs == parent_abs or child_abs.startswith(parent_abs.rstrip(os.sep) + os.sep)


def copy(
    source: str | os.PathLike[str],
    target: str | os.PathLike[str],
    mode: int | None = None,
    clear_target: bool = False,
) -> None:
    """Copy the contents of ``source`` into ``target``, recursively.

    ``target`` is created when missing, or emptied first with ``clear_target``.
    """
    source_path = _strip_trailing_separators(os.fspath(source))
    target_path = _strip_trailing_separators(os.fspath(target))

    if not os.path.isdir(source_path):
        raise MissingFolderError(source_path, "Can not copy the contents of a missing folder.")
    if _is_inside(target_path, source_path):
        raise PathIOError(target_path, "The copy target must not be inside the source folder.")

    if os.path.isdir(target_path):
        if clear_target:
            clear(target_path)
    else:
        create(target_path, mode)

    for entry in _sorted_entries(source_path):
        target_item = os.path.join(target_path, entry.name)
        if entry.is_dir(follow_symlinks=False):
            copy(entry.path, target_item, mode)
        elif entry.is_symlink() and entry.is_dir():
            # Folder links are recreated as links, never walked.
            try:
                os.symlink(os.readlink(entry.path), target_item, target_is_directory=True)
            except OSError as exc:
                raise FolderAccessError.create(
                    target_item, "Copying the folder link failed."
                ) from exc
        else:
            file_ops.copy(entry.path, target_item)


def move(
    source: str | os.PathLike[str],
    target: str | os.PathLike[str],
    mode: int | None = None,
    clear_target: bool = False,
) -> None:
    copy(source, target, mode, clear_target)
    delete(source)


def move_contents(
    source: str | os.PathLike[str],
    target: str | os.PathLike[str],
    mode: int | None = None,
    clear_target: bool = False,
) -> None:
    """Like :func:`move`, but ``source`` stays behind, empty."""
    copy(source, target, mode, clear_target)
    clear(source)
