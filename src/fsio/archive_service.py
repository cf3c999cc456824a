"""Zip and unzip workflows built on top of the zip gateway."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence

from . import file_ops, folder_ops
from .errors import (
    FileAccessError,
    FileAlreadyExistsError,
    MissingFileError,
    MissingFolderError,
)
from .logging_utils import log_event
from .models import ZipEntry
from .settings import get_settings
from .zip_gateway import extract_zip, inspect_zip, read_member, write_zip

_SEPARATORS = "\\/"


def _backup_existing(zip_path: str) -> str | None:
    """Move an existing archive aside and return the backup path."""
    if not os.path.lexists(zip_path):
        return None

    backup_path = zip_path + get_settings().archive_backup_suffix
    try:
        file_ops.delete(backup_path)
        os.replace(zip_path, backup_path)
    except OSError as exc:
        raise FileAccessError.create(
            zip_path, "Moving the existing archive to its backup name failed."
        ) from exc
    log_event("archive_backup", level=logging.DEBUG, zip_file=zip_path, backup=backup_path)
    return backup_path


def _restore_backup(zip_path: str, backup_path: str) -> None:
    file_ops.delete(zip_path)
    os.replace(backup_path, zip_path)
    log_event("archive_restored", level=logging.WARNING, zip_file=zip_path, backup=backup_path)


def _write_with_backup(
    zip_path: str,
    entries: list[ZipEntry],
    comment: str | None = None,
) -> None:
    backup_path = _backup_existing(zip_path)
    try:
        write_zip(zip_path, entries, comment)
    except Exception:
        if backup_path is not None:
            _restore_backup(zip_path, backup_path)
        elif os.path.lexists(zip_path):
            file_ops.delete(zip_path)
        raise

    if backup_path is not None:
        file_ops.delete(backup_path)


def _to_entry_name(path: str) -> str:
    return path.replace("\\", "/").strip("/")


def zip_file(
    source_file: str | os.PathLike[str],
    zip_file: str | os.PathLike[str],
    working_dir: str | os.PathLike[str] | None = None,
) -> None:
    """Pack a single file into a new archive.

    The entry name is the file path relative to ``working_dir`` (its own
    folder when omitted). An existing archive is replaced.
    """
    source_path = os.fspath(source_file)
    zip_path = os.fspath(zip_file)
    if not os.path.isfile(source_path):
        raise MissingFileError(source_path, "Could not zip a file that does not exist.")

    entry_name = os.path.basename(source_path)
    if working_dir:
        relative = os.path.relpath(os.path.abspath(source_path), os.path.abspath(working_dir))
        if not relative.startswith(os.pardir):
            entry_name = _to_entry_name(relative)

    _write_with_backup(
        zip_path,
        [ZipEntry(entry_name, source_path)],
        get_settings().single_file_zip_comment,
    )


def zip_list(
    files: Sequence[str | os.PathLike[str]] | Mapping[str, str | os.PathLike[str]],
    zip_file: str | os.PathLike[str],
    folder_name: str | None = None,
) -> None:
    """Pack several files into a new archive.

    ``files`` is either a sequence of paths (entries are named by basename)
    or a mapping of entry name to path. With ``folder_name`` every entry is
    placed inside that archive folder.
    """
    zip_path = os.fspath(zip_file)
    if isinstance(files, Mapping):
        named = [(str(name), os.fspath(path)) for name, path in files.items()]
    else:
        named = [(os.path.basename(os.fspath(path)), os.fspath(path)) for path in files]

    for _, path in named:
        if not os.path.isfile(path):
            raise MissingFileError(path, "Could not zip a file that does not exist.")

    prefix = _to_entry_name(folder_name) if folder_name else ""
    entries: list[ZipEntry] = []
    if prefix:
        entries.append(ZipEntry(prefix))
    for name, path in named:
        entry_name = _to_entry_name(name)
        entries.append(ZipEntry(f"{prefix}/{entry_name}" if prefix else entry_name, path))

    _write_with_backup(zip_path, entries)


def _collect_folder_entries(
    source_folder: str,
    root_name: str,
    excluded: set[str],
) -> list[ZipEntry]:
    entries: list[ZipEntry] = []
    if root_name:
        entries.append(ZipEntry(root_name))

    def walk_dir(current: str, current_name: str) -> None:
        with os.scandir(current) as iterator:
            children = sorted(iterator, key=lambda entry: entry.name)
        for child in children:
            child_name = f"{current_name}/{child.name}" if current_name else child.name
            if child.is_dir(follow_symlinks=False):
                entries.append(ZipEntry(child_name))
                walk_dir(child.path, child_name)
            elif child.is_file() and os.path.abspath(child.path) not in excluded:
                entries.append(ZipEntry(child_name, child.path))

    try:
        walk_dir(source_folder, root_name)
    except OSError as exc:
        raise FileAccessError.read(source_folder, "Listing the folder to zip failed.") from exc
    return entries


def zip_folder(
    source_folder: str | os.PathLike[str],
    zip_file: str | os.PathLike[str],
    folder_name: str | None = None,
    overwrite: bool = True,
) -> None:
    """Pack a folder tree, empty folders included, into a new archive.

    Entries live below ``folder_name``, which defaults to the source folder
    name. Pass ``""`` to put them at the archive root.
    """
    source_path = os.fspath(source_folder).rstrip(_SEPARATORS) or os.fspath(source_folder)
    zip_path = os.fspath(zip_file)

    if not os.path.isdir(source_path):
        raise MissingFolderError(source_path, "Could not zip a folder that does not exist.")
    if os.path.lexists(zip_path) and not overwrite:
        raise FileAlreadyExistsError(zip_path, "Overwriting the archive is disabled.")

    if folder_name is None:
        root_name = os.path.basename(os.path.abspath(source_path))
    else:
        root_name = _to_entry_name(folder_name)

    zip_abs = os.path.abspath(zip_path)
    excluded = {zip_abs, zip_abs + get_settings().archive_backup_suffix}
    entries = _collect_folder_entries(source_path, root_name, excluded)
    _write_with_backup(zip_path, entries)


def unzip(
    zip_file: str | os.PathLike[str],
    target_folder: str | os.PathLike[str],
    clear_target: bool = True,
) -> None:
    """Extract an archive into ``target_folder``.

    With ``clear_target`` the current folder contents are parked beside it
    and put back if extracting fails.
    """
    zip_path = os.fspath(zip_file)
    target_path = os.fspath(target_folder).rstrip(_SEPARATORS) or os.fspath(target_folder)

    if not os.path.isfile(zip_path):
        raise MissingFileError(zip_path, "Could not extract from defined archive file.")
    member_names = inspect_zip(zip_path)

    parked_path: str | None = None
    extract_from = zip_path
    if clear_target and os.path.isdir(target_path) and os.listdir(target_path):
        parked_path = target_path + get_settings().unzip_backup_suffix
        folder_ops.delete(parked_path)
        folder_ops.move_contents(target_path, parked_path, clear_target=True)

        # An archive stored inside the target was parked along with everything else.
        relative_zip = os.path.relpath(os.path.abspath(zip_path), os.path.abspath(target_path))
        if not relative_zip.startswith(os.pardir):
            extract_from = os.path.join(parked_path, relative_zip)
    else:
        folder_ops.create(target_path)

    try:
        extract_zip(extract_from, target_path)
    except Exception:
        if parked_path is not None:
            folder_ops.move(parked_path, target_path, clear_target=True)
            log_event(
                "archive_restored",
                level=logging.WARNING,
                zip_file=zip_path,
                target=target_path,
            )
        raise

    if parked_path is not None:
        folder_ops.delete(parked_path)
    log_event(
        "unzip_completed",
        zip_file=zip_path,
        target=target_path,
        entries=len(member_names),
    )


def unzip_single_file(
    zip_file: str | os.PathLike[str],
    member_name: str,
    target_file: str | os.PathLike[str],
) -> None:
    """Extract one archive member to ``target_file``, replacing it if present."""
    zip_path = os.fspath(zip_file)
    target_path = os.fspath(target_file)
    if not os.path.isfile(zip_path):
        raise MissingFileError(zip_path, "Could not extract from defined archive file.")

    data = read_member(zip_path, member_name)
    try:
        with open(target_path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise FileAccessError.read(
            zip_path, f'Could not extract "{member_name}" to "{target_path}".'
        ) from exc
