"""Platform command fallbacks for file delete and copy.

Commands run through ``subprocess.run`` with an argv list, never through a
shell string. Paths are made absolute so none of them can be read as a
command option.
"""

from __future__ import annotations

import os
import subprocess

from .errors import PathIOError


def _is_windows() -> bool:
    return os.name == "nt"


def delete_command(path: str) -> list[str]:
    target = os.path.abspath(path)
    if _is_windows():
        return ["cmd", "/c", "del", "/f", "/q", target]
    return ["unlink", target]


def copy_command(source: str, target: str) -> list[str]:
    source_abs = os.path.abspath(source)
    target_abs = os.path.abspath(target)
    if _is_windows():
        return ["cmd", "/c", "copy", "/Y", "/B", source_abs, target_abs]
    return ["cp", source_abs, target_abs]


def _run(command: list[str], path: str) -> None:
    try:
        completed = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise PathIOError(path, f"Running '{command[0]}' failed.") from exc

    if completed.returncode != 0:
        output_lines = (completed.stdout or "").strip().splitlines()
        detail = output_lines[0] if output_lines else f"exit status {completed.returncode}"
        raise PathIOError(path, detail, code=completed.returncode)


def run_delete(path: str) -> None:
    """Delete ``path`` with the platform delete command."""
    _run(delete_command(path), path)


def run_copy(source: str, target: str) -> None:
    """Copy ``source`` to ``target`` with the platform copy command."""
    _run(copy_command(source, target), source)
