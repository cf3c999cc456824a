"""Path string helpers.

All helpers are pure string operations; nothing here touches the
filesystem. Helpers whose result depends on the platform separator accept a
keyword-only ``sep`` so Windows behavior can be computed on any host.
"""

from __future__ import annotations

import os
import re

from .constants import PATH_TRIM_CHARS
from .models import PathInfo

_WINDOWS_SEP = "\\"
_POSIX_SEP = "/"

# dirname, basename, filename, extension (without the dot)
_PATHINFO_RE = re.compile(r"^(.*?)[\\/]*(([^/\\]*?)(\.([^.\\/]+?)|))[\\/.]*\Z", re.DOTALL)


def is_windows_separator(sep: str) -> bool:
    return sep == _WINDOWS_SEP


def foreign_separator(*, sep: str = os.sep) -> str:
    """Return the folder separator that the platform using ``sep`` does not use."""
    return _POSIX_SEP if is_windows_separator(sep) else _WINDOWS_SEP


def combine(base: str, part1: str, part2: str | None = None, *, sep: str = os.sep) -> str:
    """Join two or three path segments with ``sep``.

    Whitespace and slashes at the joined boundaries are trimmed, so
    ``combine("/a/", "/b/", "c") == "/a/b/c"``. ``..`` and ``.`` segments are
    kept as they are.
    """
    head = base.rstrip(PATH_TRIM_CHARS)
    if not part2:
        return f"{head}{sep}{part1.lstrip(PATH_TRIM_CHARS)}"
    middle = part1.strip(PATH_TRIM_CHARS)
    return f"{head}{sep}{middle}{sep}{part2.lstrip(PATH_TRIM_CHARS)}"


def normalize(path: str, *, sep: str = os.sep) -> str:
    """Switch ``path`` to the platform separator.

    Trailing separators are removed (leading ones too on Windows) and
    ``<sep>.<sep>`` collapses to ``<sep>``. ``..`` is not resolved.
    """
    swapped = path.replace(foreign_separator(sep=sep), sep)
    if is_windows_separator(sep):
        swapped = swapped.strip(sep)
    else:
        swapped = swapped.rstrip(sep)

    current_dir = f"{sep}.{sep}"
    while current_dir in swapped:
        swapped = swapped.replace(current_dir, sep)
    return swapped


def is_absolute(path: str, depend_on_os: bool = True, *, sep: str = os.sep) -> bool:
    """Return True for absolute paths.

    With ``depend_on_os`` only the host form counts: a leading ``/`` on POSIX,
    a drive letter (``C:``) or UNC prefix (``\\\\``) on Windows. Without it
    any of those forms is accepted.
    """
    if not path:
        return False

    posix_rooted = path.startswith(_POSIX_SEP)
    windows_rooted = (len(path) > 1 and path[1] == ":") or path.startswith("\\\\")

    if not depend_on_os:
        return posix_rooted or windows_rooted
    if is_windows_separator(sep):
        return windows_rooted
    return posix_rooted


def unixize(path: str | None) -> str:
    if path is None:
        return ""
    return path.replace(_WINDOWS_SEP, _POSIX_SEP)


def remove_working_dir(path: str | None, cwd: str | None = None) -> str:
    """Strip the current working directory prefix from ``path``.

    The result always uses forward slashes.
    """
    if path is None:
        return ""

    prefix = unixize(cwd if cwd is not None else os.getcwd()).rstrip(_POSIX_SEP) + _POSIX_SEP
    unixized = unixize(path)
    if unixized.startswith(prefix):
        return unixized[len(prefix):]
    return unixized


def get_pathinfo(path: str, part: str | None = None) -> PathInfo | str:
    """Split ``path`` into dirname, basename, extension and filename.

    Works on any Unicode path and with both separator styles. Pass ``part``
    to get a single field.
    """
    match = _PATHINFO_RE.match(path)
    if match is None:
        info = PathInfo(dirname="", basename="", extension="", filename="")
    else:
        info = PathInfo(
            dirname=match.group(1) or "",
            basename=match.group(2) or "",
            extension=match.group(5) or "",
            filename=match.group(3) or "",
        )

    if part is None:
        return info
    return info.get(part)
