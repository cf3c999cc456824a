"""Tests for open file handles and their factories."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from fsio import file_handle
from fsio.errors import FileAccessError, FileAlreadyExistsError, MissingFileError
from fsio.file_handle import create_new, open_for_append, open_read, open_read_write
from fsio.models import AccessKind, AccessMode


def test_create_new_writes_and_reads_back(tmp_path: Path) -> None:
    path = tmp_path / "out.txt"

    with create_new(path) as handle:
        assert handle.access_mode is AccessMode.WRITE
        handle.write_line("first")
        handle.write(["second\r\n", "third"])

    assert path.read_text(encoding="utf-8") == "first\nsecond\nthird\n"


def test_create_new_refuses_to_overwrite(tmp_path: Path) -> None:
    path = tmp_path / "keep.txt"
    path.write_text("original", encoding="utf-8")

    with pytest.raises(FileAlreadyExistsError) as exc_info:
        create_new(path, overwrite=False)

    assert exc_info.value.path == str(path)
    assert path.read_text(encoding="utf-8") == "original"


def test_open_read_missing_file(tmp_path: Path) -> None:
    path = tmp_path / "missing.txt"

    with pytest.raises(MissingFileError) as exc_info:
        open_read(path)

    assert exc_info.value.path == str(path)


def test_write_on_read_handle_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "data.txt"
    path.write_text("unchanged\n", encoding="utf-8")

    with open_read(path) as handle:
        with pytest.raises(FileAccessError, match='and not write!') as exc_info:
            handle.write_line("nope")

    assert exc_info.value.access is AccessKind.WRITE
    assert path.read_text(encoding="utf-8") == "unchanged\n"


def test_read_on_write_handle_is_rejected(tmp_path: Path) -> None:
    with create_new(tmp_path / "w.txt") as handle:
        with pytest.raises(FileAccessError) as exc_info:
            handle.read_line()

    assert exc_info.value.access is AccessKind.READ


def test_read_line_handles_mixed_line_endings(tmp_path: Path) -> None:
    path = tmp_path / "lines.txt"
    path.write_bytes(b"one\r\ntwo\nthree")

    with open_read(path) as handle:
        assert handle.read_line() == "one"
        assert handle.read_line(remove_newlines=False) == "two\n"
        assert handle.read_line() == "three"
        assert handle.read_line() is None


def test_read_counts_and_end_of_file(tmp_path: Path) -> None:
    path = tmp_path / "chars.txt"
    path.write_text("abcdef", encoding="utf-8")

    with open_read(path) as handle:
        assert handle.read_char() == "a"
        assert handle.read(3) == "bcd"
        assert handle.read(10) == "ef"
        assert handle.read() is None
        with pytest.raises(ValueError):
            handle.read(0)


def test_read_to_end(tmp_path: Path) -> None:
    path = tmp_path / "all.txt"
    path.write_bytes(b"a\r\nb\nc\n")

    with open_read(path) as handle:
        assert handle.read_to_end() == "a\r\nb\nc\n"

    with open_read(path) as handle:
        handle.read_line()
        assert handle.read_to_end(get_lines=True) == ["b", "c"]

    with open_read(path) as handle:
        assert handle.read_to_end(get_lines=True, remove_newlines=False) == ["a\r\n", "b\n", "c\n"]


def test_csv_round_trip_with_quotes_and_embedded_newlines(tmp_path: Path) -> None:
    path = tmp_path / "rows.csv"
    rows = [["id", "text"], ["1", 'say "hi", twice'], ["2", "line one\nline two"]]

    with create_new(path) as handle:
        for row in rows:
            assert handle.write_csv(row) is True

    with open_read(path) as handle:
        assert handle.read_csv() == rows[0]
        assert handle.read_csv() == rows[1]
        assert handle.read_csv() == rows[2]
        assert handle.read_csv() is None


def test_csv_custom_delimiter(tmp_path: Path) -> None:
    path = tmp_path / "rows.csv"
    with create_new(path) as handle:
        handle.write_csv(["a", "b;c"], delimiter=";")

    assert path.read_text(encoding="utf-8") == 'a;"b;c"\n'
    with open_read(path) as handle:
        assert handle.read_csv(delimiter=";") == ["a", "b;c"]


def test_closed_handle_reads_none_and_writes_false(tmp_path: Path) -> None:
    handle = create_new(tmp_path / "closed.txt")
    handle.close()
    handle.close()

    assert handle.is_open() is False
    assert handle.has_write_access() is False
    assert handle.write_line("late") is False
    assert handle.read_line() is None
    assert handle.get_pointer_position() is None
    assert handle.set_pointer_position(0) is False


def test_open_for_append(tmp_path: Path) -> None:
    path = tmp_path / "log.txt"

    with open_for_append(path) as handle:
        handle.write_line("one")
    with open_for_append(path) as handle:
        handle.write_line("two")

    assert path.read_text(encoding="utf-8") == "one\ntwo\n"


def test_open_read_write_modifies_in_place(tmp_path: Path) -> None:
    path = tmp_path / "rw.txt"
    path.write_text("hello\n", encoding="utf-8")

    with open_read_write(path) as handle:
        assert handle.has_read_access() and handle.has_write_access()
        assert handle.read_line() == "hello"
        assert handle.set_pointer_position(0) is True
        handle.write("J")

    assert path.read_text(encoding="utf-8") == "Jello\n"


def test_open_read_write_missing_file(tmp_path: Path) -> None:
    with pytest.raises(MissingFileError):
        open_read_write(tmp_path / "missing.txt")


def test_pointer_position(tmp_path: Path) -> None:
    path = tmp_path / "pointer.txt"
    path.write_text("abcdef", encoding="utf-8")

    with open_read(path) as handle:
        assert handle.get_pointer_position() == 0
        handle.read(2)
        assert handle.get_pointer_position() == 2
        assert handle.set_pointer_position_to_end_of_file() is True
        assert handle.get_pointer_position() == 6
        assert handle.read() is None


@pytest.mark.skipif(os.name == "nt", reason="permission bits are not applied on Windows")
def test_close_applies_mode_to_written_files(tmp_path: Path) -> None:
    path = tmp_path / "mode.txt"
    with create_new(path, mode=0o640) as handle:
        handle.write("x")

    assert stat.S_IMODE(path.stat().st_mode) == 0o640


@pytest.mark.skipif(os.name == "nt", reason="permission bits are not applied on Windows")
def test_close_leaves_mode_of_read_only_handles(tmp_path: Path) -> None:
    path = tmp_path / "mode.txt"
    path.write_text("x", encoding="utf-8")
    os.chmod(path, 0o600)

    with open_read(path):
        pass

    assert stat.S_IMODE(path.stat().st_mode) == 0o600


@pytest.mark.skipif(os.name == "nt", reason="advisory flock is POSIX only")
def test_lock_is_acquired(tmp_path: Path) -> None:
    with create_new(tmp_path / "locked.txt", lock=True, lock_exclusive=True) as handle:
        assert handle.is_locked is True

    with open_read(tmp_path / "locked.txt") as handle:
        assert handle.is_locked is False


def test_repr_shows_state(tmp_path: Path) -> None:
    handle = create_new(tmp_path / "r.txt")
    assert "open" in repr(handle)
    handle.close()
    assert "closed" in repr(handle)


def test_encoding_is_reported_and_used(tmp_path: Path) -> None:
    path = tmp_path / "latin.txt"
    with create_new(path, encoding="latin-1") as handle:
        assert handle.encoding == "latin-1"
        handle.write("café")

    assert path.read_bytes() == b"caf\xe9"
    with open_read(path, encoding="latin-1") as handle:
        assert handle.read_to_end() == "café"


def test_with_block_closes_once_when_body_raises(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "raised.txt"
    chmod_calls: list[tuple[str, int]] = []
    real_chmod = os.chmod

    def counting_chmod(target: str, mode: int) -> None:
        chmod_calls.append((target, mode))
        real_chmod(target, mode)

    monkeypatch.setattr(file_handle.os, "chmod", counting_chmod)

    with pytest.raises(RuntimeError, match="boom"):
        with create_new(path, mode=0o640) as handle:
            handle.write("partial")
            raise RuntimeError("boom")

    assert handle.is_open() is False
    assert path.read_text(encoding="utf-8") == "partial"

    handle.close()

    expected_calls = [] if os.name == "nt" else [(str(path), 0o640)]
    assert chmod_calls == expected_calls
    if os.name != "nt":
        assert stat.S_IMODE(path.stat().st_mode) == 0o640


def test_close_after_with_block_is_a_no_op(tmp_path: Path) -> None:
    with open_read_write(_existing(tmp_path / "rw.txt")) as handle:
        handle.read_line()

    handle.close()

    assert handle.is_open() is False
    assert handle.read_line() is None


def test_read_counts_characters(tmp_path: Path) -> None:
    path = tmp_path / "utf8.txt"
    path.write_text("äbc", encoding="utf-8")

    with open_read(path) as handle:
        assert handle.read(2) == "äb"


def _existing(path: Path) -> Path:
    path.write_text("line\n", encoding="utf-8")
    return path
