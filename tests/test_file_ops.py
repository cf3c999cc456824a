from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import pytest

from fsio import file_ops
from fsio.errors import (
    FileAccessError,
    FileAlreadyExistsError,
    MissingFileError,
    PathIOError,
)
from fsio.models import AccessKind
from fsio.settings import Settings, apply_settings


def _events(caplog: pytest.LogCaptureFixture) -> list[dict]:
    return [json.loads(record.getMessage()) for record in caplog.records if record.name == "fsio"]


def test_create_with_text_and_lines(tmp_path: Path) -> None:
    text_path = tmp_path / "text.txt"
    lines_path = tmp_path / "lines.txt"

    file_ops.create(text_path, contents="plain")
    file_ops.create(lines_path, contents=["a", "b"])

    assert text_path.read_text(encoding="utf-8") == "plain"
    assert lines_path.read_text(encoding="utf-8") == "a\nb\n"


def test_create_without_overwrite_keeps_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "exists.txt"
    path.write_text("keep", encoding="utf-8")

    with pytest.raises(FileAlreadyExistsError):
        file_ops.create(path, overwrite=False, contents="new")

    assert path.read_text(encoding="utf-8") == "keep"


def test_delete(tmp_path: Path) -> None:
    path = tmp_path / "gone.txt"
    path.write_text("x", encoding="utf-8")

    file_ops.delete(path)
    file_ops.delete(path)

    assert not path.exists()


def test_delete_without_fallback_raises_access_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "stuck.txt"
    path.write_text("x", encoding="utf-8")
    apply_settings(Settings(shell_fallback=False))

    def refuse(_path: str) -> None:
        raise PermissionError("denied")

    monkeypatch.setattr(file_ops, "_remove_file", refuse)

    with pytest.raises(FileAccessError) as exc_info:
        file_ops.delete(path)

    assert exc_info.value.access is AccessKind.DELETE
    assert isinstance(exc_info.value.cause, PermissionError)
    assert path.exists()


def test_delete_falls_back_to_shell_command(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "stuck.txt"
    path.write_text("x", encoding="utf-8")
    calls: list[str] = []

    def refuse(_path: str) -> None:
        raise PermissionError("denied")

    def fake_run_delete(target: str) -> None:
        calls.append(target)
        os.remove(target)

    monkeypatch.setattr(file_ops, "_remove_file", refuse)
    monkeypatch.setattr(file_ops, "run_delete", fake_run_delete)

    with caplog.at_level(logging.WARNING, logger="fsio"):
        file_ops.delete(path)

    assert calls == [str(path)]
    assert not path.exists()
    assert _events(caplog)[-1]["event"] == "file_delete_fallback"


def test_delete_fails_when_fallback_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "stuck.txt"
    path.write_text("x", encoding="utf-8")

    def refuse(_path: str) -> None:
        raise PermissionError("denied")

    def failing_run_delete(target: str) -> None:
        raise PathIOError(target, "unlink: cannot remove", code=1)

    monkeypatch.setattr(file_ops, "_remove_file", refuse)
    monkeypatch.setattr(file_ops, "run_delete", failing_run_delete)

    with pytest.raises(FileAccessError, match="No known delete method works") as exc_info:
        file_ops.delete(path)

    assert exc_info.value.cause.code == 1


def test_copy(tmp_path: Path) -> None:
    source = tmp_path / "src.txt"
    target = tmp_path / "dst.txt"
    source.write_text("payload", encoding="utf-8")
    target.write_text("old", encoding="utf-8")

    file_ops.copy(source, target)

    assert target.read_text(encoding="utf-8") == "payload"
    assert source.exists()


def test_copy_missing_source(tmp_path: Path) -> None:
    with pytest.raises(MissingFileError):
        file_ops.copy(tmp_path / "nope.txt", tmp_path / "dst.txt")


def test_copy_refuses_existing_target(tmp_path: Path) -> None:
    source = tmp_path / "src.txt"
    target = tmp_path / "dst.txt"
    source.write_text("new", encoding="utf-8")
    target.write_text("old", encoding="utf-8")

    with pytest.raises(FileAlreadyExistsError):
        file_ops.copy(source, target, overwrite=False)

    assert target.read_text(encoding="utf-8") == "old"


def test_copy_failure_without_fallback(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    source = tmp_path / "src.txt"
    source.write_text("x", encoding="utf-8")
    apply_settings(Settings(shell_fallback=False))

    def broken_copy(*_args: object, **_kwargs: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(file_ops.shutil, "copy2", broken_copy)

    with pytest.raises(PathIOError, match="Copying file to"):
        file_ops.copy(source, tmp_path / "dst.txt")


def test_copy_falls_back_to_shell_command(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    source = tmp_path / "src.txt"
    target = tmp_path / "dst.txt"
    source.write_text("x", encoding="utf-8")
    calls: list[tuple[str, str]] = []

    def broken_copy(*_args: object, **_kwargs: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(file_ops.shutil, "copy2", broken_copy)
    monkeypatch.setattr(file_ops, "run_copy", lambda src, dst: calls.append((src, dst)))

    file_ops.copy(source, target)

    assert calls == [(str(source), str(target))]


def test_move(tmp_path: Path) -> None:
    source = tmp_path / "src.txt"
    target = tmp_path / "moved.txt"
    source.write_text("x", encoding="utf-8")

    file_ops.move(source, target)

    assert not source.exists()
    assert target.read_text(encoding="utf-8") == "x"


def test_read_first_bytes(tmp_path: Path) -> None:
    path = tmp_path / "head.txt"
    path.write_text("hello world", encoding="utf-8")

    assert file_ops.read_first_bytes(path, 5) == b"hello"
    assert file_ops.read_first_bytes(tmp_path / "missing.txt", 5) == b""


def test_read_first_bytes_of_binary_file(tmp_path: Path) -> None:
    png = tmp_path / "image.png"
    png.write_bytes(b"\x89PNG\r\n\x1a\n" + bytes(range(256)))

    assert file_ops.read_first_bytes(png, 4) == b"\x89PNG"
    assert file_ops.read_first_bytes(png, 8) == b"\x89PNG\r\n\x1a\n"


def test_read_first_bytes_counts_bytes_not_characters(tmp_path: Path) -> None:
    path = tmp_path / "utf8.txt"
    path.write_text("äb", encoding="utf-8")

    assert file_ops.read_first_bytes(path, 2) == "ä".encode("utf-8")


class TestExtensions:
    def test_get_extension(self) -> None:
        assert file_ops.get_extension("/tmp/report.PDF") == ".PDF"
        assert file_ops.get_extension("archive.tar.gz") == ".gz"
        assert file_ops.get_extension("archive.tar.gz", double_extension=True) == ".tar.gz"
        assert file_ops.get_extension("https://host/img/logo.png?v=3") == ".png"

    def test_get_extension_without_extension(self) -> None:
        assert file_ops.get_extension("README") is None
        assert file_ops.get_extension("README", double_extension=True) is None
        assert file_ops.get_extension_name("README") is None

    def test_get_extension_name(self) -> None:
        assert file_ops.get_extension_name("a.TXT") == "TXT"
        assert file_ops.get_extension_name("a.tar.bz2", double_extension=True) == "tar.bz2"

    def test_get_name_without_extension(self) -> None:
        assert file_ops.get_name_without_extension("/d/report.txt") == "report"
        assert file_ops.get_name_without_extension("/d/archive.tar.gz", True) == "archive"
        assert file_ops.get_name_without_extension("C:\\d\\README") == "README"

    def test_change_extension(self) -> None:
        assert file_ops.change_extension("/d/report.txt", "md") == "/d/report.md"
        assert file_ops.change_extension("/d/archive.tar.gz", ".zip", True) == "/d/archive.zip"

    def test_change_extension_renames_file(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("x", encoding="utf-8")

        renamed = file_ops.change_extension(path, "md", handle=True)

        assert renamed == str(tmp_path / "notes.md")
        assert not path.exists()
        assert Path(renamed).read_text(encoding="utf-8") == "x"
