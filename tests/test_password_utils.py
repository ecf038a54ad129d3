# tests/test_password_utils.py
# -*- coding: utf-8 -*-
"""Tests for password prompts and non-interactive password sources."""

import io
from pathlib import Path

import pytest

from cryptstream.cli import password_utils
from cryptstream.cli.password_utils import (
    get_interactive_password, read_password_file, read_password_stdin, confirm_directory_run
)
from cryptstream.utils.constants import EXIT_INTERRUPT
from cryptstream.utils.exceptions import (
    PasswordMismatchError, AuthenticationError, ArgumentError, FileAccessError
)


def _fake_getpass(monkeypatch, *answers):
    replies = iter(answers)
    monkeypatch.setattr(password_utils.getpass, "getpass", lambda prompt="": next(replies))


class _FakeStdin:
    def __init__(self, data: bytes, tty: bool = False):
        self.buffer = io.BytesIO(data)
        self._tty = tty

    def isatty(self):
        return self._tty


def test_interactive_password_confirmed(monkeypatch):
    _fake_getpass(monkeypatch, "correct-password", "correct-password")
    password = get_interactive_password()
    assert isinstance(password, bytearray)
    assert password == b"correct-password"


def test_interactive_password_utf8(monkeypatch):
    _fake_getpass(monkeypatch, "pässwörd", "pässwörd")
    assert get_interactive_password() == "pässwörd".encode("utf-8")


def test_interactive_password_mismatch(monkeypatch):
    _fake_getpass(monkeypatch, "correct-password", "typo-password")
    with pytest.raises(PasswordMismatchError):
        get_interactive_password()
    assert issubclass(PasswordMismatchError, AuthenticationError)


def test_interactive_password_empty(monkeypatch):
    _fake_getpass(monkeypatch, "", "")
    with pytest.raises(ArgumentError):
        get_interactive_password()


def test_interactive_password_ctrl_c(monkeypatch):
    def interrupted(prompt=""):
        raise KeyboardInterrupt
    monkeypatch.setattr(password_utils.getpass, "getpass", interrupted)
    with pytest.raises(SystemExit) as excinfo:
        get_interactive_password()
    assert excinfo.value.code == EXIT_INTERRUPT


def test_password_file_first_line_stripped(tmp_path: Path):
    pw_file = tmp_path / "pw.txt"
    pw_file.write_bytes(b"  secret-line  \nsecond line ignored\n")
    assert read_password_file(str(pw_file)) == b"secret-line"


def test_password_file_missing_or_empty(tmp_path: Path):
    with pytest.raises(FileAccessError):
        read_password_file(str(tmp_path / "missing"))
    empty = tmp_path / "empty"
    empty.write_bytes(b"\n")
    with pytest.raises(ArgumentError):
        read_password_file(str(empty))


def test_password_stdin(monkeypatch):
    monkeypatch.setattr(password_utils.sys, "stdin", _FakeStdin(b"piped-secret\n"))
    assert read_password_stdin() == b"piped-secret"


def test_password_stdin_rejects_tty_and_empty(monkeypatch):
    monkeypatch.setattr(password_utils.sys, "stdin", _FakeStdin(b"x\n", tty=True))
    with pytest.raises(ArgumentError):
        read_password_stdin()
    monkeypatch.setattr(password_utils.sys, "stdin", _FakeStdin(b""))
    with pytest.raises(ArgumentError):
        read_password_stdin()


@pytest.mark.parametrize("answer,expected", [
    ("y\n", True), ("Y\n", True), ("yes\n", True), ("\n", False), ("n\n", False), ("sure\n", False)
])
def test_confirm_directory_run(monkeypatch, answer, expected):
    monkeypatch.setattr(password_utils.sys, "stdin", io.StringIO(answer))
    assert confirm_directory_run("/tmp/somewhere", recursive=True) is expected


def test_confirm_directory_run_eof(monkeypatch):
    monkeypatch.setattr(password_utils.sys, "stdin", io.StringIO(""))
    assert confirm_directory_run("/tmp/somewhere", recursive=False) is False


def test_confirm_directory_prompt_goes_to_stderr(monkeypatch, capsys):
    monkeypatch.setattr(password_utils.sys, "stdin", io.StringIO("y\n"))
    assert confirm_directory_run("/tmp/somewhere", recursive=False)
    captured = capsys.readouterr()
    assert captured.out == "", "stdout must stay clean for scripting"
    assert "Continue? (y/N)" in captured.err
