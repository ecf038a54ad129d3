# tests/test_naming_traversal.py
# -*- coding: utf-8 -*-
"""Tests for the suffix convention and the directory traversal collaborator."""

import os
from pathlib import Path

import pytest

from cryptstream.core import traversal
from cryptstream.core.naming import is_encrypted_path, encrypted_path_for, decrypted_path_for
from cryptstream.core.traversal import (
    iter_candidate_files, select_operation, process_file, process_tree
)
from cryptstream.utils.config import RunConfig
from cryptstream.utils.constants import ENCRYPTED_SUFFIX
from cryptstream.utils.exceptions import ArgumentError, DerivationError, FileAccessError

PASSWORD = bytearray(b"correct-password")


# --- Naming ---

def test_suffix_predicate():
    assert is_encrypted_path("notes.txt" + ENCRYPTED_SUFFIX)
    assert is_encrypted_path(os.path.join("dir", "a" + ENCRYPTED_SUFFIX))
    assert not is_encrypted_path("notes.txt")
    assert not is_encrypted_path(os.path.join("dir" + ENCRYPTED_SUFFIX, "plain.txt"))


def test_output_names():
    assert encrypted_path_for("notes.txt") == "notes.txt" + ENCRYPTED_SUFFIX
    assert decrypted_path_for("notes.txt" + ENCRYPTED_SUFFIX) == "notes.txt"


@pytest.mark.parametrize("name", ["notes.txt", ENCRYPTED_SUFFIX, os.path.join("dir", ENCRYPTED_SUFFIX)])
def test_decrypted_name_errors(name):
    with pytest.raises(ArgumentError):
        decrypted_path_for(name)


# --- Operation selection ---

@pytest.mark.parametrize("name,mode,expected", [
    ("a.txt", "auto", "encrypt"),
    ("a.txt" + ENCRYPTED_SUFFIX, "auto", "decrypt"),
    ("a.txt", "encrypt", "encrypt"),
    ("a.txt" + ENCRYPTED_SUFFIX, "encrypt", None),
    ("a.txt", "decrypt", None),
    ("a.txt" + ENCRYPTED_SUFFIX, "decrypt", "decrypt"),
])
def test_select_operation(name, mode, expected):
    assert select_operation(name, mode) == expected


def test_select_operation_unknown_mode():
    with pytest.raises(ArgumentError):
        select_operation("a.txt", "shred")


# --- Candidate listing ---

def _make_tree(root: Path) -> None:
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "b.txt").write_bytes(b"b")
    (root / "a.txt").write_bytes(b"a")
    (root / "sub" / "c.txt").write_bytes(b"c")
    (root / "sub" / "deeper" / "d.txt").write_bytes(b"d")


def test_candidates_non_recursive(tmp_path: Path):
    _make_tree(tmp_path)
    files = iter_candidate_files(str(tmp_path), recursive=False)
    assert [os.path.basename(f) for f in files] == ["a.txt", "b.txt"]


def test_candidates_recursive(tmp_path: Path):
    _make_tree(tmp_path)
    files = iter_candidate_files(str(tmp_path), recursive=True)
    assert sorted(os.path.relpath(f, tmp_path) for f in files) == sorted([
        "a.txt", "b.txt", os.path.join("sub", "c.txt"), os.path.join("sub", "deeper", "d.txt")
    ])


def test_candidates_single_file(tmp_path: Path):
    single = tmp_path / "only.txt"
    single.write_bytes(b"x")
    assert iter_candidate_files(str(single), recursive=True) == [str(single)]


def test_candidates_missing_root(tmp_path: Path):
    with pytest.raises(FileAccessError):
        iter_candidate_files(str(tmp_path / "nope"), recursive=False)


# --- Processing ---

def test_process_file_skips_in_restricted_mode(tmp_path: Path):
    plain = tmp_path / "a.txt"
    plain.write_bytes(b"a")
    config = RunConfig(path=str(plain), mode="decrypt")
    assert process_file(str(plain), PASSWORD, config) is None
    assert plain.read_bytes() == b"a"


def test_process_tree_round_trip(tmp_path: Path):
    _make_tree(tmp_path)
    summary = process_tree(RunConfig(path=str(tmp_path), recursive=True), PASSWORD)
    assert summary.ok and len(summary.succeeded) == 4
    assert all(p.name.endswith(ENCRYPTED_SUFFIX) for p in tmp_path.rglob("*") if p.is_file())

    summary = process_tree(RunConfig(path=str(tmp_path), recursive=True), PASSWORD)
    assert summary.ok and len(summary.succeeded) == 4
    assert (tmp_path / "sub" / "deeper" / "d.txt").read_bytes() == b"d"
    assert not any(p.name.endswith(ENCRYPTED_SUFFIX) for p in tmp_path.rglob("*"))


def test_process_tree_isolates_per_file_failures(tmp_path: Path):
    (tmp_path / "good.txt").write_bytes(b"good")
    broken = tmp_path / ("broken" + ENCRYPTED_SUFFIX)
    broken.write_bytes(b"too short")
    (tmp_path / "zzz.txt").write_bytes(b"last")

    summary = process_tree(RunConfig(path=str(tmp_path)), PASSWORD)
    assert summary.failed == [str(broken)]
    assert len(summary.succeeded) == 2 and not summary.ok
    assert (tmp_path / ("zzz.txt" + ENCRYPTED_SUFFIX)).exists(), "Files after the failure are still processed"
    assert broken.read_bytes() == b"too short"


def test_process_tree_keeps_sources_when_asked(tmp_path: Path):
    (tmp_path / "a.txt").write_bytes(b"a")
    summary = process_tree(RunConfig(path=str(tmp_path), mode="encrypt", delete_source=False), PASSWORD)
    assert summary.ok
    assert (tmp_path / "a.txt").exists() and (tmp_path / ("a.txt" + ENCRYPTED_SUFFIX)).exists()


def test_process_tree_counts_skipped(tmp_path: Path):
    (tmp_path / "a.txt").write_bytes(b"a")
    summary = process_tree(RunConfig(path=str(tmp_path), mode="decrypt"), PASSWORD)
    assert summary.skipped == [str(tmp_path / "a.txt")] and summary.ok


def test_process_tree_aborts_on_derivation_error(tmp_path: Path, monkeypatch):
    (tmp_path / "a.txt").write_bytes(b"a")
    (tmp_path / "b.txt").write_bytes(b"b")
    calls = []

    def failing_encrypt(path, password, **kwargs):
        calls.append(path)
        raise DerivationError("bad parameters")
    monkeypatch.setattr(traversal, "encrypt_file", failing_encrypt)

    with pytest.raises(DerivationError):
        process_tree(RunConfig(path=str(tmp_path)), PASSWORD)
    assert len(calls) == 1, "The run stops at the first derivation failure"
