# cryptstream/core/traversal.py
# -*- coding: utf-8 -*-
"""
Directory traversal and per-file dispatch.

Each file is an independent unit of work: it gets its own salt, derived key
and codec, and a failure on one file never stops its siblings. Only a
DerivationError, which signals a configuration bug rather than bad input,
aborts the whole run.
"""

import logging
import os
from dataclasses import dataclass, field

from .file_handler import encrypt_file, decrypt_file
from .naming import is_encrypted_path
from ..utils.config import RunConfig, MODE_AUTO, MODE_ENCRYPT, MODE_DECRYPT
from ..utils.exceptions import (
    ArgumentError, CryptstreamError, DerivationError, FileAccessError
)

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome counts of a directory run."""
    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def iter_candidate_files(root: str, recursive: bool) -> list[str]:
    """
    Lists the regular files to process under ``root``.

    A file root yields itself. A directory yields its direct files, or every
    file below it when ``recursive`` is set. The list is built completely
    before anything is processed, so files written during the run are not
    picked up again.

    Raises:
        FileAccessError: If ``root`` does not exist or cannot be listed.
    """
    if os.path.isfile(root):
        return [root]
    if not os.path.isdir(root):
        raise FileAccessError(f"Path not found or not a regular file/directory: {root}")

    candidates: list[str] = []
    try:
        if recursive:
            def _on_error(e: OSError):
                logger.warning(f"Skipping unreadable directory: {e}")
            for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
                dirnames.sort()
                for name in sorted(filenames):
                    path = os.path.join(dirpath, name)
                    if os.path.isfile(path):
                        candidates.append(path)
        else:
            for entry in sorted(os.scandir(root), key=lambda e: e.name):
                if entry.is_file():
                    candidates.append(entry.path)
    except OSError as e:
        msg = f"Could not list directory '{root}': {e}"
        logger.error(msg)
        raise FileAccessError(msg) from e

    logger.debug(f"Found {len(candidates)} candidate file(s) under {root}.")
    return candidates


def select_operation(path: str, mode: str) -> str | None:
    """Returns 'encrypt', 'decrypt', or None when ``path`` should be skipped."""
    encrypted = is_encrypted_path(path)
    if mode == MODE_AUTO:
        return MODE_DECRYPT if encrypted else MODE_ENCRYPT
    if mode == MODE_ENCRYPT:
        return None if encrypted else MODE_ENCRYPT
    if mode == MODE_DECRYPT:
        return MODE_DECRYPT if encrypted else None
    raise ArgumentError(f"Unknown mode: {mode}")


def process_file(path: str, password: bytes | bytearray, config: RunConfig) -> str | None:
    """
    Encrypts or decrypts a single file according to ``config``.

    Returns:
        The output path, or None if the file was skipped.

    Raises:
        CryptstreamError: Any per-file failure, unchanged.
    """
    operation = select_operation(path, config.mode)
    if operation is None:
        logger.debug(f"Skipping {path} (mode '{config.mode}').")
        return None
    if operation == MODE_ENCRYPT:
        return encrypt_file(path, password, delete_source=config.delete_source)
    return decrypt_file(path, password, delete_source=config.delete_source)


def process_tree(config: RunConfig, password: bytes | bytearray) -> RunSummary:
    """
    Processes every candidate file under ``config.path``.

    Per-file errors are logged and recorded in the summary. DerivationError
    is re-raised.
    """
    summary = RunSummary()
    for path in iter_candidate_files(config.path, config.recursive):
        try:
            output = process_file(path, password, config)
        except DerivationError:
            logger.critical("Key derivation failed; aborting the run.")
            raise
        except CryptstreamError as e:
            logger.error(f"Failed to process {path}: {e}")
            summary.failed.append(path)
            continue
        if output is None:
            summary.skipped.append(path)
        else:
            summary.succeeded.append(path)

    logger.info(
        f"Processed {len(summary.succeeded)} file(s), "
        f"{len(summary.failed)} failed, {len(summary.skipped)} skipped."
    )
    return summary
