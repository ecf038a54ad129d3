# naming.py
# -*- coding: utf-8 -*-
"""File-name convention that marks a file as a container. Pure string functions."""

import os

from ..utils.constants import ENCRYPTED_SUFFIX
from ..utils.exceptions import ArgumentError

def is_encrypted_path(path: str) -> bool:
    """True if the file name carries the container suffix."""
    return os.path.basename(path).endswith(ENCRYPTED_SUFFIX)

def encrypted_path_for(path: str) -> str:
    """Output path for encrypting ``path``: the suffix is appended."""
    return path + ENCRYPTED_SUFFIX

def decrypted_path_for(path: str) -> str:
    """
    Output path for decrypting ``path``: the suffix is stripped.

    Raises:
        ArgumentError: If the name has no suffix, or is only the suffix.
    """
    if not is_encrypted_path(path):
        raise ArgumentError(f"Not an encrypted file name (missing '{ENCRYPTED_SUFFIX}'): {path}")
    if os.path.basename(path) == ENCRYPTED_SUFFIX:
        raise ArgumentError(f"Cannot derive an output name from '{path}'.")
    return path[:-len(ENCRYPTED_SUFFIX)]
