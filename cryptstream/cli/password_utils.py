# password_utils.py
# -*- coding: utf-8 -*-
"""Utilities for obtaining the password from the terminal, a file, or piped stdin."""

import getpass
import sys
import logging
import os

from ..utils.constants import EXIT_INTERRUPT
from ..utils.exceptions import (
    FileAccessError, PasswordMismatchError, ArgumentError, CryptstreamError
)
from ..utils.secure_memory import wipe

logger = logging.getLogger(__name__)

def get_interactive_password() -> bytearray:
    """
    Prompts the user interactively for a password and confirmation.

    Returns:
        The confirmed password as a UTF-8 bytearray. The caller owns it and
        must wipe it.

    Raises:
        PasswordMismatchError: If the two entries differ.
        ArgumentError: If the password is empty.
        CryptstreamError: On other unexpected errors during input.
        SystemExit: If the user cancels with Ctrl+C (exits with EXIT_INTERRUPT).
    """
    try:
        password = bytearray(getpass.getpass(prompt="Password: ").encode('utf-8'))
        confirm = bytearray(getpass.getpass(prompt="Confirm: ").encode('utf-8'))
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        logger.warning("Password entry cancelled by user (KeyboardInterrupt).")
        sys.exit(EXIT_INTERRUPT)
    except EOFError:
        msg = "Could not read password from standard input (EOF)."
        logger.error(msg)
        raise CryptstreamError(msg) from None
    except (OSError, UnicodeError) as e:
        msg = f"Error getting password interactively: {e}"
        logger.error(msg, exc_info=True)
        raise CryptstreamError(msg) from e

    try:
        if password != confirm:
            # Never log the entries themselves, even on mismatch
            logger.error("Interactive password entry failed: passwords mismatch.")
            wipe(password)
            raise PasswordMismatchError("Passwords do not match.")
        if not password:
            raise ArgumentError("Empty password not allowed.")
    finally:
        wipe(confirm)

    logger.debug("Password confirmed interactively.")
    return password

def read_password_file(filepath: str) -> bytearray:
    """
    Reads the password from the first line of the specified file.

    Args:
        filepath: Path to the password file.

    Returns:
        The password bytes (read as binary, stripped).

    Raises:
        FileAccessError: If the file cannot be found or read.
        ArgumentError: If the file is empty.
    """
    logger.debug(f"Attempting to read password from file: {filepath}")
    if not os.path.exists(filepath):
        msg = f"Password file not found: {filepath}"
        logger.error(msg)
        raise FileAccessError(msg)
    try:
        with open(filepath, 'rb') as f:
            # Read the first line only and strip leading/trailing whitespace/newlines
            password_bytes = bytearray(f.readline().strip())
    except OSError as e:
        msg = f"Could not read password file {filepath}: {e}"
        logger.error(msg)
        raise FileAccessError(msg) from e

    if not password_bytes:
        msg = f"Password file is empty: {filepath}"
        logger.error(msg)
        raise ArgumentError(msg)

    logger.debug(f"Password read from file: {filepath}")
    return password_bytes

def read_password_stdin() -> bytearray:
    """
    Reads the password from the first line of standard input.
    Intended for piped input, not interactive use.

    Returns:
        The password bytes (read as binary, stripped).

    Raises:
        ArgumentError: If stdin is a TTY or if no data is received.
        CryptstreamError: If stdin cannot be read.
    """
    logger.debug("Attempting to read password from stdin.")
    if sys.stdin.isatty():
        msg = "Cannot read password from TTY stdin using --password-stdin. Pipe input (e.g., echo 'pass' | ...) or omit the option to be prompted."
        logger.error(msg)
        raise ArgumentError(msg)

    try:
        password_bytes = bytearray(sys.stdin.buffer.readline().strip())
    except OSError as e:
        msg = f"Error reading password from stdin: {e}"
        logger.error(msg)
        raise CryptstreamError(msg) from e

    if not password_bytes:
        msg = "No password received from stdin."
        logger.error(msg)
        raise ArgumentError(msg)

    logger.debug("Password read from stdin.")
    return password_bytes

def confirm_directory_run(path: str, recursive: bool) -> bool:
    """Asks before touching every file in a directory. Only 'y'/'yes' proceeds."""
    scope = "all files within it and in all of its subdirectories" if recursive else "all files directly within it"
    # Prompt on stderr so stdout stays clean for scripting
    print(f"You are about to process the directory {path}.\n"
          f"This will affect {scope}. Continue? (y/N) ", end="", file=sys.stderr, flush=True)
    try:
        answer = sys.stdin.readline()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(EXIT_INTERRUPT)
    return answer.strip().lower() in ("y", "yes")
