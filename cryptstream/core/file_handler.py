# cryptstream/core/file_handler.py
# -*- coding: utf-8 -*-
"""
Handles streaming file I/O for encryption and decryption: container framing,
the chunk read loops, and error handling. Uses context managers for streams
and for every buffer that holds key material.

Container layout::

    offset 0  : salt, SALT_BYTES (32)
    offset 32 : stream nonce, STREAM_NONCE_BYTES (19)
    offset 51 : chunks; non-final chunks are ENCRYPTED_CHUNK_SIZE (516) bytes,
                the final chunk is 0..CHUNK_SIZE plaintext bytes plus the tag
"""

import logging
import os
from contextlib import contextmanager
from typing import BinaryIO

try:
    from .crypto_logic import derive_key, generate_salt, generate_stream_nonce
    from .naming import encrypted_path_for, decrypted_path_for
    from .stream_cipher import StreamEncryptor, StreamDecryptor
    from ..utils.constants import (
        SALT_BYTES, STREAM_NONCE_BYTES, CHUNK_SIZE, ENCRYPTED_CHUNK_SIZE
    )
    from ..utils.exceptions import (
        FileAccessError, MalformedContainerError, CryptstreamError
    )
    from ..utils.secure_memory import sensitive_buffer
except ImportError as e:
     logging.critical(f"FileHandler: Failed to import core/utils modules: {e}", exc_info=True)
     raise

logger = logging.getLogger(__name__)


# --- Context Manager for File Handling ---
@contextmanager
def stream_handler(filepath: str, mode: str):
    """
    Context manager that opens a local file and maps OS-level failures to
    FileAccessError. Output files are opened with 'xb' so an existing file is
    never overwritten.
    """
    logger.debug(f"Attempting to access file: {filepath} in mode '{mode}'.")
    try:
        file_stream = open(filepath, mode)
    except FileNotFoundError as e:
        msg = f"File not found: {filepath}"
        logger.error(msg)
        raise FileAccessError(msg) from e
    except FileExistsError as e:
        msg = f"Refusing to overwrite existing file: {filepath}"
        logger.error(msg)
        raise FileAccessError(msg) from e
    except OSError as e:
        msg = f"File access error for '{filepath}': {e}"
        logger.error(msg)
        raise FileAccessError(msg) from e

    with file_stream:
        logger.debug(f"Opened file: {filepath} successfully.")
        yield file_stream
    logger.debug(f"Closed file: {filepath}")


def _read_exactly(stream: BinaryIO, size: int) -> bytes:
    """Reads ``size`` bytes, returning fewer only at end of stream."""
    data = stream.read(size)
    if len(data) == size or not data:
        return data
    parts = [data]
    remaining = size - len(data)
    while remaining:
        more = stream.read(remaining)
        if not more:
            break
        parts.append(more)
        remaining -= len(more)
    return b"".join(parts)


# --- Stream-Level Transforms ---

def encrypt_stream(source: BinaryIO, dest: BinaryIO, password: bytes | bytearray) -> int:
    """
    Encrypts ``source`` into ``dest`` as a complete container.

    Reads CHUNK_SIZE bytes at a time. A full read is sealed as a non-final
    chunk; the first short read (possibly empty) is sealed as the final chunk,
    so input whose length is a multiple of CHUNK_SIZE ends with an empty
    final chunk.

    Returns:
        The number of plaintext bytes encrypted.

    Raises:
        DerivationError: If key derivation fails.
        OSError: If reading or writing a stream fails.
    """
    with sensitive_buffer(generate_salt()) as salt, \
         sensitive_buffer(generate_stream_nonce()) as nonce:

        with sensitive_buffer(derive_key(password, salt)) as key:
            encryptor = StreamEncryptor(key, nonce)
        # Derived key is wiped; only the codec's private copy remains.

        with encryptor:
            dest.write(salt)
            dest.write(nonce)
            logger.debug(f"Wrote {len(salt) + len(nonce)}-byte container header.")

            bytes_processed = 0
            while True:
                chunk = _read_exactly(source, CHUNK_SIZE)
                bytes_processed += len(chunk)
                if len(chunk) == CHUNK_SIZE:
                    dest.write(encryptor.encrypt_next(chunk))
                else:
                    dest.write(encryptor.encrypt_last(chunk))
                    break

            logger.debug(f"Encrypted {bytes_processed} plaintext bytes in {encryptor.chunks_processed} chunks.")
            return bytes_processed


def decrypt_stream(source: BinaryIO, dest: BinaryIO, password: bytes | bytearray) -> int:
    """
    Decrypts a container read from ``source`` into ``dest``.

    The header is read first; then ciphertext blocks of ENCRYPTED_CHUNK_SIZE
    are read with one block of look-ahead, and a block is opened as the final
    chunk exactly when nothing follows it. A container cut short anywhere,
    including at a chunk boundary, therefore fails verification.

    Returns:
        The number of plaintext bytes written.

    Raises:
        MalformedContainerError: If the header is incomplete.
        AuthenticationError: If any chunk fails verification.
        DerivationError: If key derivation fails.
        OSError: If reading or writing a stream fails.
    """
    with sensitive_buffer(_read_exactly(source, SALT_BYTES)) as salt, \
         sensitive_buffer(_read_exactly(source, STREAM_NONCE_BYTES)) as nonce:
        if len(salt) != SALT_BYTES:
            raise MalformedContainerError(
                f"Input too short: could not read {SALT_BYTES}-byte salt (got {len(salt)})."
            )
        if len(nonce) != STREAM_NONCE_BYTES:
            raise MalformedContainerError(
                f"Input too short: could not read {STREAM_NONCE_BYTES}-byte nonce (got {len(nonce)})."
            )
        logger.debug("Read container header.")

        with sensitive_buffer(derive_key(password, salt)) as key:
            decryptor = StreamDecryptor(key, nonce)

    with decryptor:
        bytes_processed = 0
        block = _read_exactly(source, ENCRYPTED_CHUNK_SIZE)
        while True:
            following = _read_exactly(source, ENCRYPTED_CHUNK_SIZE)
            if following:
                plaintext = decryptor.decrypt_next(block)
                block = following
            else:
                plaintext = decryptor.decrypt_last(block)
            dest.write(plaintext)
            bytes_processed += len(plaintext)
            if decryptor.finished:
                break

        logger.debug(f"Decrypted {bytes_processed} plaintext bytes from {decryptor.chunks_processed} chunks.")
        return bytes_processed


# --- File-Level Operations ---

def _discard_partial_output(dest_path: str) -> None:
    try:
        os.remove(dest_path)
        logger.info(f"Removed partial output file: {dest_path}")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove partial output file '{dest_path}': {e}")


def _remove_source(source_path: str) -> None:
    try:
        os.remove(source_path)
        logger.debug(f"Removed source file: {source_path}")
    except OSError as e:
        msg = f"Output written but source file could not be removed: {source_path}: {e}"
        logger.error(msg)
        raise FileAccessError(msg) from e


def _transform_file(transform, source_path: str, dest_path: str,
                    password: bytes | bytearray, delete_source: bool) -> int:
    """
    Runs ``transform`` from ``source_path`` into a freshly created ``dest_path``.

    On any failure the partially written destination is removed and the
    source is left untouched. The source is removed only after the output has
    been fully written and synced, and only when ``delete_source`` is set.
    """
    created = False
    try:
        with stream_handler(source_path, 'rb') as input_stream:
            with stream_handler(dest_path, 'xb') as output_stream:
                created = True
                processed = transform(input_stream, output_stream, password)
                output_stream.flush()
                os.fsync(output_stream.fileno())
    except CryptstreamError:
        if created:
            _discard_partial_output(dest_path)
        raise
    except OSError as e:
        if created:
            _discard_partial_output(dest_path)
        msg = f"File read/write error while processing '{source_path}': {e}"
        logger.error(msg)
        raise FileAccessError(msg) from e
    except BaseException:
        # Interrupted (e.g. Ctrl+C): do not leave a half-written file behind.
        if created:
            _discard_partial_output(dest_path)
        raise

    if delete_source:
        _remove_source(source_path)
    return processed


def encrypt_file(
    source_path: str,
    password: bytes | bytearray,
    *, # Keyword-only marker for subsequent arguments
    dest_path: str | None = None,
    delete_source: bool = False
) -> str:
    """
    Encrypts one local file into a container.

    Args:
        source_path: Path of the plaintext file.
        password: The user's password bytes.
        dest_path: Output path; defaults to ``source_path`` + ENCRYPTED_SUFFIX.
        delete_source: Remove ``source_path`` after a successful encryption.

    Returns:
        The path of the written container.

    Raises:
        FileAccessError: If the source cannot be read, the destination exists
            or cannot be written, or the source cannot be removed.
        DerivationError: If key derivation fails.
    """
    dest_path = dest_path or encrypted_path_for(source_path)
    logger.debug(f"Encrypting '{source_path}' -> '{dest_path}'")
    processed = _transform_file(encrypt_stream, source_path, dest_path, password, delete_source)
    logger.info(f"Encrypted {source_path} -> {dest_path} ({processed} bytes)")
    return dest_path


def decrypt_file(
    source_path: str,
    password: bytes | bytearray,
    *, # Keyword-only marker
    dest_path: str | None = None,
    delete_source: bool = False
) -> str:
    """
    Decrypts one container file. Arguments mirror encrypt_file; the default
    destination strips ENCRYPTED_SUFFIX from ``source_path``.

    Raises:
        ArgumentError: If no dest_path is given and the name has no suffix.
        MalformedContainerError: If the file is shorter than the header.
        AuthenticationError: If any chunk fails verification.
        FileAccessError, DerivationError: As for encrypt_file.
    """
    dest_path = dest_path or decrypted_path_for(source_path)
    logger.debug(f"Decrypting '{source_path}' -> '{dest_path}'")
    processed = _transform_file(decrypt_stream, source_path, dest_path, password, delete_source)
    logger.info(f"Decrypted {source_path} -> {dest_path} ({processed} bytes)")
    return dest_path
