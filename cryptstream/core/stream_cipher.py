# stream_cipher.py
# -*- coding: utf-8 -*-
"""
Chunked XChaCha20-Poly1305 in the STREAM construction (big-endian 32-bit counter).

Every chunk is sealed under its own 24-byte nonce::

    stream_nonce (19 bytes) || counter (uint32, big-endian) || last flag (0x00 / 0x01)

so a chunk only authenticates at the position it was written at, and only the
chunk sealed with the last flag can end the stream. Reordering, duplication,
splicing and truncation all surface as tag failures.
"""

import logging
import struct

from Crypto.Cipher import ChaCha20_Poly1305

from ..utils.constants import (
    KEY_BYTES, STREAM_NONCE_BYTES, TAG_BYTES, MAX_CHUNK_COUNTER
)
from ..utils.exceptions import AuthenticationError, ArgumentError, CryptstreamError
from ..utils.secure_memory import wipe

logger = logging.getLogger(__name__)

_COUNTER_AND_FLAG = struct.Struct(">IB")


class _StreamCodec:
    """Key ownership, nonce sequencing and finalisation shared by both directions."""

    def __init__(self, key: bytes | bytearray, stream_nonce: bytes | bytearray):
        if len(key) != KEY_BYTES:
            raise ArgumentError(f"Invalid key length. Expected {KEY_BYTES}, got {len(key)}.")
        if len(stream_nonce) != STREAM_NONCE_BYTES:
            raise ArgumentError(
                f"Invalid stream nonce length. Expected {STREAM_NONCE_BYTES}, got {len(stream_nonce)}."
            )
        # Private copy: the caller may wipe its own buffer right after construction.
        self._key = bytearray(key)
        self._stream_nonce = bytes(stream_nonce)
        self._counter = 0
        self._finished = False
        self._closed = False

    @property
    def chunks_processed(self) -> int:
        return self._counter

    @property
    def finished(self) -> bool:
        return self._finished

    def _next_cipher(self, last: bool):
        if self._closed:
            raise CryptstreamError("Stream codec is closed.")
        if self._finished:
            raise CryptstreamError("Stream already finalized: the last chunk was processed.")
        if self._counter > MAX_CHUNK_COUNTER:
            raise CryptstreamError("Chunk counter exhausted: stream exceeds 2^32 chunks.")
        nonce = self._stream_nonce + _COUNTER_AND_FLAG.pack(self._counter, 1 if last else 0)
        return ChaCha20_Poly1305.new(key=self._key, nonce=nonce)

    def _advance(self, last: bool) -> None:
        self._counter += 1
        if last:
            self._finished = True

    def close(self) -> None:
        """Wipes the key copy. The codec is unusable afterwards."""
        if not self._closed:
            wipe(self._key)
            self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class StreamEncryptor(_StreamCodec):
    """Seals a plaintext stream chunk by chunk."""

    def _seal(self, chunk: bytes, last: bool) -> bytes:
        cipher = self._next_cipher(last)
        ciphertext, tag = cipher.encrypt_and_digest(chunk)
        self._advance(last)
        return ciphertext + tag

    def encrypt_next(self, chunk: bytes) -> bytes:
        """Encrypts a non-final chunk. Returns ``len(chunk) + TAG_BYTES`` bytes."""
        return self._seal(chunk, last=False)

    def encrypt_last(self, chunk: bytes) -> bytes:
        """Encrypts the final chunk (possibly empty) and finalizes the stream."""
        return self._seal(chunk, last=True)


class StreamDecryptor(_StreamCodec):
    """Opens a stream produced by StreamEncryptor, verifying every chunk."""

    def _open(self, chunk: bytes, last: bool) -> bytes:
        if len(chunk) < TAG_BYTES:
            raise AuthenticationError(
                f"Chunk {self._counter} is truncated: {len(chunk)} bytes, shorter than the {TAG_BYTES}-byte tag."
            )
        cipher = self._next_cipher(last)
        ciphertext, tag = chunk[:-TAG_BYTES], chunk[-TAG_BYTES:]
        try:
            plaintext = cipher.decrypt_and_verify(ciphertext, tag)
        except ValueError as e:
            # pycryptodome reports a MAC mismatch as ValueError
            raise AuthenticationError(
                f"MAC check failed on chunk {self._counter}: incorrect password or data corrupted."
            ) from e
        self._advance(last)
        return plaintext

    def decrypt_next(self, chunk: bytes) -> bytes:
        """Decrypts and verifies a non-final chunk."""
        return self._open(chunk, last=False)

    def decrypt_last(self, chunk: bytes) -> bytes:
        """Decrypts and verifies the final chunk and finalizes the stream."""
        return self._open(chunk, last=True)
