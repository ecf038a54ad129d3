# crypto_logic.py
# -*- coding: utf-8 -*-
"""Core cryptographic primitives: key derivation, salt and nonce generation."""

import os
import logging
import argon2
from argon2.exceptions import HashingError

from ..utils.constants import (
    KEY_BYTES,
    SALT_BYTES,
    STREAM_NONCE_BYTES,
    ARGON2_TIME_COST,
    ARGON2_MEMORY_COST_KIB,
    ARGON2_PARALLELISM
)
from ..utils.exceptions import DerivationError, ArgumentError

logger = logging.getLogger(__name__)

def generate_salt() -> bytes:
    """Generates a cryptographically secure random salt."""
    return os.urandom(SALT_BYTES)

def generate_stream_nonce() -> bytes:
    """Generates the random per-file nonce prefix for the STREAM construction."""
    return os.urandom(STREAM_NONCE_BYTES)

def derive_key(password: bytes | bytearray, salt: bytes | bytearray) -> bytearray:
    """
    Derives a key from the password and salt using Argon2id.

    The cost parameters are fixed in ``constants`` and must be identical on the
    encrypting and decrypting side, since the container does not record them.

    Args:
        password: The password bytes.
        salt: The salt bytes (must be SALT_BYTES long).

    Returns:
        The KEY_BYTES-long derived key as a bytearray the caller must wipe.

    Raises:
        ArgumentError: If the provided salt has an invalid length.
        DerivationError: If Argon2 rejects the parameters.
    """
    logger.debug("Deriving key using Argon2id...")
    if len(salt) != SALT_BYTES:
        msg = f"Invalid salt length provided for key derivation. Expected {SALT_BYTES}, got {len(salt)}."
        logger.error(msg)
        raise ArgumentError(msg)

    try:
        # argon2-cffi copies its inputs into C buffers; it needs immutable bytes.
        raw_key = argon2.low_level.hash_secret_raw(
            secret=bytes(password),
            salt=bytes(salt),
            time_cost=ARGON2_TIME_COST,
            memory_cost=ARGON2_MEMORY_COST_KIB,
            parallelism=ARGON2_PARALLELISM,
            hash_len=KEY_BYTES,
            type=argon2.Type.ID
        )
    except HashingError as e:
        msg = f"Argon2 key derivation failed: {e}"
        logger.error(msg, exc_info=True)
        raise DerivationError(msg) from e

    key = bytearray(raw_key)
    logger.debug(f"Key derived successfully ({len(key)} bytes).")
    return key
