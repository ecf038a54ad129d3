# constants.py
# -*- coding: utf-8 -*-
"""Defines constants used throughout the cryptstream application."""

# --- XChaCha20-Poly1305 STREAM Parameters ---
KEY_BYTES: int = 32           # XChaCha20-Poly1305 key size in bytes
STREAM_NONCE_BYTES: int = 19  # Per-file nonce prefix (24-byte cipher nonce minus counter and flag)
TAG_BYTES: int = 16           # Poly1305 authentication tag size
MAX_CHUNK_COUNTER: int = 0xFFFFFFFF  # 32-bit counter space, about 2 TiB of plaintext per file

# --- Key Derivation Parameters ---
SALT_BYTES: int = 32     # Size of the per-file Argon2 salt

# Argon2id parameters. These are NOT stored in the container: changing any of
# them makes every existing file undecryptable.
ARGON2_TIME_COST: int = 8           # Number of iterations
ARGON2_MEMORY_COST_KIB: int = 16384 # Memory cost in KiB (16 MiB)
ARGON2_PARALLELISM: int = 8         # Number of lanes

# --- Container Layout ---
CHUNK_SIZE: int = 500                                  # Plaintext bytes per chunk
ENCRYPTED_CHUNK_SIZE: int = CHUNK_SIZE + TAG_BYTES     # 516 bytes on disk per non-final chunk
HEADER_BYTES: int = SALT_BYTES + STREAM_NONCE_BYTES    # salt || nonce = 51 bytes

# --- Naming ---
ENCRYPTED_SUFFIX: str = ".encrypted"

# --- Exit Codes ---
# Standard exit codes for shell script compatibility and error identification
EXIT_SUCCESS: int = 0        # Operation completed successfully
EXIT_GENERIC_ERROR: int = 1  # Generic or unexpected runtime error, or failures within a directory run
EXIT_FILE_ERROR: int = 2     # File access/IO error (e.g., not found, permission denied)
EXIT_AUTH_ERROR: int = 3     # Authentication error (bad password, tampered data, password mismatch)
EXIT_ARG_ERROR: int = 4      # Invalid command-line arguments or configuration error
EXIT_FORMAT_ERROR: int = 5   # Input is too short to be a container
EXIT_INTERRUPT: int = 130    # Process interrupted by user (commonly Ctrl+C -> SIGINT)
