# secure_memory.py
# -*- coding: utf-8 -*-
"""
Best-effort erasure of sensitive buffers (passwords, derived keys, salts, nonces).

Python ``bytes`` are immutable and cannot be overwritten, so every secret the
application controls is kept in a ``bytearray`` and zeroed in place once it is
no longer needed. Copies made by third-party libraries are outside our reach;
this bounds exposure, it does not eliminate it.
"""

from contextlib import contextmanager
from typing import Iterator

def wipe(buffer: bytearray) -> None:
    """Overwrite ``buffer`` with zeros in place."""
    # Same-length slice assignment writes into the existing allocation.
    buffer[:] = bytes(len(buffer))

@contextmanager
def sensitive_buffer(data: bytes | bytearray) -> Iterator[bytearray]:
    """
    Yields ``data`` as a mutable buffer that is wiped when the block exits,
    whether normally, by an exception, or by an early return.

    A ``bytearray`` is used as-is (the caller hands over ownership);
    anything else is copied into a new ``bytearray``.
    """
    buffer = data if isinstance(data, bytearray) else bytearray(data)
    try:
        yield buffer
    finally:
        wipe(buffer)
