# exceptions.py
# -*- coding: utf-8 -*-
"""Custom exception classes for the cryptstream application."""

class CryptstreamError(Exception):
    """Base class for application-specific errors."""
    pass

class FileAccessError(CryptstreamError):
    """Error related to file access (not found, permissions, I/O, removal)."""
    pass

class MalformedContainerError(CryptstreamError):
    """The input is too short to hold the salt and nonce header."""
    pass

class AuthenticationError(CryptstreamError):
    """A chunk failed tag verification (wrong password, corrupted or truncated data)."""
    pass

class PasswordMismatchError(AuthenticationError):
    """The confirmation password does not match the first entry."""
    pass

class DerivationError(CryptstreamError):
    """Argon2 rejected its parameters. Indicates a configuration bug, not bad input."""
    pass

class ArgumentError(CryptstreamError):
    """Error related to invalid arguments or configuration."""
    pass
