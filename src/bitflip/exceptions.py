"""Custom exception hierarchy."""

from __future__ import annotations


class BitflipError(Exception):
    """Base exception for the bitflip package."""


class ConfigurationError(BitflipError):
    """Raised when configuration validation fails."""


class InvalidSizeError(BitflipError):
    """Raised when the requested test size is not a positive value."""


class AllocationFailureError(BitflipError):
    """Raised when the test buffer cannot be allocated."""
