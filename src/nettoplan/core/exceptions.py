"""
Nettoplan exception hierarchy.

All nettoplan exceptions inherit from NettoplanError, making it easy for consumers
to catch library-level errors while still distinguishing specific failure modes.

Insufficient historical data is not an error: the return analyzer signals it
by returning None.
"""


class NettoplanError(Exception):
    """Base exception class for all nettoplan errors."""


class InvalidInputError(NettoplanError, ValueError):
    """Raised when a calculator receives invalid input (negative amounts, bad plans)."""


class ConfigurationError(NettoplanError):
    """Raised for configuration errors (missing keys, invalid values)."""


class CacheError(NettoplanError):
    """Raised for caching errors."""
