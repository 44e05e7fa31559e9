"""
Exception hierarchy for llprogress.

Every failure that stops a request derives from LLProgressError so callers
(and the CLI) can handle the whole family with one except clause.
"""


class LLProgressError(Exception):
    """Base class for all llprogress errors."""
    pass


class ConfigError(LLProgressError):
    """Config file unreadable, invalid, or credentials missing from the environment."""
    pass


class CatalogError(LLProgressError):
    """Module catalog file unreadable, invalid JSON, or has unexpected fields."""
    pass


class TransportError(LLProgressError):
    """Network-level failure while issuing a request."""
    pass


class DecodeError(LLProgressError):
    """Response body is not a valid statements page."""
    pass


class MalformedRecord(LLProgressError):
    """A statement that signals a schema mismatch rather than missing data."""
    pass
