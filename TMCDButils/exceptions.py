"""Custom exception hierarchy for TMCDB utilities."""


class TMCDBError(Exception):
    """Base exception for all TMCDB errors."""


class DecodeError(TMCDBError):
    """Raised when a legacy monitor record cannot be decoded."""

    def __init__(self, message, record=None):
        super().__init__(message)
        self.record = record


class InvalidSizeError(TMCDBError, ValueError):
    """Raised when a placeholder size class is out of range."""

    def __init__(self, size, max_size):
        super().__init__(f"Value size out of range: {size} (expected 0 <= size < {max_size})")
        self.size = size
        self.max_size = max_size


class ConfigError(TMCDBError):
    """Raised when ingestion settings are invalid."""


class StoreError(TMCDBError):
    """Raised when a store operation fails."""


class ConnectionError(StoreError):
    """Raised when the store connection fails."""
