from __future__ import annotations


class ValidationError(ValueError):
    """Raised when a size specification or a size/stock combination is invalid."""


class BackendError(RuntimeError):
    """Raised when the inventory backend cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
