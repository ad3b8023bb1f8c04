"""Custom exceptions for the IWEMS application."""


class IwemsError(Exception):
    """Base class for every error raised by this package."""
    pass


class NotAuthenticated(IwemsError):
    """Raised when an auth operation needs a signed-in identity and there is none."""
    pass


class ValidationFailed(IwemsError):
    """Raised before any network call when a form value is missing or out of range."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class StoreError(IwemsError):
    """Raised by the remote data client when the backend rejects an auth call."""
    pass


class LocalStoreError(IwemsError):
    """Raised when on-device storage cannot be read or written."""
    pass
