class DelveError(Exception):
    """Base error for Delve domain exceptions."""


class DataValidationError(DelveError):
    """Raised when packaged or user-supplied table data is malformed."""


class SaveValidationError(DelveError):
    """Raised when save data cannot be decoded into a game state."""
