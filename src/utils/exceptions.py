"""Custom exception classes."""


class RegistrationFetchError(ConnectionError):
    """Raised when the registration collection cannot be obtained."""
    pass


class ValidationError(ValueError):
    """Raised when a registration record fails validation."""
    pass
