"""
Core domain exceptions.

These exceptions are transport-agnostic and should be caught by the server
layer to convert into appropriate HTTP responses.
"""


class CoreError(Exception):
    """Base exception for all core errors."""

    pass


class NotFoundError(CoreError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ValidationError(CoreError):
    """Raised when input fails validation before any I/O is attempted."""

    pass


class StorageError(CoreError):
    """Raised when the storage backend fails for a reason other than absence."""

    pass


class UpstreamError(CoreError):
    """Raised when the Agent Engine RPC fails or returns a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class InvalidOperationError(CoreError):
    """Raised when an operation cannot be performed in the current state."""

    pass
