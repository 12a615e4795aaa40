"""Base error types shared by every module.

Module-specific errors subclass ``PortalError`` and carry a stable ``code``
that routers map to HTTP status codes.
"""


class PortalError(Exception):
    """Base portal error."""

    def __init__(self, message: str, code: str = "portal_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class StoreUnavailableError(PortalError):
    """A store read or write failed (driver error, timeout, no hosts)."""

    def __init__(self, message: str = "Data store unavailable"):
        super().__init__(message, "store_unavailable")


class InvariantViolationError(PortalError):
    """Stored data breaks a model invariant.

    Raised for a single record; aggregation logs it and skips the record.
    """

    def __init__(self, message: str):
        super().__init__(message, "invariant_violation")
