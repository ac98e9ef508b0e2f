"""
Shared exceptions for document services.
"""


class ServiceValidationError(Exception):
    """Raised when a request breaks a business rule (content type, quota, passwords)."""

    pass


class NotFoundError(Exception):
    """Raised when a document does not exist or is not owned by the caller."""

    pass


class NoDocumentsFoundError(NotFoundError):
    """Raised when none of the requested documents resolve for the caller."""

    pass
