"""
Domain exceptions for the Employee Management Service.

Every error raised by the core carries the HTTP status code it maps to, so
the API layer can render it without knowing about individual error types.
"""


class EmployeeServiceError(Exception):
    """Base class for all service errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConflictError(EmployeeServiceError):
    """A write collides with a uniqueness constraint."""

    status_code = 409


class SerializationConflictError(ConflictError):
    """The database aborted a serializable transaction; the caller may retry."""

    retriable = True


class NotFoundError(EmployeeServiceError):
    """A lookup by identity or username found no record."""

    status_code = 404


class BadRequestError(EmployeeServiceError):
    """The caller attempted a disallowed mutation or sent a malformed batch."""

    status_code = 400


class UnsupportedOperatorError(BadRequestError):
    """A filter expression used an operator outside the supported set."""


class IndexingFailure(EmployeeServiceError):
    """
    An index upsert or search did not complete.

    Returned inside an IndexResult rather than raised, since the outcome is
    unknown rather than a confirmed absence.
    """

    status_code = 503


class IndexUnavailableError(EmployeeServiceError):
    """Raised at the API boundary when the search backend cannot be used."""

    status_code = 503
