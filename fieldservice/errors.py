# fieldservice/errors.py
"""
Domain failures raised by the service layer.

Every error carries a machine-readable ``kind`` and a message that can be
shown to the user as-is. The HTTP layer maps kinds to status codes.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    CONFLICT = "conflict"
    PRECONDITION_FAILED = "precondition_failed"


class DomainError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class NotFoundError(DomainError):
    """A referenced customer, technician, job or invoice does not exist."""

    kind = ErrorKind.NOT_FOUND


class ValidationFailedError(DomainError):
    """Input is well-formed but semantically invalid."""

    kind = ErrorKind.VALIDATION_FAILED


class ConflictError(DomainError):
    """Input collides with existing state (overlap, duplicate 1:1 child)."""

    kind = ErrorKind.CONFLICT


class PreconditionFailedError(DomainError):
    """The job has not reached the lifecycle state the operation needs."""

    kind = ErrorKind.PRECONDITION_FAILED
