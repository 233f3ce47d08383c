"""Custom exceptions for athenacli."""
from typing import Optional
from athenacli.core.enums import ErrorKind, JobStatus


class AthenaCliException(Exception):
    """Base exception for all athenacli-specific exceptions."""

    kind: ErrorKind = ErrorKind.INTERNAL

    @property
    def message(self) -> str:
        """Error text without the kind tag."""
        return super().__str__()

    def __str__(self) -> str:
        return f"[{self.kind}] {self.message}"


class SubmissionError(AthenaCliException):
    """Raised when the service rejects or cannot accept a query submission."""

    kind = ErrorKind.SUBMISSION


class StatusQueryError(AthenaCliException):
    """Raised when the status call itself fails (transport or auth)."""

    kind = ErrorKind.STATUS


class JobFailedError(AthenaCliException):
    """Raised when the service reports a job as FAILED or CANCELLED."""

    kind = ErrorKind.JOB_FAILED

    def __init__(self, job_id: str, status: JobStatus, reason: Optional[str]):
        self.job_id = job_id
        self.status = status
        self.reason = reason or ""
        super().__init__(
            f"query {job_id} could not finish ({status}): {self.reason}"
        )


class QueryCancelledError(AthenaCliException):
    """Raised when the deadline elapses or a local cancel signal fires."""

    kind = ErrorKind.CANCELLED


class FetchError(AthenaCliException):
    """Raised when result bytes cannot be read from the object store."""

    kind = ErrorKind.FETCH


class ObjectNotFoundError(FetchError):
    """Raised when no object exists at the requested path."""

    pass


class ObjectAccessError(FetchError):
    """Raised when the store denies access to the requested path."""

    pass


class StoreError(AthenaCliException):
    """Raised when bytes cannot be written to the destination path."""

    kind = ErrorKind.STORE


class InvalidStateTransitionError(AthenaCliException):
    """Raised when attempting an invalid lifecycle state transition."""

    pass


class InvalidPathError(AthenaCliException):
    """Raised when an object path cannot be parsed."""

    kind = ErrorKind.CONFIG


class UnsupportedPathError(InvalidPathError):
    """Raised when no object store handles the path's scheme."""

    pass


class TemplateRenderError(AthenaCliException):
    """Raised when a query or path template cannot be rendered."""

    kind = ErrorKind.CONFIG


class IdentityError(AthenaCliException):
    """Raised when the caller's account cannot be determined."""

    kind = ErrorKind.CONFIG
