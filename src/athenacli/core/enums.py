"""Core enumerations for the query execution lifecycle."""
from enum import Enum


class JobStatus(str, Enum):
    """
    Status of a query job as reported by the remote service.

    Only SUCCEEDED, FAILED and CANCELLED are terminal. Any other value the
    service reports (QUEUED, unknown strings) is folded into RUNNING.
    """

    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    def __str__(self) -> str:
        """Return string representation of the enum value."""
        return self.value

    @classmethod
    def from_service(cls, value) -> "JobStatus":
        """
        Map a raw service state onto a JobStatus.

        Args:
            value: State string reported by the service (may be None)

        Returns:
            JobStatus: Recognized terminal status, otherwise RUNNING
        """
        if isinstance(value, str):
            normalized = value.strip().upper()
            for status in (cls.SUCCEEDED, cls.FAILED, cls.CANCELLED):
                if normalized == status.value:
                    return status
        return cls.RUNNING


class LifecycleState(str, Enum):
    """
    Orchestrator state for a single query.

    State flow:
        SUBMITTED → POLLING → SUCCEEDED/FAILED/CANCELLED
    """

    SUBMITTED = "SUBMITTED"
    POLLING = "POLLING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    def __str__(self) -> str:
        """Return string representation of the enum value."""
        return self.value


class ErrorKind(str, Enum):
    """Kind tag carried by every athenacli error."""

    SUBMISSION = "submission"
    STATUS = "status"
    JOB_FAILED = "job_failed"
    CANCELLED = "cancelled"
    FETCH = "fetch"
    STORE = "store"
    CONFIG = "config"
    INTERNAL = "internal"

    def __str__(self) -> str:
        """Return string representation of the enum value."""
        return self.value
