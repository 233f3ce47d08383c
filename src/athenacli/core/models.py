"""Data classes for query jobs and execution settings."""
from dataclasses import dataclass, field
from typing import Optional
from athenacli.core.enums import JobStatus, LifecycleState
from athenacli.services.state_machine import LifecycleStateMachine


@dataclass(frozen=True)
class StatusReport:
    """
    One answer from the service's status call.

    result_location is only meaningful once status is SUCCEEDED.
    """

    status: JobStatus
    result_location: Optional[str] = None
    failure_reason: Optional[str] = None


@dataclass(frozen=True)
class ExecutionConfig:
    """Settings the orchestrator needs for every query it runs."""

    output_location: str
    poll_interval_seconds: float = 0.5
    fetch_result: bool = True


@dataclass
class QueryJob:
    """
    A submitted query tracked by the remote service.

    The job is write-once-terminal: after a terminal status has been
    applied no further status can be recorded.
    """

    job_id: str
    query: str
    output_location: str
    status: JobStatus = JobStatus.RUNNING
    state: LifecycleState = LifecycleState.SUBMITTED
    result_location: Optional[str] = None
    failure_reason: Optional[str] = None
    polls: int = field(default=0, compare=False)

    @property
    def is_terminal(self) -> bool:
        return LifecycleStateMachine.is_terminal(self.state)

    def start_polling(self) -> None:
        """Move a freshly submitted job into POLLING."""
        if self.state == LifecycleState.POLLING:
            return
        LifecycleStateMachine.validate_transition(self.state, LifecycleState.POLLING)
        self.state = LifecycleState.POLLING

    def apply_status(self, report: StatusReport) -> LifecycleState:
        """
        Record a polled status and advance the lifecycle.

        Args:
            report: Status returned by the service

        Returns:
            LifecycleState: State after the transition

        Raises:
            InvalidStateTransitionError: If the job is already terminal
        """
        self.state = LifecycleStateMachine.next_state(self.state, report.status)
        self.polls += 1
        self.status = report.status
        if report.result_location:
            self.result_location = report.result_location
        if report.failure_reason:
            self.failure_reason = report.failure_reason
        return self.state

    def abandon(self) -> None:
        """Mark the job cancelled locally; the remote job is left alone."""
        LifecycleStateMachine.validate_transition(self.state, LifecycleState.CANCELLED)
        self.state = LifecycleState.CANCELLED
