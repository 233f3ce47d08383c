"""Lifecycle state machine for a single query execution."""
from typing import Dict, Set
from athenacli.core.enums import JobStatus, LifecycleState
from athenacli.core.exceptions import InvalidStateTransitionError


class LifecycleStateMachine:
    """
    Defines valid lifecycle transitions for one query.

    State Diagram:
        SUBMITTED → POLLING → SUCCEEDED/FAILED/CANCELLED
             CANCELLED (local cancel from any non-terminal)
    """

    TRANSITIONS: Dict[LifecycleState, Set[LifecycleState]] = {
        LifecycleState.SUBMITTED: {LifecycleState.POLLING, LifecycleState.CANCELLED},
        LifecycleState.POLLING: {
            LifecycleState.POLLING,
            LifecycleState.SUCCEEDED,
            LifecycleState.FAILED,
            LifecycleState.CANCELLED,
        },
        LifecycleState.SUCCEEDED: set(),  # Terminal state
        LifecycleState.FAILED: set(),  # Terminal state
        LifecycleState.CANCELLED: set(),  # Terminal state
    }

    TERMINAL_STATES = {
        LifecycleState.SUCCEEDED,
        LifecycleState.FAILED,
        LifecycleState.CANCELLED,
    }

    # Where a polled service status moves the lifecycle
    STATUS_TARGETS: Dict[JobStatus, LifecycleState] = {
        JobStatus.RUNNING: LifecycleState.POLLING,
        JobStatus.SUCCEEDED: LifecycleState.SUCCEEDED,
        JobStatus.FAILED: LifecycleState.FAILED,
        JobStatus.CANCELLED: LifecycleState.CANCELLED,
    }

    @classmethod
    def can_transition(cls, from_state: LifecycleState, to_state: LifecycleState) -> bool:
        """
        Check if transition from from_state to to_state is valid.

        Args:
            from_state: Current lifecycle state
            to_state: Desired lifecycle state

        Returns:
            bool: True if transition is valid, False otherwise
        """
        return to_state in cls.TRANSITIONS.get(from_state, set())

    @classmethod
    def validate_transition(cls, from_state: LifecycleState, to_state: LifecycleState) -> None:
        """
        Validate state transition and raise exception if invalid.

        Raises:
            InvalidStateTransitionError: If transition is not valid
        """
        if not cls.can_transition(from_state, to_state):
            raise InvalidStateTransitionError(
                f"Invalid state transition: {from_state} -> {to_state}"
            )

    @classmethod
    def is_terminal(cls, state: LifecycleState) -> bool:
        """Check if state is terminal (no further transitions possible)."""
        return state in cls.TERMINAL_STATES

    @classmethod
    def next_state(cls, current: LifecycleState, status: JobStatus) -> LifecycleState:
        """
        Compute the state reached when a poll reports status.

        Args:
            current: Current lifecycle state
            status: Status returned by the service

        Returns:
            LifecycleState: The validated next state

        Raises:
            InvalidStateTransitionError: If current state is terminal
        """
        target = cls.STATUS_TARGETS.get(status, LifecycleState.POLLING)
        cls.validate_transition(current, target)
        return target
