"""Unit tests for core enums."""
import pytest
from athenacli.core.enums import ErrorKind, JobStatus, LifecycleState


class TestJobStatusEnum:
    """Test JobStatus enum values and mapping."""

    def test_job_status_values(self):
        """Test JobStatus carries the service's state names."""
        assert JobStatus.RUNNING.value == "RUNNING"
        assert JobStatus.SUCCEEDED.value == "SUCCEEDED"
        assert JobStatus.FAILED.value == "FAILED"
        assert JobStatus.CANCELLED.value == "CANCELLED"

    def test_job_status_count(self):
        """Test JobStatus has exactly 4 states."""
        assert len(JobStatus) == 4

    def test_job_status_string_representation(self):
        """Test JobStatus can be used as strings."""
        assert str(JobStatus.SUCCEEDED) == "SUCCEEDED"

    @pytest.mark.parametrize("raw,expected", [
        ("SUCCEEDED", JobStatus.SUCCEEDED),
        ("FAILED", JobStatus.FAILED),
        ("CANCELLED", JobStatus.CANCELLED),
        ("succeeded", JobStatus.SUCCEEDED),
    ])
    def test_from_service_recognizes_terminal_states(self, raw, expected):
        """Test terminal service states map onto their JobStatus."""
        assert JobStatus.from_service(raw) == expected

    @pytest.mark.parametrize("raw", ["RUNNING", "QUEUED", "PENDING", "SOMETHING_NEW", "", None])
    def test_from_service_treats_everything_else_as_running(self, raw):
        """Test unknown or non-terminal states keep the job running."""
        assert JobStatus.from_service(raw) == JobStatus.RUNNING


class TestLifecycleStateEnum:
    """Test LifecycleState enum values."""

    def test_lifecycle_state_count(self):
        """Test LifecycleState has exactly 5 states."""
        assert len(LifecycleState) == 5

    def test_lifecycle_state_string_representation(self):
        """Test LifecycleState can be used as strings."""
        assert str(LifecycleState.POLLING) == "POLLING"


class TestErrorKindEnum:
    """Test ErrorKind tags."""

    def test_error_kind_distinguishes_lifecycle_errors(self):
        """Test each lifecycle error has its own tag."""
        tags = {ErrorKind.SUBMISSION, ErrorKind.STATUS, ErrorKind.JOB_FAILED,
                ErrorKind.CANCELLED, ErrorKind.FETCH, ErrorKind.STORE}
        assert len({str(tag) for tag in tags}) == 6
