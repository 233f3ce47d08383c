"""Shared pytest fixtures for all tests."""
import pytest

from athenacli.core.enums import JobStatus
from athenacli.core.models import ExecutionConfig, StatusReport
from tests.fakes import RESULT_PATH, FakeObjectStore, FakeQueryClient


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Drop the cached Settings so environment changes apply per test."""
    from athenacli.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def execution_config():
    """ExecutionConfig with a short poll interval for fast tests."""
    return ExecutionConfig(
        output_location="s3://aws-athena-query-results-123456789012-eu-central-1/Unsaved",
        poll_interval_seconds=0.01,
        fetch_result=True,
    )


@pytest.fixture
def object_store():
    """Object store holding a CSV result at RESULT_PATH."""
    return FakeObjectStore({RESULT_PATH: b"a,b\n1,2\n"})


@pytest.fixture
def succeeding_client():
    """Client whose job runs twice, then succeeds."""
    return FakeQueryClient([
        StatusReport(JobStatus.RUNNING),
        StatusReport(JobStatus.RUNNING),
        StatusReport(JobStatus.SUCCEEDED, RESULT_PATH),
    ])
