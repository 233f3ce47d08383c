"""Remote query service client: submit a query and read its status."""
import logging
from typing import Optional, Protocol, runtime_checkable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from athenacli.core.enums import JobStatus
from athenacli.core.exceptions import StatusQueryError, SubmissionError
from athenacli.core.models import StatusReport
from athenacli.services.boto_calls import client_config, run_blocking

logger = logging.getLogger(__name__)


@runtime_checkable
class QueryServiceClient(Protocol):
    """Protocol for a job-style remote query service."""

    async def submit(self, query: str, output_location: str) -> str:
        """Submit a query and return the service-assigned job ID."""
        ...

    async def get_status(self, job_id: str) -> StatusReport:
        """Fetch the current status of a submitted job."""
        ...


class AthenaQueryClient:
    """QueryServiceClient backed by Athena query executions."""

    def __init__(
        self,
        region: str,
        database: Optional[str] = None,
        workgroup: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        client=None,
    ):
        """
        Initialize client.

        Args:
            region: AWS region of the Athena endpoint
            database: Optional default database for unqualified table names
            workgroup: Optional Athena workgroup
            timeout_seconds: Invocation timeout capping socket timeouts
            client: Pre-built boto3 athena client (tests inject fakes)
        """
        self._client = client or boto3.client(
            "athena", region_name=region, config=client_config(timeout_seconds)
        )
        self._database = database
        self._workgroup = workgroup

    async def submit(self, query: str, output_location: str) -> str:
        """
        Start a query execution.

        Raises:
            SubmissionError: If Athena rejects or cannot accept the call
        """
        try:
            job_id = await run_blocking(
                _start_query_execution,
                self._client,
                query,
                output_location,
                self._database,
                self._workgroup,
            )
        except (ClientError, BotoCoreError) as e:
            raise SubmissionError(f"could not start query execution: {e}") from e
        logger.info(f"Submitted query execution {job_id}")
        return job_id

    async def get_status(self, job_id: str) -> StatusReport:
        """
        Read the state of a query execution.

        Raises:
            StatusQueryError: If the status call itself fails
        """
        try:
            return await run_blocking(_get_query_status, self._client, job_id)
        except (ClientError, BotoCoreError) as e:
            raise StatusQueryError(f"could not get query status: {e}") from e


def _start_query_execution(
    client,
    query: str,
    output_location: str,
    database: Optional[str],
    workgroup: Optional[str],
) -> str:
    kwargs = {
        "QueryString": query,
        "ResultConfiguration": {"OutputLocation": output_location},
    }
    if database:
        kwargs["QueryExecutionContext"] = {"Database": database}
    if workgroup:
        kwargs["WorkGroup"] = workgroup
    response = client.start_query_execution(**kwargs)
    return response["QueryExecutionId"]


def _get_query_status(client, job_id: str) -> StatusReport:
    response = client.get_query_execution(QueryExecutionId=job_id)
    execution = response["QueryExecution"]
    status = execution.get("Status", {})
    result_configuration = execution.get("ResultConfiguration", {})
    return StatusReport(
        status=JobStatus.from_service(status.get("State")),
        result_location=result_configuration.get("OutputLocation"),
        failure_reason=status.get("StateChangeReason"),
    )
