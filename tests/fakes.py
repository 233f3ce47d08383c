"""In-memory fakes for the query service, object store, and boto3 clients."""
import asyncio
import io
from typing import Dict, List, Optional

from botocore.exceptions import ClientError

from athenacli.core.enums import JobStatus
from athenacli.core.exceptions import ObjectNotFoundError
from athenacli.core.models import StatusReport

RESULT_PATH = "s3://aws-athena-query-results-123456789012-eu-central-1/Unsaved/job-1.csv"


class FakeQueryClient:
    """
    Scripted QueryServiceClient.

    Each submitted query gets its own job id; get_status walks through
    the scripted reports and repeats the last one once exhausted.
    """

    def __init__(
        self,
        reports: Optional[List[StatusReport]] = None,
        status_delay: float = 0.0,
        submit_error: Optional[Exception] = None,
        status_error: Optional[Exception] = None,
    ):
        self.reports = list(reports or [StatusReport(JobStatus.SUCCEEDED, "s3://results/q.csv")])
        self.status_delay = status_delay
        self.submit_error = submit_error
        self.status_error = status_error
        self.submitted: List[tuple] = []
        self.status_calls: List[str] = []
        self.completed_status_calls = 0
        self._index = 0

    async def submit(self, query: str, output_location: str) -> str:
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append((query, output_location))
        return f"job-{len(self.submitted)}"

    async def get_status(self, job_id: str) -> StatusReport:
        self.status_calls.append(job_id)
        if self.status_delay:
            await asyncio.sleep(self.status_delay)
        if self.status_error is not None:
            raise self.status_error
        report = self.reports[min(self._index, len(self.reports) - 1)]
        self._index += 1
        self.completed_status_calls += 1
        return report


class FakeObjectStore:
    """Dict-backed ObjectStore."""

    def __init__(self, objects: Optional[Dict[str, bytes]] = None):
        self.objects: Dict[str, bytes] = dict(objects or {})
        self.fetched: List[str] = []
        self.namespaces: List[str] = []

    async def fetch(self, path: str) -> bytes:
        self.fetched.append(path)
        if path not in self.objects:
            raise ObjectNotFoundError(f"no result at {path!r}")
        return self.objects[path]

    async def store(self, data: bytes, path: str) -> None:
        self.objects[path] = data

    async def ensure_namespace(self, path: str) -> None:
        self.namespaces.append(path)


def client_error(code: str, operation: str = "Operation") -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeAthenaClient:
    """Stands in for boto3.client("athena")."""

    def __init__(self, state: str = "SUCCEEDED", reason: Optional[str] = None,
                 output_location: str = "s3://results/exec-1.csv", error: Optional[Exception] = None):
        self.state = state
        self.reason = reason
        self.output_location = output_location
        self.error = error
        self.start_calls: List[dict] = []
        self.get_calls: List[str] = []

    def start_query_execution(self, **kwargs):
        if self.error is not None:
            raise self.error
        self.start_calls.append(kwargs)
        return {"QueryExecutionId": "exec-1"}

    def get_query_execution(self, QueryExecutionId):
        if self.error is not None:
            raise self.error
        self.get_calls.append(QueryExecutionId)
        status = {"State": self.state}
        if self.reason is not None:
            status["StateChangeReason"] = self.reason
        return {
            "QueryExecution": {
                "QueryExecutionId": QueryExecutionId,
                "Status": status,
                "ResultConfiguration": {"OutputLocation": self.output_location},
            }
        }


class FakeS3Client:
    """Stands in for boto3.client("s3")."""

    def __init__(self, objects: Optional[Dict[tuple, bytes]] = None,
                 create_bucket_error: Optional[str] = None,
                 get_error: Optional[str] = None):
        self.objects: Dict[tuple, bytes] = dict(objects or {})
        self.create_bucket_error = create_bucket_error
        self.get_error = get_error
        self.create_bucket_calls: List[dict] = []

    def get_object(self, Bucket, Key):
        if self.get_error is not None:
            raise client_error(self.get_error, "GetObject")
        if (Bucket, Key) not in self.objects:
            raise client_error("NoSuchKey", "GetObject")
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}

    def put_object(self, Body, Bucket, Key):
        self.objects[(Bucket, Key)] = Body

    def create_bucket(self, **kwargs):
        self.create_bucket_calls.append(kwargs)
        if self.create_bucket_error is not None:
            raise client_error(self.create_bucket_error, "CreateBucket")
        return {"Location": f"/{kwargs['Bucket']}"}


class FakeStsClient:
    """Stands in for boto3.client("sts")."""

    def __init__(self, account: str = "123456789012", error: Optional[Exception] = None):
        self.account = account
        self.error = error
        self.calls = 0

    def get_caller_identity(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return {"Account": self.account, "Arn": "arn:aws:iam::123456789012:user/test"}
