"""Drives one query through submit, poll, and result fetch."""
import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from athenacli.core.enums import LifecycleState
from athenacli.core.exceptions import (
    AthenaCliException,
    FetchError,
    JobFailedError,
    QueryCancelledError,
)
from athenacli.core.models import ExecutionConfig, QueryJob
from athenacli.observability.metrics import (
    record_query_failed,
    record_query_submitted,
    record_query_succeeded,
    record_status_poll,
)
from athenacli.services.object_store import ObjectStore
from athenacli.services.query_client import QueryServiceClient

logger = logging.getLogger(__name__)


class QueryExecutor:
    """
    Runs the lifecycle of a single query.

    Cancellation is local only: when the deadline passes or the cancel
    event fires, polling stops and no stop request is sent to the
    service, so the remote job may keep running.
    """

    def __init__(
        self,
        client: QueryServiceClient,
        object_store: ObjectStore,
        config: ExecutionConfig,
    ):
        """
        Initialize query executor.

        Args:
            client: Remote query service client
            object_store: Store the result location is read from
            config: Output location, poll interval and fetch flag
        """
        self.client = client
        self.object_store = object_store
        self.config = config

    async def execute(
        self,
        query: str,
        deadline: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[bytes]:
        """
        Execute a query and return its result bytes.

        Args:
            query: Rendered query text
            deadline: Absolute time.monotonic() value bounding submit,
                poll and fetch; None means no deadline
            cancel_event: Event that aborts the lifecycle when set

        Returns:
            Optional[bytes]: Result bytes, or None when fetching is disabled

        Raises:
            SubmissionError: If the submit call fails
            StatusQueryError: If a status call fails
            JobFailedError: If the service reports FAILED or CANCELLED
            QueryCancelledError: If the deadline passes or cancel_event fires
            FetchError: If the result cannot be read
        """
        started_at = time.monotonic()
        try:
            data = await self._run(query, deadline, cancel_event)
        except AthenaCliException as e:
            record_query_failed(str(e.kind), time.monotonic() - started_at)
            raise

        record_query_succeeded(time.monotonic() - started_at, len(data) if data else 0)
        return data

    async def _run(
        self,
        query: str,
        deadline: Optional[float],
        cancel_event: Optional[asyncio.Event],
    ) -> Optional[bytes]:
        job_id = await self._remote(
            "submit",
            deadline,
            cancel_event,
            self.client.submit,
            query,
            self.config.output_location,
        )
        record_query_submitted()
        job = QueryJob(
            job_id=job_id,
            query=query,
            output_location=self.config.output_location,
        )

        await self._poll_until_terminal(job, deadline, cancel_event)
        return await self._finish(job, deadline, cancel_event)

    async def _poll_until_terminal(
        self,
        job: QueryJob,
        deadline: Optional[float],
        cancel_event: Optional[asyncio.Event],
    ) -> None:
        job.start_polling()
        while not job.is_terminal:
            try:
                await self._wait_interval(deadline, cancel_event)
                report = await self._remote(
                    "poll", deadline, cancel_event, self.client.get_status, job.job_id
                )
            except QueryCancelledError:
                job.abandon()
                logger.warning(
                    f"Stopped polling query {job.job_id}; it may still be running remotely"
                )
                raise

            record_status_poll()
            job.apply_status(report)
            logger.debug(f"Query {job.job_id} poll #{job.polls}: {report.status}")

        logger.info(f"Query {job.job_id} finished: {job.state}")

    async def _finish(
        self,
        job: QueryJob,
        deadline: Optional[float],
        cancel_event: Optional[asyncio.Event],
    ) -> Optional[bytes]:
        if job.state != LifecycleState.SUCCEEDED:
            raise JobFailedError(job.job_id, job.status, job.failure_reason)

        if not self.config.fetch_result:
            return None

        if not job.result_location:
            raise FetchError(f"query {job.job_id} succeeded without a result location")

        return await self._remote(
            "fetch",
            deadline,
            cancel_event,
            self.object_store.fetch,
            job.result_location,
        )

    async def _wait_interval(
        self,
        deadline: Optional[float],
        cancel_event: Optional[asyncio.Event],
    ) -> None:
        """Sleep one poll interval, cut short by the deadline or cancel event."""
        _raise_if_cancelled("poll", deadline, cancel_event)
        delay = self.config.poll_interval_seconds
        remaining = _remaining(deadline)
        if remaining is not None:
            delay = min(delay, remaining)

        if cancel_event is None:
            await asyncio.sleep(delay)
        else:
            try:
                await asyncio.wait_for(cancel_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass

        _raise_if_cancelled("poll", deadline, cancel_event)

    async def _remote(
        self,
        phase: str,
        deadline: Optional[float],
        cancel_event: Optional[asyncio.Event],
        call: Callable[..., Awaitable],
        *args,
    ):
        """
        Run one remote call bounded by the deadline and cancel event.

        The call is never started once the deadline has passed; an
        in-flight call is abandoned when either fires.
        """
        _raise_if_cancelled(phase, deadline, cancel_event)

        call_task = asyncio.ensure_future(call(*args))
        waiters = {call_task}
        cancel_task = None
        if cancel_event is not None:
            cancel_task = asyncio.ensure_future(cancel_event.wait())
            waiters.add(cancel_task)

        try:
            done, _ = await asyncio.wait(
                waiters,
                timeout=_remaining(deadline),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            if cancel_task is not None:
                cancel_task.cancel()
            if not call_task.done():
                call_task.cancel()

        if call_task in done:
            return call_task.result()
        raise _cancelled_error(phase, deadline, cancel_event)


def _remaining(deadline: Optional[float]) -> Optional[float]:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


def _raise_if_cancelled(
    phase: str,
    deadline: Optional[float],
    cancel_event: Optional[asyncio.Event],
) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise _cancelled_error(phase, deadline, cancel_event)
    if deadline is not None and time.monotonic() >= deadline:
        raise _cancelled_error(phase, deadline, cancel_event)


def _cancelled_error(
    phase: str,
    deadline: Optional[float],
    cancel_event: Optional[asyncio.Event],
) -> QueryCancelledError:
    if cancel_event is not None and cancel_event.is_set():
        return QueryCancelledError(f"query got cancelled during {phase}")
    return QueryCancelledError(f"query deadline exceeded during {phase}")
