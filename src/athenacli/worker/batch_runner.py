"""Sequential execution of a semicolon-delimited batch of queries."""
import asyncio
import logging
import sys
from typing import BinaryIO, List, Optional, TextIO

from athenacli.services.object_store import ObjectStore
from athenacli.services.templating import render_query
from athenacli.worker.models import BatchResult
from athenacli.worker.query_executor import QueryExecutor

logger = logging.getLogger(__name__)


def parse_queries(text: str) -> List[str]:
    """
    Split input on ";" and render each non-empty query.

    Args:
        text: Raw input, possibly holding several queries

    Returns:
        List[str]: Rendered queries in input order

    Raises:
        TemplateRenderError: If a query template cannot be rendered
    """
    queries = []
    for chunk in text.split(";"):
        stripped = chunk.strip()
        if stripped:
            queries.append(render_query(stripped))
    return queries


class BatchRunner:
    """
    Runs queries one after another through a QueryExecutor.

    The first error aborts the batch: later queries are never submitted
    and nothing is written to the destination path.
    """

    def __init__(
        self,
        executor: Optional[QueryExecutor],
        object_store: Optional[ObjectStore] = None,
        stream: Optional[BinaryIO] = None,
        destination: Optional[str] = None,
        dry_run: bool = False,
        echo: Optional[TextIO] = None,
    ):
        """
        Initialize batch runner.

        Args:
            executor: Executor for each query (unused in dry-run mode)
            object_store: Store used to write the collected output
            stream: Binary stream each result is written to as it arrives
            destination: Path the concatenated results are stored at
            dry_run: Print queries instead of executing them
            echo: Text stream for dry-run output (default: stdout)
        """
        if destination is not None and object_store is None:
            raise ValueError("object_store is required when destination is set")
        self.executor = executor
        self.object_store = object_store
        self.stream = stream
        self.destination = destination
        self.dry_run = dry_run
        self.echo = echo

    async def run(
        self,
        queries: List[str],
        deadline: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> BatchResult:
        """
        Execute every query in order.

        Args:
            queries: Rendered queries
            deadline: Absolute time.monotonic() value shared by all queries
            cancel_event: Event that aborts the batch when set

        Returns:
            BatchResult: Counters for the completed batch
        """
        result = BatchResult(dry_run=self.dry_run)

        if self.dry_run:
            echo = self.echo or sys.stdout
            for query in queries:
                print(f"execute query: {query}", file=echo)
            return result

        buffer = bytearray()
        total = len(queries)
        for index, query in enumerate(queries, start=1):
            logger.info(f"Running query {index}/{total}")
            data = await self.executor.execute(
                query, deadline=deadline, cancel_event=cancel_event
            )
            result.queries_run += 1
            if data is None:
                continue
            result.bytes_fetched += len(data)
            if self.stream is not None:
                self.stream.write(data)
                self.stream.flush()
            if self.destination is not None:
                buffer.extend(data)

        if self.destination is not None:
            await self.object_store.store(bytes(buffer), self.destination)

        return result
