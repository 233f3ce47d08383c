"""Prometheus metrics for athenacli."""
from prometheus_client import REGISTRY, Counter, Histogram, Info, write_to_textfile


# Query metrics
queries_submitted_total = Counter(
    'athenacli_queries_submitted_total',
    'Total number of queries submitted'
)

queries_succeeded_total = Counter(
    'athenacli_queries_succeeded_total',
    'Total number of queries that reached SUCCEEDED'
)

queries_failed_total = Counter(
    'athenacli_queries_failed_total',
    'Total number of query lifecycles that ended in an error',
    ['kind']
)

status_polls_total = Counter(
    'athenacli_status_polls_total',
    'Total number of status calls issued'
)

result_bytes_total = Counter(
    'athenacli_result_bytes_total',
    'Total number of result bytes fetched'
)

query_duration_seconds = Histogram(
    'athenacli_query_duration_seconds',
    'Wall-clock time from submit to terminal outcome',
    ['status'],
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 300.0, 900.0, 3600.0]
)

# System info
system_info = Info(
    'athenacli_system',
    'athenacli build information'
)


def record_query_submitted() -> None:
    """Record query submission metric."""
    queries_submitted_total.inc()


def record_status_poll() -> None:
    """Record one status call."""
    status_polls_total.inc()


def record_query_succeeded(duration: float, result_bytes: int = 0) -> None:
    """Record query success metric."""
    queries_succeeded_total.inc()
    query_duration_seconds.labels(status="succeeded").observe(duration)
    if result_bytes:
        result_bytes_total.inc(result_bytes)


def record_query_failed(kind: str, duration: float) -> None:
    """Record query failure metric."""
    queries_failed_total.labels(kind=kind).inc()
    query_duration_seconds.labels(status="failed").observe(duration)


def init_system_info(version: str) -> None:
    """
    Initialize system information metric.

    Args:
        version: Application version
    """
    system_info.info({
        'version': version,
        'name': 'athenacli'
    })


def write_metrics(path: str) -> None:
    """Dump the default registry in text format for a textfile collector."""
    write_to_textfile(path, REGISTRY)
