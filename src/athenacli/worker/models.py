"""Worker data models and result classes."""
from dataclasses import dataclass


@dataclass
class BatchResult:
    """
    Outcome of a successful batch run.

    A failing batch raises instead of returning, so every field here
    describes queries that completed.
    """

    queries_run: int = 0
    bytes_fetched: int = 0
    dry_run: bool = False
