"""Helpers for running blocking boto3 calls under an asyncio deadline."""
import asyncio
import logging
import threading
from typing import Any, Callable, Optional

from botocore.config import Config

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0
DEFAULT_READ_TIMEOUT_SECONDS = 60.0


def client_config(timeout_seconds: Optional[float] = None) -> Config:
    """
    Build a botocore Config with retries disabled.

    Socket timeouts are capped by timeout_seconds so an abandoned call
    cannot outlive the invocation deadline by more than that amount.

    Args:
        timeout_seconds: Overall invocation timeout, if any

    Returns:
        Config: Client configuration
    """
    connect_timeout = DEFAULT_CONNECT_TIMEOUT_SECONDS
    read_timeout = DEFAULT_READ_TIMEOUT_SECONDS
    if timeout_seconds is not None and timeout_seconds > 0:
        connect_timeout = min(connect_timeout, timeout_seconds)
        read_timeout = min(read_timeout, timeout_seconds)
    return Config(
        retries={"max_attempts": 1, "mode": "standard"},
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )


async def run_blocking(func: Callable[..., Any], *args, **kwargs) -> Any:
    """
    Run func on a daemon thread and await its result.

    Unlike asyncio.to_thread, an abandoned call does not hold up
    asyncio.run shutdown or interpreter exit.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def deliver(setter, value) -> None:
        if not future.done():
            setter(value)

    def worker() -> None:
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            outcome = (future.set_exception, e)
        else:
            outcome = (future.set_result, result)
        try:
            loop.call_soon_threadsafe(deliver, *outcome)
        except RuntimeError:
            # Loop already closed: the caller gave up on this call
            logger.debug(f"Discarded late result of {getattr(func, '__name__', func)}")

    threading.Thread(target=worker, daemon=True).start()
    return await future
