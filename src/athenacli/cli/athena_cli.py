"""CLI entry point for running Athena queries."""
import argparse
import asyncio
import logging
import signal
import sys
import time
from typing import List, Optional

from botocore.exceptions import BotoCoreError

from athenacli.config import Settings, get_settings
from athenacli.core.exceptions import AthenaCliException
from athenacli.core.models import ExecutionConfig
from athenacli.observability.metrics import init_system_info, write_metrics
from athenacli.services.identity import AwsIdentity
from athenacli.services.object_store import ObjectStoreRouter
from athenacli.services.query_client import AthenaQueryClient
from athenacli.services.templating import render_result_path
from athenacli.worker.batch_runner import BatchRunner, parse_queries
from athenacli.worker.query_executor import QueryExecutor

logger = logging.getLogger(__name__)

NO_OUTPUT = "-"
STDOUT_OUTPUT = ""


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """
    Build the argument parser with defaults taken from settings.

    Args:
        settings: Loaded application settings

    Returns:
        argparse.ArgumentParser: Configured parser
    """
    parser = argparse.ArgumentParser(
        prog="athenacli",
        description="Run SQL queries on Athena and print or store the results.",
    )
    parser.add_argument(
        "--timeout", type=float, default=settings.QUERY_TIMEOUT_SECONDS,
        help="overall timeout in seconds for all queries",
    )
    parser.add_argument(
        "--temp-path", "--temp.path", dest="temp_path",
        default=settings.RESULT_PATH_TEMPLATE,
        help="template of the Athena result location",
    )
    parser.add_argument("--region", default=settings.AWS_REGION, help="AWS region")
    parser.add_argument(
        "--out", default=STDOUT_OUTPUT,
        help='output path ("-" = no output, "" = stdout, file://..., s3://...)',
    )
    parser.add_argument("-f", dest="input_file", default="", help='input file ("" = stdin)')
    parser.add_argument("--dry", action="store_true", help="print queries instead of running them")
    parser.add_argument("--database", default=settings.ATHENA_DATABASE, help="Athena database")
    parser.add_argument("--workgroup", default=settings.ATHENA_WORKGROUP, help="Athena workgroup")
    parser.add_argument(
        "--poll-interval", type=float, default=settings.POLL_INTERVAL_SECONDS,
        help="seconds between status checks",
    )
    parser.add_argument(
        "--metrics-file", default=settings.METRICS_TEXTFILE,
        help="write Prometheus metrics to this file after the run",
    )
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="logging level")
    return parser


def read_input(input_file: str) -> str:
    """Read query text from input_file, or from stdin when it is empty."""
    if not input_file:
        return sys.stdin.read()
    with open(input_file, "r", encoding="utf-8") as f:
        return f.read()


def install_signal_handlers(cancel_event: asyncio.Event) -> None:
    """Set cancel_event on SIGINT/SIGTERM so polling stops cleanly."""
    loop = asyncio.get_running_loop()

    def signal_handler(signum):
        logger.info(f"Received signal {signum}, cancelling...")
        cancel_event.set()

    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, signal_handler, signum)
        except NotImplementedError:
            # Windows event loops have no signal handler support
            break


async def run_cli(args: argparse.Namespace, settings: Settings) -> int:
    """
    Run the batch described by args.

    Args:
        args: Parsed command-line arguments
        settings: Loaded application settings

    Returns:
        int: Process exit code
    """
    init_system_info(settings.APP_VERSION)

    try:
        queries = parse_queries(read_input(args.input_file))
    except OSError as e:
        logger.error(f"could not open input file: {e}")
        return 1
    except UnicodeDecodeError as e:
        logger.error(f"could not read queries: input is not valid UTF-8: {e}")
        return 1
    except AthenaCliException as e:
        logger.error(f"could not read queries: {e}")
        return 1

    if args.dry:
        await BatchRunner(None, dry_run=True).run(queries)
        return 0

    try:
        identity = AwsIdentity(args.region)
        object_store = ObjectStoreRouter.default(args.region, timeout_seconds=args.timeout)
        output_location = render_result_path(
            args.temp_path, region=args.region, account=identity.account_id
        )
        await object_store.ensure_namespace(output_location)
        client = AthenaQueryClient(
            args.region,
            database=args.database,
            workgroup=args.workgroup,
            timeout_seconds=args.timeout,
        )
    except (AthenaCliException, BotoCoreError) as e:
        logger.error(f"could not initialize aws client: {e}")
        return 1

    fetch_result = args.out != NO_OUTPUT
    executor = QueryExecutor(
        client,
        object_store,
        ExecutionConfig(
            output_location=output_location,
            poll_interval_seconds=args.poll_interval,
            fetch_result=fetch_result,
        ),
    )
    runner = BatchRunner(
        executor,
        object_store=object_store,
        stream=sys.stdout.buffer if args.out == STDOUT_OUTPUT else None,
        destination=args.out if fetch_result and args.out != STDOUT_OUTPUT else None,
    )

    cancel_event = asyncio.Event()
    install_signal_handlers(cancel_event)
    deadline = time.monotonic() + args.timeout

    try:
        result = await runner.run(queries, deadline=deadline, cancel_event=cancel_event)
    except AthenaCliException as e:
        logger.error(f"could not execute athena query: {e}")
        return 1
    finally:
        if args.metrics_file:
            write_metrics(args.metrics_file)

    logger.info(f"Ran {result.queries_run} queries, {result.bytes_fetched} bytes fetched")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        return asyncio.run(run_cli(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 1


if __name__ == "__main__":
    sys.exit(main())
