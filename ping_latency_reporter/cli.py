import argparse
import logging
import os
from typing import List, Optional, Sequence

from more_itertools import unique_everseen
from prometheus_client import start_http_server
from rich.console import Console

from ping_latency_reporter.config import (
    DEFAULT_FAIL_THRESHOLD_MS,
    DEFAULT_WARN_THRESHOLD_MS,
    ConfigurationError,
    resolve_run_config,
)
from ping_latency_reporter.main import run

logger = logging.getLogger(__name__)


def _split_hosts(value: str) -> List[str]:
    return value.split(",")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ping-latency-reporter",
        description="Ping a set of hosts and report colour-coded round-trip latency",
    )

    parser.add_argument(
        "--hosts",
        type=_split_hosts,
        action="append",
        help="Comma-separated list of hosts, may be repeated (default: env HOSTS)",
    )
    duration = parser.add_mutually_exclusive_group()
    duration.add_argument(
        "--minutes",
        type=int,
        help="Run for this many minutes, polling every 5 seconds",
    )
    duration.add_argument(
        "--hours",
        type=int,
        help="Run for this many hours, polling every 60 seconds",
    )
    parser.add_argument(
        "--warn-ms",
        type=int,
        default=int(os.getenv("WARN_THRESHOLD_MS", DEFAULT_WARN_THRESHOLD_MS)),
        help="Latency (ms) at which a reply is shown as a warning "
        f"(default: {DEFAULT_WARN_THRESHOLD_MS} or env WARN_THRESHOLD_MS)",
    )
    parser.add_argument(
        "--fail-ms",
        type=int,
        default=int(os.getenv("FAIL_THRESHOLD_MS", DEFAULT_FAIL_THRESHOLD_MS)),
        help="Latency (ms) at which a reply is shown as a failure "
        f"(default: {DEFAULT_FAIL_THRESHOLD_MS} or env FAIL_THRESHOLD_MS)",
    )
    parser.add_argument(
        "--no-log",
        action="store_true",
        help="Do not write the CSV result file. Runs without --minutes or --hours never write one.",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=os.getenv("OUTPUT_DIR", os.getcwd()),
        help="Directory for the CSV result file (default: current directory or env OUTPUT_DIR)",
    )
    parser.add_argument(
        "--metrics-address",
        type=str,
        default=os.getenv("METRICS_ADDRESS", "0.0.0.0"),
        help="HTTP bind address for the Prometheus metrics server (default: 0.0.0.0 or env METRICS_ADDRESS)",
    )
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=int(os.environ["METRICS_PORT"]) if os.getenv("METRICS_PORT") else None,
        help="Serve Prometheus metrics on this port (default: disabled or env METRICS_PORT)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=os.getenv("LOG_LEVEL", "WARNING").upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Diagnostic log level (default: WARNING or env LOG_LEVEL)",
    )
    return parser


def _collect_hosts(host_groups: Optional[List[List[str]]]) -> List[str]:
    if host_groups is None:
        host_groups = [_split_hosts(os.getenv("HOSTS", ""))]
    hosts = [host.strip() for group in host_groups for host in group]
    # Dedupe hosts, keeping the order they were given in
    return list(unique_everseen(host for host in hosts if host))


def main(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    hosts = _collect_hosts(args.hosts)
    try:
        config = resolve_run_config(
            hosts,
            minutes=args.minutes,
            hours=args.hours,
            warn_threshold_ms=args.warn_ms,
            fail_threshold_ms=args.fail_ms,
            no_log=args.no_log,
            output_dir=args.output_dir,
        )
    except ConfigurationError as e:
        parser.error(str(e))

    logger.debug("Configuration:")
    logger.debug(f"\tHosts: {list(config.targets)}")
    logger.debug(f"\tDuration: {config.duration}")
    logger.debug(f"\tPoll Interval: {config.poll_interval}")
    logger.debug(f"\tWarn Threshold: {config.warn_threshold_ms}ms")
    logger.debug(f"\tFail Threshold: {config.fail_threshold_ms}ms")
    logger.debug(f"\tWrite Log: {config.write_log}")
    logger.debug(f"\tSource Host: {config.source_host}")

    if args.metrics_port is not None:
        start_http_server(args.metrics_port, args.metrics_address)
        logger.info(f"Serving metrics on {args.metrics_address}:{args.metrics_port}")

    if console is None:
        console = Console()
    result_path = run(config, console=console)
    if result_path is not None:
        console.print(
            f"Results written to: {result_path}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
    return 0
