import locale
import logging
import platform
import subprocess
import time
from contextlib import ExitStack
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from rich.console import Console

from ping_latency_reporter.metrics import (
    HOST_AVAILABILITY,
    ITERATION_DURATION_SECONDS,
    PROBE_COUNT,
    PROBE_DURATION_SECONDS,
    PROBE_LATENCY_MILLISECONDS,
)
from ping_latency_reporter.parsing import (
    DEFAULT_REPLY_PHRASES,
    ReplyPhrases,
    parse_ping_output,
)
from ping_latency_reporter.report import classify, report
from ping_latency_reporter.result_file import ResultFile, result_file_name
from ping_latency_reporter.types import PingResult, RunConfig, Severity

logger = logging.getLogger(__name__)

Pinger = Callable[[str], Tuple[str, str]]
Clock = Callable[[], datetime]


def _ping_command(host: str) -> List[str]:
    if platform.system().lower() == "windows":
        return ["ping", "-n", "1", host]
    return ["ping", "-c", "1", host]


def _output_encoding() -> str:
    if platform.system().lower() == "windows":
        # ping.exe writes in the console (OEM) code page, not the ANSI one
        return "oem"
    return locale.getpreferredencoding(False)


def _ping_host(host: str) -> Tuple[str, str]:
    try:
        ping = subprocess.Popen(
            _ping_command(host),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        logger.warning(f"Could not run ping for {host}: {e}")
        return "", str(e)
    out, error = ping.communicate()
    encoding = _output_encoding()
    return (
        out.decode(encoding, errors="replace"),
        error.decode(encoding, errors="replace"),
    )


def probe(
    config: RunConfig,
    host: str,
    ping: Pinger = _ping_host,
    now: Clock = datetime.now,
    phrases: ReplyPhrases = DEFAULT_REPLY_PHRASES,
) -> PingResult:
    start_time = time.time()
    out, error = ping(host)
    PROBE_DURATION_SECONDS.labels(host=host).observe(time.time() - start_time)

    status, message, latency_ms = parse_ping_output(out, error, phrases)
    if latency_ms is None:
        logger.debug(f"No latency parsed for {host} ({status.value}): {message}")
    return PingResult(
        timestamp=now(),
        source_host=config.source_host,
        target_host=host,
        raw_message=message,
        latency_ms=latency_ms,
        status=status,
    )


def _record_metrics(result: PingResult, severity: Severity) -> None:
    host = result.target_host
    PROBE_COUNT.labels(host=host, severity=severity.name.lower()).inc()
    if result.latency_ms is None:
        HOST_AVAILABILITY.labels(host=host).set(0)
    else:
        HOST_AVAILABILITY.labels(host=host).set(1)
        PROBE_LATENCY_MILLISECONDS.labels(host=host).observe(result.latency_ms)


def run(
    config: RunConfig,
    ping: Pinger = _ping_host,
    now: Clock = datetime.now,
    sleep: Callable[[float], None] = time.sleep,
    console: Optional[Console] = None,
    phrases: ReplyPhrases = DEFAULT_REPLY_PHRASES,
) -> Optional[Path]:
    """
    Poll every target in order until the configured duration has elapsed.

    The end time is fixed when the loop starts and checked after each pass
    and its sleep, so at least one full pass always runs. The poll interval
    is slept after each pass rather than kept on a clock.

    :return: the result file path when logging is enabled, otherwise None
    """
    if console is None:
        console = Console()

    start = now()
    end_time = start + config.duration
    logger.info(
        f"Polling {len(config.targets)} hosts every "
        f"{config.poll_interval.total_seconds():g}s until {end_time:%Y-%m-%d %H:%M:%S}"
    )

    result_path = None
    with ExitStack() as stack:
        result_file = None
        if config.write_log:
            result_path = config.output_dir / result_file_name(
                config.targets, start.date()
            )
            result_file = stack.enter_context(ResultFile(result_path))

        while True:
            start_time = time.time()
            for host in config.targets:
                result = probe(config, host, ping, now, phrases)
                if result_file is not None:
                    result_file.write(result)
                severity = classify(
                    result.latency_ms,
                    config.warn_threshold_ms,
                    config.fail_threshold_ms,
                )
                report(console, result, severity)
                _record_metrics(result, severity)
            duration = time.time() - start_time
            ITERATION_DURATION_SECONDS.observe(duration)
            if duration > config.poll_interval.total_seconds():
                logger.info(
                    "Polling pass took longer than the poll interval, results will drift."
                )
            sleep(config.poll_interval.total_seconds())
            if now() > end_time:
                break

    logger.info("Polling finished.")
    return result_path
