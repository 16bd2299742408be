import logging
import socket
from datetime import timedelta
from pathlib import Path
from typing import Iterable, Optional, Union

from ping_latency_reporter.types import RunConfig

DEFAULT_WARN_THRESHOLD_MS = 10
DEFAULT_FAIL_THRESHOLD_MS = 100

DEFAULT_DURATION = timedelta(seconds=30)
DEFAULT_POLL_INTERVAL = timedelta(seconds=1)
MINUTES_POLL_INTERVAL = timedelta(seconds=5)
HOURS_POLL_INTERVAL = timedelta(seconds=60)

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    pass


def resolve_run_config(
    targets: Iterable[str],
    minutes: Optional[int] = None,
    hours: Optional[int] = None,
    warn_threshold_ms: int = DEFAULT_WARN_THRESHOLD_MS,
    fail_threshold_ms: int = DEFAULT_FAIL_THRESHOLD_MS,
    no_log: bool = False,
    output_dir: Union[str, Path, None] = None,
    source_host: Optional[str] = None,
) -> RunConfig:
    """
    Build the immutable configuration for one run.

    Without a minutes or hours selector the run is a 30 second smoke test
    polling every second, and the result file is never written regardless
    of ``no_log``. Minutes poll every 5 seconds, hours every 60 seconds.
    """
    targets = tuple(targets)
    if not targets:
        raise ConfigurationError("At least one target host is required")
    if minutes is not None and hours is not None:
        raise ConfigurationError("Minutes and hours are mutually exclusive")
    if warn_threshold_ms < 0 or fail_threshold_ms < 0:
        raise ConfigurationError("Thresholds must not be negative")

    if minutes is not None:
        if minutes <= 0:
            raise ConfigurationError("Minutes must be a positive number")
        duration, poll_interval, write_log = (
            timedelta(minutes=minutes),
            MINUTES_POLL_INTERVAL,
            not no_log,
        )
    elif hours is not None:
        if hours <= 0:
            raise ConfigurationError("Hours must be a positive number")
        duration, poll_interval, write_log = (
            timedelta(hours=hours),
            HOURS_POLL_INTERVAL,
            not no_log,
        )
    else:
        duration, poll_interval, write_log = (
            DEFAULT_DURATION,
            DEFAULT_POLL_INTERVAL,
            False,
        )

    if warn_threshold_ms > fail_threshold_ms:
        logger.warning(
            f"Warn threshold {warn_threshold_ms}ms is above fail threshold "
            f"{fail_threshold_ms}ms, no probe will be classified as a warning."
        )

    return RunConfig(
        targets=targets,
        duration=duration,
        poll_interval=poll_interval,
        warn_threshold_ms=warn_threshold_ms,
        fail_threshold_ms=fail_threshold_ms,
        write_log=write_log,
        output_dir=Path(output_dir) if output_dir is not None else Path.cwd(),
        source_host=source_host if source_host is not None else socket.gethostname(),
    )
