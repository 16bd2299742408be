from typing import Dict, Optional

from rich.console import Console

from ping_latency_reporter.types import PingResult, Severity

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TARGET_COLUMN_WIDTH = 15
LATENCY_COLUMN_WIDTH = 5

SEVERITY_STYLES: Dict[Severity, Optional[str]] = {
    Severity.NORMAL: None,
    Severity.WARNING: "yellow",
    Severity.FAILURE: "red",
}


def classify(
    latency_ms: Optional[int], warn_threshold_ms: int, fail_threshold_ms: int
) -> Severity:
    # An unparsed reply is a failure, never a silent skip
    if latency_ms is None or latency_ms >= fail_threshold_ms:
        return Severity.FAILURE
    if latency_ms >= warn_threshold_ms:
        return Severity.WARNING
    return Severity.NORMAL


def format_line(result: PingResult) -> str:
    return " | ".join(
        [
            result.timestamp.strftime(TIMESTAMP_FORMAT),
            result.target_host.ljust(TARGET_COLUMN_WIDTH),
            f"Ping Reply Time: {result.latency_display:>{LATENCY_COLUMN_WIDTH}}",
            f'Response Message: "{result.raw_message}"',
        ]
    )


def report(console: Console, result: PingResult, severity: Severity) -> None:
    console.print(
        format_line(result),
        style=SEVERITY_STYLES[severity],
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
    )
