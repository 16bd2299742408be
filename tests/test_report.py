"""Tests for latency classification and console output."""

import io
from datetime import datetime

import pytest
from rich.console import Console

from ping_latency_reporter.report import (
    SEVERITY_STYLES,
    classify,
    format_line,
    report,
)
from ping_latency_reporter.types import PingResult, ReplyStatus, Severity


def _result(latency_ms, message="Reply from 10.0.0.1: bytes=32 time=22ms TTL=128"):
    return PingResult(
        timestamp=datetime(2024, 1, 15, 9, 30, 5),
        source_host="WS-01",
        target_host="LAB-EX-01",
        raw_message=message,
        latency_ms=latency_ms,
        status=ReplyStatus.REPLY if latency_ms is not None else ReplyStatus.TIMEOUT,
    )


@pytest.mark.parametrize(
    "latency_ms, expected",
    [
        (22, Severity.FAILURE),
        (20, Severity.FAILURE),
        (12, Severity.WARNING),
        (5, Severity.WARNING),
        (3, Severity.NORMAL),
        (0, Severity.NORMAL),
        (None, Severity.FAILURE),
    ],
)
def test_classify_with_custom_thresholds(latency_ms, expected):
    """Thresholds warn=5, fail=20."""
    assert classify(latency_ms, 5, 20) is expected


def test_classify_is_monotonic():
    severities = [classify(latency, 10, 100) for latency in range(0, 300)]
    assert severities == sorted(severities)


def test_only_three_styles():
    assert set(SEVERITY_STYLES) == set(Severity)
    assert SEVERITY_STYLES[Severity.FAILURE] == "red"
    assert SEVERITY_STYLES[Severity.WARNING] == "yellow"
    assert SEVERITY_STYLES[Severity.NORMAL] is None


def test_format_line():
    assert format_line(_result(22)) == (
        "2024-01-15 09:30:05 | LAB-EX-01       | Ping Reply Time:    22 | "
        'Response Message: "Reply from 10.0.0.1: bytes=32 time=22ms TTL=128"'
    )


def test_format_line_without_latency():
    line = format_line(_result(None, "Request timed out."))
    assert "| Ping Reply Time:       |" in line
    assert line.endswith('Response Message: "Request timed out."')


def test_report_prints_raw_message_verbatim(console):
    message = "weird [bold]output[/bold] :smile:"
    report(console, _result(None, message), Severity.FAILURE)
    assert message in console.file.getvalue()


@pytest.mark.parametrize(
    "severity, escape",
    [(Severity.FAILURE, "\x1b[31m"), (Severity.WARNING, "\x1b[33m")],
)
def test_report_colours(severity, escape):
    console = Console(
        file=io.StringIO(), width=300, force_terminal=True, color_system="standard"
    )
    report(console, _result(12), severity)
    assert escape in console.file.getvalue()


def test_report_normal_has_no_colour():
    console = Console(
        file=io.StringIO(), width=300, force_terminal=True, color_system="standard"
    )
    report(console, _result(3), Severity.NORMAL)
    assert "\x1b[3" not in console.file.getvalue()
