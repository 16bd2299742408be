import io
from datetime import datetime, timedelta

import pytest
from rich.console import Console


class FakeClock:
    """Wall clock that only moves when the loop sleeps."""

    def __init__(self, start: datetime):
        self.current = start
        self.sleeps = []

    def now(self) -> datetime:
        return self.current

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 15, 9, 30, 0))


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=300, color_system=None)


def reply(latency_ms):
    return (
        f"Pinging host with 32 bytes of data:\n"
        f"Reply from 10.0.0.1: bytes=32 time={latency_ms}ms TTL=128\n",
        "",
    )


REQUEST_TIMED_OUT = ("Pinging host with 32 bytes of data:\nRequest timed out.\n", "")
