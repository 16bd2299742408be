from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum, IntEnum
from pathlib import Path
from typing import Optional, Tuple


class ReplyStatus(Enum):
    REPLY = "reply"
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    UNKNOWN_HOST = "unknown_host"
    UNRECOGNIZED = "unrecognized"


class Severity(IntEnum):
    NORMAL = 0
    WARNING = 1
    FAILURE = 2


@dataclass(frozen=True)
class RunConfig:
    targets: Tuple[str, ...]
    duration: timedelta
    poll_interval: timedelta
    warn_threshold_ms: int
    fail_threshold_ms: int
    write_log: bool
    output_dir: Path = field(default_factory=Path.cwd)
    source_host: str = ""


@dataclass(frozen=True)
class PingResult:
    timestamp: datetime
    source_host: str
    target_host: str
    raw_message: str
    latency_ms: Optional[int]
    status: ReplyStatus = ReplyStatus.UNRECOGNIZED

    @property
    def latency_display(self) -> str:
        return "" if self.latency_ms is None else str(self.latency_ms)
