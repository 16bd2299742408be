import csv
import logging
import re
from datetime import date
from pathlib import Path
from typing import IO, List, Optional, Sequence, Union

from ping_latency_reporter.report import TIMESTAMP_FORMAT
from ping_latency_reporter.types import PingResult

HEADER = ["Date", "Source Computer", "Target Computer", "Response Message", "Reply Time"]
DELIMITER = ";"
ENCODING = "utf-8"

logger = logging.getLogger(__name__)


def _sanitize_target(target: str) -> str:
    # IPv6 targets carry ":", which Windows does not allow in file names
    return re.sub(r'[<>:"/\\|?*]', "_", target)


def result_file_name(targets: Sequence[str], day: date) -> str:
    if len(targets) == 1:
        return f"{day.isoformat()} - {_sanitize_target(targets[0])} PingResult.csv"
    return f"{day.isoformat()} - PingResult.csv"


class ResultFile:
    """
    Append-only CSV of probe results.

    Nothing touches the disk until the first ``write``. The header row is only
    written when the file is new or empty, so later runs on the same day
    append to the existing file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._handle: Optional[IO[str]] = None
        self._writer = None

    def _open(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        needs_header = not self.path.exists() or self.path.stat().st_size == 0
        self._handle = open(self.path, "a", newline="", encoding=ENCODING)
        self._writer = csv.writer(self._handle, delimiter=DELIMITER)
        if needs_header:
            logger.info(f"Creating result file {self.path}")
            self._writer.writerow(HEADER)

    def write(self, result: PingResult) -> None:
        if self._handle is None:
            self._open()
        self._writer.writerow(
            [
                result.timestamp.strftime(TIMESTAMP_FORMAT),
                result.source_host,
                result.target_host,
                result.raw_message,
                result.latency_display,
            ]
        )
        self._handle.flush()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            self._writer = None

    def __enter__(self) -> "ResultFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def read_results(path: Union[str, Path]) -> List[List[str]]:
    with open(path, newline="", encoding=ENCODING) as csvfile:
        rows = list(csv.reader(csvfile, delimiter=DELIMITER))
    return rows[1:]
