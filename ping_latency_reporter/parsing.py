"""
Parsing of the ping command's text output.

The reply line is located by matching a closed set of phrases per status.
Failure statuses are checked before REPLY, since Windows reports an
unreachable destination as ``Reply from <gateway>: Destination host unreachable.``
"""
import re
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from more_itertools import first, first_true

from ping_latency_reporter.types import ReplyStatus

ReplyPhrases = Mapping[ReplyStatus, Tuple[str, ...]]

DEFAULT_REPLY_PHRASES: Dict[ReplyStatus, Tuple[str, ...]] = {
    ReplyStatus.UNKNOWN_HOST: (
        "could not find host",
        "name or service not known",
        "temporary failure in name resolution",
        "cannot resolve",
        "unknown host",
        "konnte host",
    ),
    ReplyStatus.UNREACHABLE: (
        "destination host unreachable",
        "destination net unreachable",
        "zielhost nicht erreichbar",
        "zielnetz nicht erreichbar",
    ),
    ReplyStatus.TIMEOUT: (
        "request timed out",
        "request timeout",
        "zeitüberschreitung der anforderung",
    ),
    ReplyStatus.REPLY: (
        "reply from",
        "bytes from",
        "antwort von",
    ),
}

NO_RESPONSE_MESSAGE = "No response"

ping_summary = re.compile(
    r"(?P<transmit_packets>[0-9]+).* transmitted, (?P<received_packets>[0-9]+).* received.*"
)

# Banner and statistics lines carry no diagnostic for a single probe
noise_pattern = re.compile(
    r"^(?:Pinging |PING [^:]|Ping wird ausgef|---|Ping statistics|Ping-Statistik"
    r"|Packets: |Pakete: |Approximate round trip|Ca\. Zeitangaben|Minimum = "
    r"|rtt |round-trip )"
)

latency_pattern = re.compile(
    r"(?:time|zeit)\s*[=<]\s*(?P<latency>[0-9]+(?:[.,][0-9]+)?)\s*ms",
    re.IGNORECASE,
)


def extend_reply_phrases(
    phrases: ReplyPhrases, status: ReplyStatus, *extra: str
) -> Dict[ReplyStatus, Tuple[str, ...]]:
    """Return a copy of ``phrases`` with ``extra`` recognised for ``status``."""
    extended = {key: tuple(value) for key, value in phrases.items()}
    extended[status] = extended.get(status, ()) + tuple(p.lower() for p in extra)
    return extended


def _line_status(line: str, phrases: ReplyPhrases) -> Optional[ReplyStatus]:
    lowered = line.lower()
    for status, candidates in phrases.items():
        if any(candidate.lower() in lowered for candidate in candidates):
            return status
    return None


def _non_empty_lines(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def find_reply_line(
    output: Iterable[str], phrases: ReplyPhrases = DEFAULT_REPLY_PHRASES
) -> Optional[Tuple[ReplyStatus, str]]:
    line = first_true(output, pred=lambda line: _line_status(line, phrases) is not None)
    if line is None:
        return None
    return _line_status(line, phrases), line.strip()


def extract_latency_ms(line: str) -> Optional[int]:
    latency_match = latency_pattern.search(line)
    if not latency_match:
        return None
    return int(round(float(latency_match.group("latency").replace(",", "."))))


def parse_ping_output(
    out: Optional[str],
    error: Optional[str],
    phrases: ReplyPhrases = DEFAULT_REPLY_PHRASES,
) -> Tuple[ReplyStatus, str, Optional[int]]:
    """
    Reduce the captured output of a single-packet ping to
    ``(status, message, latency_ms)``.

    When no recognised phrase appears the status is UNRECOGNIZED and the
    message is the first stderr or stdout line that is neither the banner
    nor part of the statistics block. Latency is only read from a REPLY line.
    """
    out_lines = _non_empty_lines(out)
    error_lines = _non_empty_lines(error)

    found = find_reply_line(out_lines + error_lines, phrases)
    if found is None:
        # iputils prints nothing per packet on timeout, only the summary
        summary_match = first_true(map(ping_summary.match, out_lines))
        if summary_match and int(summary_match.group("received_packets")) == 0:
            return ReplyStatus.TIMEOUT, summary_match.group(0), None
        diagnostics = [
            line
            for line in error_lines + out_lines
            if not noise_pattern.match(line) and not ping_summary.match(line)
        ]
        message = first(
            diagnostics, first(error_lines or out_lines, NO_RESPONSE_MESSAGE)
        )
        return ReplyStatus.UNRECOGNIZED, message, None

    status, line = found
    latency_ms = extract_latency_ms(line) if status is ReplyStatus.REPLY else None
    return status, line, latency_ms
