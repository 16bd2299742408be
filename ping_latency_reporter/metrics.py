from prometheus_client import Counter, Gauge, Histogram
from prometheus_client.utils import INF

PROBE_COUNT = Counter("probe_count", "Number of probes", ["host", "severity"])
PROBE_LATENCY_MILLISECONDS = Histogram(
    "probe_latency_milliseconds",
    "Parsed round-trip latency (milliseconds) for a particular host",
    ["host"],
    buckets=(1, 5, 10, 20, 50, 100, 200, 500, 1000, INF),
)
PROBE_DURATION_SECONDS = Histogram(
    "probe_duration_seconds",
    "Wall time (seconds) spent in the ping command for a particular host",
    ["host"],
    buckets=(0.5, 1, 2.5, 5, 7.5, 10, 12, 14, 16, 18, 20, INF),
)
HOST_AVAILABILITY = Gauge("host_availability", "Host availability", ["host"])
ITERATION_DURATION_SECONDS = Histogram(
    "iteration_duration_seconds",
    "Overall duration of one polling pass across all hosts",
    buckets=(0.5, 1, 2.5, 5, 7.5, 10, 12, 14, 16, 18, 20, INF),
)
