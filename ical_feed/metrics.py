from __future__ import annotations

from prometheus_client import Counter, Histogram

feed_loads_total = Counter("ics_feed_loads_total", "Feed downloads and parses started")

feed_load_errors_total = Counter(
    "ics_feed_load_errors_total", "Feed downloads or parses that failed"
)

feed_cache_hits_total = Counter(
    "ics_feed_cache_hits_total", "Fetches served from an existing parse"
)

feed_load_seconds = Histogram(
    "ics_feed_load_seconds",
    "Feed download and parse latency seconds",
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 30),
)


__all__ = [
    "feed_cache_hits_total",
    "feed_load_errors_total",
    "feed_load_seconds",
    "feed_loads_total",
]
