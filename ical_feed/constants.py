from __future__ import annotations

FEED_FORMAT = "ics"

DEFAULT_ACCEPT_HEADER = "text/calendar,text/plain;q=0.9,*/*;q=0.8"

# Properties promoted to top-level event fields; never copied into extended props.
COMMON_PROPS = frozenset(
    {
        "uid",
        "summary",
        "url",
        "location",
        "organizer",
        "description",
    }
)

__all__ = ["COMMON_PROPS", "DEFAULT_ACCEPT_HEADER", "FEED_FORMAT"]
