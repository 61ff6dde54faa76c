"""ICS feed event source for calendar-rendering hosts."""

from .config import FeedSettings
from .errors import FeedFetchError, FeedParseError
from .expander import ExpansionResult, IcalExpander, Occurrence
from .meta import FeedMeta, parse_meta
from .models import DateRange, EventInput, FetchResult
from .source import FeedState, IcsEventSource

__all__ = [
    "DateRange",
    "EventInput",
    "ExpansionResult",
    "FeedFetchError",
    "FeedMeta",
    "FeedParseError",
    "FeedSettings",
    "FeedState",
    "FetchResult",
    "IcalExpander",
    "IcsEventSource",
    "Occurrence",
    "parse_meta",
]
