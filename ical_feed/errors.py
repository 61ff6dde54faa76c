from __future__ import annotations


class FeedFetchError(RuntimeError):
    """Raised when feed content cannot be fetched from its URL."""


class FeedParseError(ValueError):
    """Raised when feed content cannot be parsed or expanded."""


__all__ = ["FeedFetchError", "FeedParseError"]
