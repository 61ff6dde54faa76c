from __future__ import annotations

from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import Any, Mapping

from .constants import FEED_FORMAT

_logger = logging.getLogger(__name__)

FeedKey = tuple[str, tuple[tuple[str, str], ...]]


@dataclass(frozen=True)
class FeedMeta:
    """Resolved configuration of a single ICS feed."""

    url: str
    format: str = FEED_FORMAT
    headers: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )

    @property
    def cache_key(self) -> FeedKey:
        return (self.url, tuple(sorted(self.headers.items())))


def _extra_params(refined: Mapping[str, Any]) -> Mapping[str, Any]:
    for key in ("extra_params", "extraParams"):
        value = refined.get(key)
        if isinstance(value, Mapping):
            return value
    return {}


def _headers(raw: Any) -> Mapping[str, str]:
    if raw is None:
        return MappingProxyType({})
    if not isinstance(raw, Mapping):
        _logger.warning("Ignoring feed headers of type %s", type(raw).__name__)
        return MappingProxyType({})
    return MappingProxyType({str(name): str(value) for name, value in raw.items()})


def parse_meta(refined: Mapping[str, Any]) -> FeedMeta | None:
    """Claim ``refined`` as an ICS feed, or return ``None`` to let another handler try."""

    url = refined.get("url")
    if not isinstance(url, str) or not url.strip():
        return None
    if refined.get("format") != FEED_FORMAT:
        return None
    return FeedMeta(
        url=url.strip(),
        format=FEED_FORMAT,
        headers=_headers(_extra_params(refined).get("headers")),
    )


__all__ = ["FeedKey", "FeedMeta", "parse_meta"]
