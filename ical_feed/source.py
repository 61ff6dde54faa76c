"""ICS event source: fetch, cache and expand a calendar feed for the host.

Each feed (identified by URL and request headers) owns one :class:`FeedState`.
The state's task downloads and parses the feed once; every fetch issued while
it is pending or after it succeeded reuses it. A forced refetch replaces the
state without cancelling the superseded download, and a failed download is
forgotten so the next fetch starts over.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import time
from typing import Any, Callable, Mapping
from urllib.parse import urlsplit

import httpx

from .config import FeedSettings
from .convert import expand_ical_events
from .expander import IcalExpander
from .fetch import fetch_feed
from .meta import FeedKey, FeedMeta, parse_meta
from .metrics import (
    feed_cache_hits_total,
    feed_load_errors_total,
    feed_load_seconds,
    feed_loads_total,
)
from .models import DateRange, FetchResult

_logger = logging.getLogger(__name__)

SuccessCallback = Callable[[FetchResult], Any]
FailureCallback = Callable[[Exception], Any]


@dataclass
class FeedState:
    task: "asyncio.Task[IcalExpander] | None" = None
    response: httpx.Response | None = None


def _url_host(url: str) -> str:
    try:
        return str(urlsplit(url).hostname or "").strip() or "<unknown>"
    except ValueError:
        return "<unknown>"


class IcsEventSource:
    """Event source for remote ``format="ics"`` feeds."""

    def __init__(
        self,
        settings: FeedSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or FeedSettings()
        self._client = client
        self._states: dict[FeedKey, FeedState] = {}

    def parse_meta(self, refined: Mapping[str, Any]) -> FeedMeta | None:
        return parse_meta(refined)

    def state_for(self, meta: FeedMeta) -> FeedState | None:
        return self._states.get(meta.cache_key)

    def _ensure_state(self, meta: FeedMeta, *, is_refetch: bool) -> FeedState:
        key = meta.cache_key
        state = self._states.get(key)
        if state is not None and not is_refetch:
            feed_cache_hits_total.inc()
            _logger.debug("Reusing ICS feed load for %s", _url_host(meta.url))
            return state

        state = FeedState()
        state.task = asyncio.get_running_loop().create_task(self._load(meta, state))
        state.task.add_done_callback(
            lambda task: self._on_load_done(key, state, task)
        )
        self._states[key] = state
        return state

    async def _load(self, meta: FeedMeta, state: FeedState) -> IcalExpander:
        feed_loads_total.inc()
        started = time.perf_counter()
        _logger.info("Fetching ICS feed from %s", _url_host(meta.url))
        response, text = await fetch_feed(
            meta.url,
            headers=meta.headers,
            timeout_seconds=float(self.settings.fetch_timeout_seconds),
            max_bytes=int(self.settings.fetch_max_bytes),
            max_redirects=int(self.settings.fetch_max_redirects),
            client=self._client,
        )
        state.response = response
        expander = IcalExpander(text, skip_invalid_dates=self.settings.skip_invalid_dates)
        feed_load_seconds.observe(time.perf_counter() - started)
        _logger.info("Loaded ICS feed from %s", _url_host(meta.url))
        return expander

    def _on_load_done(self, key: FeedKey, state: FeedState, task: asyncio.Task) -> None:
        if task.cancelled():
            _logger.warning("ICS feed load for %s was cancelled", _url_host(key[0]))
        elif task.exception() is not None:
            feed_load_errors_total.inc()
            _logger.warning(
                "ICS feed load for %s failed: %s", _url_host(key[0]), task.exception()
            )
        else:
            return
        if self._states.get(key) is state:
            del self._states[key]

    async def _expand(self, state: FeedState, date_range: DateRange) -> FetchResult:
        assert state.task is not None
        # Shielded so one caller going away does not cancel the shared load.
        expander = await asyncio.shield(state.task)
        raw_events = expand_ical_events(
            expander,
            date_range,
            padding_days=int(self.settings.range_padding_days),
            default_zone=self.settings.default_zone(),
        )
        return FetchResult(raw_events=raw_events, response=state.response)

    async def fetch_events(
        self,
        meta: FeedMeta,
        date_range: DateRange,
        *,
        is_refetch: bool = False,
    ) -> FetchResult:
        """Return every event overlapping ``date_range``, loading the feed if needed."""

        state = self._ensure_state(meta, is_refetch=is_refetch)
        return await self._expand(state, date_range)

    def fetch(
        self,
        meta: FeedMeta,
        date_range: DateRange,
        success_callback: SuccessCallback,
        failure_callback: FailureCallback,
        *,
        is_refetch: bool = False,
    ) -> "asyncio.Task[None]":
        """Continuation flavour of :meth:`fetch_events`; must run inside an event loop.

        The feed state is claimed before returning, so back-to-back calls share
        one download even before the returned tasks get to run. Errors raised
        by the callbacks themselves are logged, since hosts rarely await the
        returned task.
        """

        state = self._ensure_state(meta, is_refetch=is_refetch)
        host = _url_host(meta.url)

        async def _run() -> None:
            try:
                result = await self._expand(state, date_range)
            except Exception as exc:
                try:
                    failure_callback(exc)
                except Exception:
                    _logger.exception("ICS feed failure callback for %s raised", host)
                return
            try:
                success_callback(result)
            except Exception:
                _logger.exception("ICS feed success callback for %s raised", host)

        return asyncio.get_running_loop().create_task(_run())


__all__ = ["FailureCallback", "FeedState", "IcsEventSource", "SuccessCallback"]
