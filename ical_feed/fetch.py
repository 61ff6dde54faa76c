from __future__ import annotations

from typing import Mapping
from urllib.parse import urljoin, urlsplit

import httpx

from .constants import DEFAULT_ACCEPT_HEADER
from .errors import FeedFetchError

_REDIRECT_STATUS_CODES = {301, 302, 303, 307, 308}


def validate_feed_url(raw_url: str) -> str:
    url = str(raw_url or "").strip()
    if not url:
        raise FeedFetchError("Feed URL is required")
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise FeedFetchError("Feed URL is malformed") from exc
    if parts.scheme.lower() not in {"http", "https"}:
        raise FeedFetchError("Feed URL must use http or https")
    if not parts.hostname:
        raise FeedFetchError("Feed URL must include a host")
    return parts.geturl()


def _request_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    merged = dict(headers or {})
    if not any(name.lower() == "accept" for name in merged):
        merged["Accept"] = DEFAULT_ACCEPT_HEADER
    return merged


def _decode_body(response: httpx.Response, payload: bytes) -> str:
    encoding = response.charset_encoding or "utf-8"
    try:
        return payload.decode(encoding, errors="replace")
    except LookupError:
        return payload.decode("utf-8", errors="replace")


async def _read_limited(response: httpx.Response, max_bytes: int) -> bytes:
    chunks: list[bytes] = []
    total_bytes = 0
    async for chunk in response.aiter_bytes():
        if not chunk:
            continue
        total_bytes += len(chunk)
        if total_bytes > max_bytes:
            raise FeedFetchError("Feed exceeded maximum allowed size")
        chunks.append(chunk)
    return b"".join(chunks)


async def fetch_feed(
    url: str,
    *,
    headers: Mapping[str, str] | None = None,
    timeout_seconds: float,
    max_bytes: int,
    max_redirects: int,
    client: httpx.AsyncClient | None = None,
) -> tuple[httpx.Response, str]:
    """GET ``url`` and return the final response with its body decoded as text."""

    current_url = validate_feed_url(url)
    request_headers = _request_headers(headers)
    redirects = 0
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=False,
        )
    try:
        while True:
            try:
                async with client.stream(
                    "GET",
                    current_url,
                    headers=request_headers,
                    follow_redirects=False,
                ) as response:
                    if response.status_code in _REDIRECT_STATUS_CODES:
                        location = response.headers.get("location")
                        if not location:
                            raise FeedFetchError("Feed redirect did not provide a location")
                        if redirects >= max_redirects:
                            raise FeedFetchError("Feed fetch exceeded redirect limit")
                        current_url = validate_feed_url(urljoin(current_url, location))
                        redirects += 1
                        continue
                    response.raise_for_status()
                    payload = await _read_limited(response, max_bytes)
                    return response, _decode_body(response, payload)
            except httpx.TimeoutException as exc:
                raise FeedFetchError("Feed fetch timed out") from exc
            except httpx.HTTPStatusError as exc:
                status_code = int(exc.response.status_code)
                raise FeedFetchError(f"Feed fetch failed with HTTP {status_code}") from exc
            except httpx.HTTPError as exc:
                raise FeedFetchError("Feed fetch failed") from exc
    finally:
        if owns_client:
            await client.aclose()


__all__ = ["fetch_feed", "validate_feed_url"]
