from __future__ import annotations

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

_DEFAULT_TIMEZONE = "UTC"
_logger = logging.getLogger(__name__)


class FeedSettings(BaseSettings):
    """Runtime settings for fetching and expanding calendar feeds."""

    fetch_timeout_seconds: float = Field(default=30.0, gt=0)
    fetch_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1)
    fetch_max_redirects: int = Field(default=5, ge=0)
    range_padding_days: int = Field(default=1, ge=0, le=31)
    skip_invalid_dates: bool = True
    default_timezone: str = _DEFAULT_TIMEZONE

    @model_validator(mode="after")
    def validate_default_timezone(self) -> "FeedSettings":
        name = (self.default_timezone or "").strip()
        if not name:
            _logger.warning(
                "ICS_FEED_DEFAULT_TIMEZONE is empty; defaulting to %s",
                _DEFAULT_TIMEZONE,
            )
            name = _DEFAULT_TIMEZONE
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown default timezone: {name}") from exc
        self.default_timezone = name
        return self

    def default_zone(self) -> ZoneInfo:
        return ZoneInfo(self.default_timezone)

    class Config:
        env_prefix = "ICS_FEED_"


__all__ = ["FeedSettings"]
