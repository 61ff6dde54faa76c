from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest

from ical_feed.config import FeedSettings


def test_defaults():
    cfg = FeedSettings()
    assert cfg.range_padding_days == 1
    assert cfg.skip_invalid_dates is True
    assert cfg.default_timezone == "UTC"
    assert cfg.default_zone() == ZoneInfo("UTC")


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("ICS_FEED_FETCH_TIMEOUT_SECONDS", "4.5")
    monkeypatch.setenv("ICS_FEED_FETCH_MAX_BYTES", "2048")
    monkeypatch.setenv("ICS_FEED_RANGE_PADDING_DAYS", "2")
    monkeypatch.setenv("ICS_FEED_DEFAULT_TIMEZONE", "Europe/Berlin")

    cfg = FeedSettings()
    assert cfg.fetch_timeout_seconds == 4.5
    assert cfg.fetch_max_bytes == 2048
    assert cfg.range_padding_days == 2
    assert cfg.default_zone() == ZoneInfo("Europe/Berlin")


def test_blank_timezone_falls_back_to_utc(monkeypatch):
    monkeypatch.setenv("ICS_FEED_DEFAULT_TIMEZONE", "  ")
    assert FeedSettings().default_timezone == "UTC"


def test_unknown_timezone_is_rejected(monkeypatch):
    monkeypatch.setenv("ICS_FEED_DEFAULT_TIMEZONE", "Mars/Olympus_Mons")
    with pytest.raises(ValueError):
        FeedSettings()


def test_negative_padding_is_rejected(monkeypatch):
    monkeypatch.setenv("ICS_FEED_RANGE_PADDING_DAYS", "-1")
    with pytest.raises(ValueError):
        FeedSettings()
