from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field


@dataclass(frozen=True)
class DateRange:
    """Half-open display range requested by the host."""

    start: datetime
    end: datetime


class EventInput(BaseModel):
    """Generic event handed to the rendering host."""

    id: Optional[str] = None
    title: Optional[str] = None
    url: str = ""
    start: datetime
    end: Optional[datetime] = None
    all_day: bool = Field(default=False, alias="allDay")
    extended_props: Dict[str, Any] = Field(default_factory=dict, alias="extendedProps")

    class Config:
        populate_by_name = True

    def as_event_input(self) -> Dict[str, Any]:
        """Return the host's camelCase event dict."""
        return self.model_dump(by_alias=True)


@dataclass
class FetchResult:
    raw_events: List[EventInput] = field(default_factory=list)
    response: httpx.Response | None = None


__all__ = ["DateRange", "EventInput", "FetchResult"]
