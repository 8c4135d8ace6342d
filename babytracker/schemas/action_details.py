"""Per-type payloads for ``Action.details``.

``action_type`` is the discriminant. Unknown keys are kept so clients can
attach extra fields (feed amount, side, ...) without a schema change.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class _Details(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    comments: str | None = None


class DiaperDetails(_Details):
    type: Literal["pee", "poo", "both"] | None = None
    timestamp: datetime | None = None


class TimedSessionDetails(_Details):
    """Sleep and feed. ``end_time`` of None means the session is still running."""

    start_time: datetime | None = None
    end_time: datetime | None = None
    timestamp: datetime | None = None

    @model_validator(mode="after")
    def _end_after_start(self) -> "TimedSessionDetails":
        if self.start_time and self.end_time and as_utc(self.end_time) < as_utc(self.start_time):
            raise ValueError("endTime cannot be before startTime")
        return self


class OtherDetails(_Details):
    title: str | None = None
    timestamp: datetime | None = None


DETAILS_MODELS: dict[str, type[_Details]] = {
    "diaper": DiaperDetails,
    "sleep": TimedSessionDetails,
    "feed": TimedSessionDetails,
    "other": OtherDetails,
}
