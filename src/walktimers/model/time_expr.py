"""Timer expression variants.

An ``after`` value is classified into exactly one of these variants by
``walktimers.timers.parse_time_expression``; resolving a variant against a
reference time gives the absolute fire time.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator


class RelativeSeconds(BaseModel):
    """A number of seconds from now (e.g. ``30``, ``"30"``, ``1.5``)."""

    kind: Literal["relative_seconds"] = "relative_seconds"
    seconds: int | float

    def resolve(self, now: datetime) -> datetime:
        return now + timedelta(seconds=self.seconds)


class AbsoluteInstant(BaseModel):
    """A literal UTC instant (e.g. ``"2030-01-01 00:00:00Z"``)."""

    kind: Literal["absolute_instant"] = "absolute_instant"
    at: datetime

    @field_validator("at")
    @classmethod
    def _force_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    def resolve(self, now: datetime) -> datetime:
        return self.at


class RelativeDuration(BaseModel):
    """A unit-suffixed duration from now (e.g. ``"1m30s"``, ``"-250ms"``)."""

    kind: Literal["relative_duration"] = "relative_duration"
    duration: timedelta

    def resolve(self, now: datetime) -> datetime:
        return now + self.duration


TimeExpression = Annotated[
    Union[RelativeSeconds, AbsoluteInstant, RelativeDuration],
    Field(discriminator="kind"),
]
