"""Pydantic schemas for Activity API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.view import ActivitySummary


class ActivityCreate(BaseModel):
    """Activity submission form.

    Form fields take any JSON value; the activity validator decides what is
    acceptable so every bad value lands in the activity-error banner.
    """

    description: Any = None
    duration: Any = Field(None, description="Whole minutes, e.g. 30 or \"30\"")
    client_time: datetime | None = Field(
        None,
        description="Submitter's local clock (ISO-8601); the date and time shown "
        "for the activity are taken from it",
    )


class ActivityResponse(BaseModel):
    """Schema for an activity record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    description: str
    duration: int
    timestamp: int
    date: str
    time: str


class ActivitySummaryResponse(BaseModel):
    """Ordered activities, today's subset and the derived counters."""

    ordered_all: list[ActivityResponse]
    today: list[ActivityResponse]
    activities_today: int
    total_activities: int
    active_days: int
    placeholder: str | None = None

    @classmethod
    def from_summary(cls, summary: ActivitySummary) -> "ActivitySummaryResponse":
        return cls(
            ordered_all=[ActivityResponse.model_validate(r) for r in summary.ordered_all],
            today=[ActivityResponse.model_validate(r) for r in summary.today],
            activities_today=summary.activities_today,
            total_activities=summary.total_activities,
            active_days=summary.active_days,
            placeholder=summary.placeholder,
        )
