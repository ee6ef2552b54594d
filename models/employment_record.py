from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict


class EmploymentRecord(BaseModel):
    """One parsed entry of a person's employment history.

    ``ended_at`` is None for a role the person still holds. ``position`` is the index
    in the provider list so ordering ties stay stable.
    """

    started_at: date | None = None
    ended_at: date | None = None
    title: str | None = None
    organization_name: str | None = None
    position: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def is_open(self) -> bool:
        return self.ended_at is None


class CareerTimelineEntry(BaseModel):
    start_date: date
    end_date: date | None = None
    title: str
    company: str
    duration_months: int
    duration_years: float

    model_config = ConfigDict(frozen=True)
