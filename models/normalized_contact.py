from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict


CareerProgression = Literal["accelerating", "stable", "declining"]


class NormalizedContact(BaseModel):
    """Canonical contact shape derived from an enrichment payload.

    Every field is optional; an unset field means the payload did not support it.
    """

    # Identity
    full_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    linkedin_url: str | None = None

    # Professional
    title: str | None = None
    seniority: str | None = None
    department: str | None = None
    job_role: str | None = None

    # Location
    city: str | None = None
    state: str | None = None
    country: str | None = None
    timezone: str | None = None

    # Career signals
    current_role_start_date: date | None = None
    total_years_experience: float | None = None
    number_of_job_changes: int | None = None
    average_tenure_months: float | None = None
    career_progression: CareerProgression | None = None
    recent_job_change: bool | None = None
    recent_promotion: bool | None = None

    # Company context
    company_name: str | None = None
    company_domain: str | None = None
    company_size: str | None = None
    company_industry: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    def present_fields(self) -> dict:
        """Only the fields the payload supported, for merge writes."""
        return self.model_dump(exclude_none=True)
