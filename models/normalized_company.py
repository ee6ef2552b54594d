from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class CompanyPositioning(BaseModel):
    """Positioning metadata produced by an inference step outside the normalizer."""

    positioning_label: str | None = None
    category: str | None = None
    revenue_tier: str | None = None
    headcount_tier: str | None = None
    normalized_industry: str | None = None
    competitors: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")


class NormalizedCompany(BaseModel):
    """Canonical company shape derived from the organization subtree."""

    company_name: str | None = None
    domain: str | None = None
    website: str | None = None
    industry: str | None = None
    headcount: int | None = None
    revenue: float | None = None
    revenue_range: str | None = None
    growth_rate: float | None = None
    funding_stage: str | None = None
    last_funding_date: date | None = None
    last_funding_amount: float | None = None
    number_of_funding_rounds: int | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    def present_fields(self) -> dict:
        return self.model_dump(exclude_none=True)
