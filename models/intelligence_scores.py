from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from models.normalized_company import NormalizedCompany
from models.normalized_contact import NormalizedContact


class NormalizedSnapshot(BaseModel):
    """Everything a score function may read besides the raw payload.

    ``evaluated_at`` pins "now" so repeated scoring of one payload is reproducible.
    """

    contact: NormalizedContact = Field(default_factory=NormalizedContact)
    company: NormalizedCompany = Field(default_factory=NormalizedCompany)
    evaluated_at: date

    model_config = ConfigDict(frozen=True)


class ContactScores(BaseModel):
    seniority_score: int
    buying_power_score: int
    urgency_score: int
    role_power_score: int
    career_momentum_score: int
    career_stability_score: int
    buyer_likelihood_score: int
    readiness_to_buy_score: int

    model_config = ConfigDict(frozen=True)


class CompanyScores(BaseModel):
    company_health_score: int
    growth_score: int
    stability_score: int
    market_position_score: int
    readiness_score: int

    model_config = ConfigDict(frozen=True)
