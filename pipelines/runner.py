from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from models.intelligence_scores import CompanyScores, ContactScores, NormalizedSnapshot
from models.normalized_company import CompanyPositioning
from utils.logging_setup import init_logging


@dataclass
class RunContext:
    """State handed from step to step during one enrichment save."""

    contact_id: Optional[int] = None
    staging_key: Optional[str] = None
    existing_company_id: Optional[int] = None
    tenant_id: Optional[str] = None
    now: Optional[datetime] = None

    # Inputs loaded by the read-only steps
    contact: Optional[Dict[str, Any]] = None
    payload: Optional[Dict[str, Any]] = None
    fetched_at: Optional[str] = None

    # Derived
    snapshot: Optional[NormalizedSnapshot] = None
    positioning: Optional[CompanyPositioning] = None
    contact_scores: Optional[ContactScores] = None
    company_scores: Optional[CompanyScores] = None

    # Written
    company_id: Optional[int] = None
    company_created: bool = False


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        for step in self.steps:
            ctx = step.run(ctx)
        return ctx
