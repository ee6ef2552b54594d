from __future__ import annotations

from typing import Optional

from models.intelligence_scores import NormalizedSnapshot
from pipelines.runner import RunContext
from ports.positioning import PositioningProviderPort
from services.normalizer import normalize_company, normalize_contact
from services.positioning import resolve_positioning


class NormalizePayload:
    """Derive the normalized contact/company snapshot (and company positioning)."""

    def __init__(self, positioning_provider: Optional[PositioningProviderPort] = None) -> None:
        self.positioning_provider = positioning_provider

    def run(self, ctx: RunContext) -> RunContext:
        today = ctx.now.date()
        company = normalize_company(ctx.payload)
        ctx.snapshot = NormalizedSnapshot(
            contact=normalize_contact(ctx.payload, today=today),
            company=company,
            evaluated_at=today,
        )
        if company.present_fields():
            ctx.positioning = resolve_positioning(company, self.positioning_provider)
        return ctx
