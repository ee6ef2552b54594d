from __future__ import annotations

from pipelines.runner import RunContext
from services.scoring import score_company, score_contact


class ScoreSnapshot:
    def run(self, ctx: RunContext) -> RunContext:
        ctx.contact_scores = score_contact(ctx.payload, ctx.snapshot)
        ctx.company_scores = score_company(ctx.payload, ctx.snapshot)
        return ctx
