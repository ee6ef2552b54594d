from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, Optional

from db.repos.companies_repo import CompaniesRepo
from pipelines.runner import RunContext
from services.positioning import format_revenue
from utils.date_parsing import utc_iso


def company_fields(ctx: RunContext) -> Dict[str, Any]:
    """Flatten normalized company, positioning and company scores into column values."""
    company = ctx.snapshot.company
    fields: Dict[str, Any] = dict(company.present_fields())
    fields["name"] = fields.pop("company_name", None)
    fields["revenue_formatted"] = format_revenue(company.revenue)
    if ctx.positioning is not None:
        positioning = ctx.positioning.model_dump(exclude_none=True)
        competitors = positioning.pop("competitors", None)
        fields.update(positioning)
        if competitors:
            fields["competitors_json"] = competitors
    if ctx.company_scores is not None:
        fields.update(ctx.company_scores.model_dump())
    fields["last_enriched_at"] = utc_iso(ctx.now)
    return fields


class ResolveCompany:
    """Find or create the contact's company and write enrichment onto it.

    Order: explicit company id, the contact's linked company, (tenant, domain)
    create-or-update, a name-only company, otherwise no company.
    """

    def __init__(self, conn: sqlite3.Connection, max_attempts: int = 3) -> None:
        self.conn = conn
        self.max_attempts = max_attempts

    def _linked_company(self, repo: CompaniesRepo, ctx: RunContext) -> Optional[int]:
        if ctx.existing_company_id is not None:
            return ctx.existing_company_id
        linked = ctx.contact.get("company_id") if ctx.contact else None
        if linked is not None and repo.get_for_tenant(ctx.tenant_id, linked) is not None:
            return int(linked)
        return None

    def run(self, ctx: RunContext) -> RunContext:
        repo = CompaniesRepo(self.conn)
        linked = self._linked_company(repo, ctx)
        company = ctx.snapshot.company

        if not company.present_fields():
            # Nothing to write; keep whatever link exists
            ctx.company_id = linked
            return ctx

        fields = company_fields(ctx)
        if linked is not None:
            repo.update_enrichment(linked, fields)
            ctx.company_id = linked
        elif company.domain:
            ctx.company_id, ctx.company_created = repo.upsert_by_domain(
                ctx.tenant_id, company.domain, fields, max_attempts=self.max_attempts
            )
        elif company.company_name:
            ctx.company_id = repo.create(ctx.tenant_id, fields)
            ctx.company_created = True
        else:
            ctx.company_id = None

        logging.info(
            "Company resolved",
            extra={
                "step": "resolve_company",
                "status": "created" if ctx.company_created else "updated" if ctx.company_id else "none",
                "tenant_id": ctx.tenant_id,
                "contact_id": ctx.contact_id,
                "company_id": ctx.company_id,
            },
        )
        return ctx
