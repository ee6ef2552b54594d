from __future__ import annotations

import json
import sqlite3
from typing import Any, Dict

from db.repos.contacts_repo import ContactsRepo
from pipelines.runner import RunContext
from services.career_history import career_stats, career_timeline
from services.normalizer import get_person
from utils.date_parsing import utc_iso


CAREER_STAT_COLUMNS = ("current_tenure_years", "total_experience_years", "avg_tenure_years")


def contact_fields(ctx: RunContext, source: str) -> Dict[str, Any]:
    contact = ctx.snapshot.contact
    fields: Dict[str, Any] = dict(contact.present_fields())
    if contact.company_domain:
        fields["domain"] = contact.company_domain.lower()

    person = get_person(ctx.payload) or {}
    history = person.get("employment_history")
    if isinstance(history, list) and history:
        today = ctx.snapshot.evaluated_at
        stats = career_stats(history, today)
        if stats["valid_jobs"]:
            fields.update({k: stats[k] for k in CAREER_STAT_COLUMNS})
        timeline = career_timeline(history, today)
        if timeline:
            fields["career_timeline_json"] = [entry.model_dump(mode="json") for entry in timeline]

    fields.update(ctx.contact_scores.model_dump())
    fields["company_id"] = ctx.company_id
    now_text = utc_iso(ctx.now)
    fields.update(
        enrichment_source=source,
        enrichment_fetched_at=ctx.fetched_at or now_text,
        enrichment_staging_key=ctx.staging_key,
        enrichment_payload_json=json.dumps(ctx.payload, ensure_ascii=False),
        last_enriched_at=now_text,
    )
    return fields


class PersistContact:
    """Write normalized fields, scores, company link and provenance onto the contact."""

    def __init__(self, conn: sqlite3.Connection, source: str) -> None:
        self.conn = conn
        self.source = source

    def run(self, ctx: RunContext) -> RunContext:
        repo = ContactsRepo(self.conn)
        repo.update_enrichment(ctx.contact_id, contact_fields(ctx, self.source))
        ctx.contact = repo.get(ctx.contact_id)
        return ctx
