from __future__ import annotations

import logging
import sqlite3
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from config.settings import get_settings
from db.repos.staging_repo import StagingRepo, make_staging_key
from errors import EnrichmentError
from models.save_result import SaveEnrichmentResult
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import (
    LoadContact,
    LoadStagedPayload,
    NormalizePayload,
    PersistContact,
    ResolveCompany,
    ScoreSnapshot,
    ValidatePayload,
)
from ports.positioning import PositioningProviderPort
from ports.staging import StagingCachePort
from utils.enrichment_trace import log_save


def _run(
    conn: sqlite3.Connection,
    ctx: RunContext,
    read_steps: list,
    positioning_provider: Optional[PositioningProviderPort],
) -> SaveEnrichmentResult:
    settings = get_settings()
    t0 = time.time()
    try:
        # Everything that can reject the request runs before the first write
        ctx = Pipeline(
            read_steps
            + [ValidatePayload(), NormalizePayload(positioning_provider), ScoreSnapshot()]
        ).run(ctx)
        with conn:
            ctx = Pipeline([
                ResolveCompany(conn, max_attempts=settings.company_upsert_retries),
                PersistContact(conn, settings.enrichment_source),
            ]).run(ctx)
    except EnrichmentError as e:
        duration_ms = int((time.time() - t0) * 1000)
        logging.warning(
            f"Enrichment save failed: {e}",
            extra={
                "step": "save_enrichment",
                "status": "error",
                "contact_id": ctx.contact_id,
                "tenant_id": ctx.tenant_id,
                "duration_ms": duration_ms,
                "error": type(e).__name__,
            },
        )
        log_save(
            contact_id=ctx.contact_id,
            tenant_id=ctx.tenant_id,
            staging_key=ctx.staging_key,
            status="error",
            duration_ms=duration_ms,
            error=str(e),
        )
        raise

    duration_ms = int((time.time() - t0) * 1000)
    logging.info(
        "Enrichment saved",
        extra={
            "step": "save_enrichment",
            "status": "ok",
            "contact_id": ctx.contact_id,
            "company_id": ctx.company_id,
            "tenant_id": ctx.tenant_id,
            "duration_ms": duration_ms,
        },
    )
    log_save(
        contact_id=ctx.contact_id,
        tenant_id=ctx.tenant_id,
        staging_key=ctx.staging_key,
        company_id=ctx.company_id,
        company_created=ctx.company_created,
        duration_ms=duration_ms,
    )
    return SaveEnrichmentResult(
        contact=ctx.contact,
        contact_scores=ctx.contact_scores,
        company_scores=ctx.company_scores,
        company_id=ctx.company_id,
        company_created=ctx.company_created,
        staging_key=ctx.staging_key,
    )


def save_enrichment(
    conn: sqlite3.Connection,
    contact_id: int,
    staging_key: str,
    existing_company_id: Optional[int] = None,
    *,
    tenant_id: Optional[str] = None,
    staging: Optional[StagingCachePort] = None,
    positioning_provider: Optional[PositioningProviderPort] = None,
    now: Optional[datetime] = None,
) -> SaveEnrichmentResult:
    """Normalize, score and persist a staged enrichment payload onto a contact.

    Raises ContactNotFoundError, StagingEntryNotFoundError, InvalidPayloadError or
    CompanyNotFoundError before anything is written. Company and contact writes
    share one transaction.
    """
    ctx = RunContext(
        contact_id=contact_id,
        staging_key=staging_key,
        existing_company_id=existing_company_id,
        tenant_id=tenant_id,
        now=now or datetime.now(timezone.utc),
    )
    staging = staging or StagingRepo(conn)
    return _run(conn, ctx, [LoadContact(conn), LoadStagedPayload(staging)], positioning_provider)


def save_enrichment_payload(
    conn: sqlite3.Connection,
    contact_id: int,
    payload: Dict[str, Any],
    existing_company_id: Optional[int] = None,
    *,
    tenant_id: Optional[str] = None,
    staging: Optional[StagingCachePort] = None,
    positioning_provider: Optional[PositioningProviderPort] = None,
    now: Optional[datetime] = None,
) -> SaveEnrichmentResult:
    """Save an already-fetched payload.

    The payload is staged under a fresh key first so provenance points at a
    cache entry just like the staged path.
    """
    moment = now or datetime.now(timezone.utc)
    ctx = RunContext(
        contact_id=contact_id,
        existing_company_id=existing_company_id,
        tenant_id=tenant_id,
        now=moment,
    )
    ctx = Pipeline([LoadContact(conn)]).run(ctx)
    ctx.payload = payload
    ValidatePayload().run(ctx)

    staging = staging or StagingRepo(conn)
    ctx.staging_key = make_staging_key(contact_id, now=moment)
    staging.put(ctx.staging_key, payload, now=moment)
    return _run(conn, ctx, [LoadStagedPayload(staging)], positioning_provider)
