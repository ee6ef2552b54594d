from __future__ import annotations

import logging
import sqlite3

from db.repos.companies_repo import CompaniesRepo
from db.repos.contacts_repo import ContactsRepo
from errors import CompanyNotFoundError, ContactNotFoundError, InvalidPayloadError, StagingEntryNotFoundError
from pipelines.runner import RunContext
from ports.staging import StagingCachePort
from services.normalizer import has_enrichment_subtrees


class LoadContact:
    """Fetch the contact row; its tenant scopes every later lookup."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def run(self, ctx: RunContext) -> RunContext:
        contact = ContactsRepo(self.conn).get(ctx.contact_id)
        if contact is None or (ctx.tenant_id and contact["tenant_id"] != ctx.tenant_id):
            raise ContactNotFoundError(ctx.contact_id)
        ctx.contact = contact
        ctx.tenant_id = contact["tenant_id"]
        if ctx.existing_company_id is not None:
            if CompaniesRepo(self.conn).get_for_tenant(ctx.tenant_id, ctx.existing_company_id) is None:
                raise CompanyNotFoundError(ctx.existing_company_id)
        return ctx


class LoadStagedPayload:
    def __init__(self, staging: StagingCachePort) -> None:
        self.staging = staging

    def run(self, ctx: RunContext) -> RunContext:
        payload = self.staging.get(ctx.staging_key, now=ctx.now)
        if payload is None:
            raise StagingEntryNotFoundError(ctx.staging_key)
        ctx.payload = payload
        ctx.fetched_at = self.staging.fetched_at(ctx.staging_key)
        return ctx


class ValidatePayload:
    def run(self, ctx: RunContext) -> RunContext:
        if not isinstance(ctx.payload, dict):
            raise InvalidPayloadError("Enrichment payload must be a JSON object")
        if not has_enrichment_subtrees(ctx.payload):
            raise InvalidPayloadError("Enrichment payload has neither person nor organization data")
        logging.debug(
            "Enrichment payload accepted",
            extra={"step": "validate", "status": "ok", "contact_id": ctx.contact_id},
        )
        return ctx
