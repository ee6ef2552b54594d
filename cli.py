import argparse
import json
import os
import sys
import uuid as _uuid
from datetime import date, datetime, time
from pathlib import Path

from config.settings import get_settings
from db import schema
from db.connection import get_connection
from db.repos.contacts_repo import ContactsRepo
from db.repos.staging_repo import StagingRepo, make_staging_key
from errors import EnrichmentError, InvalidPayloadError
from pipelines.runner import Pipeline, RunContext
from pipelines.save_enrichment import save_enrichment
from pipelines.steps import NormalizePayload, ScoreSnapshot, ValidatePayload
from services.normalizer import has_enrichment_subtrees
from services.positioning import format_revenue
from utils.logging_setup import init_logging


def _connect(args):
    conn = get_connection(args.db, timeout=get_settings().sqlite_timeout_seconds)
    schema.bootstrap(conn)
    return conn


def _read_payload(path: str) -> dict:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not has_enrichment_subtrees(payload):
        raise InvalidPayloadError(f"{path}: payload has neither person nor organization data")
    return payload


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def cmd_bootstrap(args):
    _connect(args)
    print("Schema ready")


def cmd_add_contact(args):
    conn = _connect(args)
    contact_id = ContactsRepo(conn).create(
        args.tenant or get_settings().default_tenant_id,
        first_name=args.first_name,
        last_name=args.last_name,
        email=args.email,
        linkedin_url=args.linkedin_url,
    )
    print(contact_id)


def cmd_stage(args):
    conn = _connect(args)
    payload = _read_payload(args.input)
    key = args.key or make_staging_key(args.contact_ref)
    StagingRepo(conn).put(key, payload, ttl_seconds=args.ttl)
    print(key)


def cmd_save(args):
    conn = _connect(args)
    result = save_enrichment(
        conn,
        args.contact_id,
        args.key,
        existing_company_id=args.company_id,
        tenant_id=args.tenant,
    )
    _print_json(result.model_dump(mode="json"))


def cmd_preview(args):
    payload = _read_payload(args.input)
    today = date.fromisoformat(args.today) if args.today else date.today()
    ctx = Pipeline([ValidatePayload(), NormalizePayload(), ScoreSnapshot()]).run(
        RunContext(payload=payload, now=datetime.combine(today, time()))
    )
    company = ctx.snapshot.company
    out = {
        "contact": ctx.snapshot.contact.model_dump(mode="json", exclude_none=True),
        "company": company.model_dump(mode="json", exclude_none=True),
        "contact_scores": ctx.contact_scores.model_dump(),
        "company_scores": ctx.company_scores.model_dump(),
    }
    if ctx.positioning is not None:
        out["positioning"] = ctx.positioning.model_dump(exclude_none=True)
        out["company"]["revenue_formatted"] = format_revenue(company.revenue)
    _print_json(out)


def cmd_report_contact(args):
    conn = _connect(args)
    row = ContactsRepo(conn).get_with_company(args.contact_id)
    if not row:
        print("No record found for contact")
        return
    _print_json(row)


def cmd_purge_staging(args):
    conn = _connect(args)
    removed = StagingRepo(conn).purge_expired()
    print(f"Purged {removed} expired staging entries")


def main():
    settings = get_settings()
    init_logging(settings.log_level)
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex
    parser = argparse.ArgumentParser(description="Contact enrichment CLI")
    parser.add_argument("--db", default=settings.db_path, help="Path to SQLite DB (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_boot = sub.add_parser("bootstrap", help="Create tables and indexes")
    p_boot.set_defaults(func=cmd_bootstrap)

    p_add = sub.add_parser("add-contact", help="Create a bare contact and print its id")
    p_add.add_argument("--tenant", default=None, help="Tenant id (default from settings)")
    p_add.add_argument("--first-name")
    p_add.add_argument("--last-name")
    p_add.add_argument("--email")
    p_add.add_argument("--linkedin-url")
    p_add.set_defaults(func=cmd_add_contact)

    p_stage = sub.add_parser("stage", help="Stage a raw provider payload and print its key")
    p_stage.add_argument("input", help="Path to payload JSON")
    p_stage.add_argument("--contact-ref", default="cli", help="Reference embedded in the generated key")
    p_stage.add_argument("--key", default=None, help="Explicit staging key")
    p_stage.add_argument("--ttl", type=int, default=None, help="TTL in seconds (default from settings)")
    p_stage.set_defaults(func=cmd_stage)

    p_save = sub.add_parser("save", help="Normalize, score and save a staged payload onto a contact")
    p_save.add_argument("--contact-id", type=int, required=True)
    p_save.add_argument("--key", required=True, help="Staging key")
    p_save.add_argument("--company-id", type=int, default=None, help="Attach to this existing company")
    p_save.add_argument("--tenant", default=None, help="Only save if the contact belongs to this tenant")
    p_save.set_defaults(func=cmd_save)

    p_prev = sub.add_parser("preview", help="Print normalized output and scores without writing")
    p_prev.add_argument("input", help="Path to payload JSON")
    p_prev.add_argument("--today", default=None, help="Evaluation date YYYY-MM-DD (default: today)")
    p_prev.set_defaults(func=cmd_preview)

    p_rep = sub.add_parser("report-contact", help="Show a contact joined with its company")
    p_rep.add_argument("contact_id", type=int)
    p_rep.set_defaults(func=cmd_report_contact)

    p_purge = sub.add_parser("purge-staging", help="Delete expired staged payloads")
    p_purge.set_defaults(func=cmd_purge_staging)

    args = parser.parse_args()
    try:
        args.func(args)
    except EnrichmentError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
