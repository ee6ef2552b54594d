from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Core/runtime
    db_path: str
    run_env: str
    log_level: str
    sqlite_timeout_seconds: float

    # Tenancy / provenance
    default_tenant_id: str
    enrichment_source: str

    # Staging cache
    staging_ttl_seconds: int

    # Company identity resolution
    company_upsert_retries: int

    # Logging/tracing
    enrich_trace: bool = False
    enrich_trace_path: str = "logs/enrichment_saves.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    retries = int(os.getenv("COMPANY_UPSERT_RETRIES", "3"))
    if retries < 1:
        raise RuntimeError("COMPANY_UPSERT_RETRIES must be at least 1")
    return Settings(
        db_path=os.getenv("DB_PATH", "crm.db"),
        run_env=os.getenv("RUN_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        sqlite_timeout_seconds=float(os.getenv("SQLITE_TIMEOUT_SECONDS", "30")),
        default_tenant_id=os.getenv("DEFAULT_TENANT_ID", "default"),
        enrichment_source=os.getenv("ENRICHMENT_SOURCE", "apollo"),
        staging_ttl_seconds=int(os.getenv("STAGING_TTL_SECONDS", str(7 * 24 * 60 * 60))),
        company_upsert_retries=retries,
        enrich_trace=_as_bool(os.getenv("ENRICH_TRACE", "false")),
        enrich_trace_path=os.getenv("ENRICH_TRACE_PATH", "logs/enrichment_saves.jsonl"),
    )
