from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


def _ensure_parent_dir(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass


def log_save(
    *,
    contact_id: int,
    tenant_id: Optional[str],
    staging_key: Optional[str],
    status: str = "ok",
    company_id: Optional[int] = None,
    company_created: Optional[bool] = None,
    duration_ms: Optional[int] = None,
    error: Optional[str] = None,
    extras: Optional[Dict[str, Any]] = None,
) -> None:
    """Append a single JSON line describing an enrichment save if tracing is enabled.

    Controlled by ENRICH_TRACE / ENRICH_TRACE_PATH in config/settings.py
    """
    from config.settings import get_settings
    settings = get_settings()
    if not settings.enrich_trace:
        return

    log_path = Path(settings.enrich_trace_path)
    _ensure_parent_dir(log_path)

    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "contact_id": contact_id,
        "tenant_id": tenant_id,
        "company_id": company_id,
        "company_created": company_created,
        "staging_key": staging_key,
        "status": status,
        "duration_ms": duration_ms,
        "error": error,
    }
    run_id = os.getenv("RUN_ID")
    if run_id:
        payload["run_id"] = run_id
    if extras:
        payload["extras"] = extras

    try:
        with log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")
    except OSError:
        # Never break a save on trace failures
        return
