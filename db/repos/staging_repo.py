from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from utils.date_parsing import to_utc, utc_iso


KEY_PREFIX = "enrichment:contact"


def make_staging_key(contact_ref: Any, now: Optional[datetime] = None) -> str:
    """``enrichment:contact:<ref>:<epoch-ms>``"""
    moment = to_utc(now or datetime.now(timezone.utc))
    return f"{KEY_PREFIX}:{contact_ref}:{int(moment.timestamp() * 1000)}"


class StagingRepo:
    """TTL-bounded store of raw provider payloads, keyed by an opaque string."""

    def __init__(self, conn: sqlite3.Connection, ttl_seconds: Optional[int] = None):
        if ttl_seconds is None:
            from config.settings import get_settings
            ttl_seconds = get_settings().staging_ttl_seconds
        self.conn = conn
        self.ttl_seconds = ttl_seconds

    def put(
        self,
        key: str,
        payload: Dict[str, Any],
        ttl_seconds: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> None:
        moment = to_utc(now or datetime.now(timezone.utc))
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        self.conn.execute(
            "INSERT INTO enrichment_staging (key, payload_json, fetched_at, expires_at) VALUES (?, ?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET payload_json = excluded.payload_json, "
            " fetched_at = excluded.fetched_at, expires_at = excluded.expires_at;",
            (
                key,
                json.dumps(payload, ensure_ascii=False),
                utc_iso(moment),
                utc_iso(moment + timedelta(seconds=ttl)),
            ),
        )
        self.conn.commit()

    def _live_row(self, key: str, now: Optional[datetime]) -> Optional[sqlite3.Row]:
        cur = self.conn.execute(
            "SELECT payload_json, fetched_at FROM enrichment_staging WHERE key = ? AND expires_at > ?",
            (key, utc_iso(now)),
        )
        return cur.fetchone()

    def get(self, key: str, now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
        """The staged payload, or None when missing or expired."""
        row = self._live_row(key, now)
        return json.loads(row[0]) if row else None

    def fetched_at(self, key: str) -> Optional[str]:
        cur = self.conn.execute("SELECT fetched_at FROM enrichment_staging WHERE key = ?", (key,))
        row = cur.fetchone()
        return row[0] if row else None

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        cur = self.conn.execute("DELETE FROM enrichment_staging WHERE expires_at <= ?", (utc_iso(now),))
        self.conn.commit()
        return cur.rowcount
