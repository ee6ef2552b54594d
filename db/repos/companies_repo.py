from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from db.repos._values import fetch_one_dict, to_db
from errors import CompanyConflictError


# Columns an enrichment save may write
ENRICHMENT_COLUMNS = (
    "name",
    "domain",
    "website",
    "industry",
    "headcount",
    "revenue",
    "revenue_range",
    "revenue_formatted",
    "growth_rate",
    "funding_stage",
    "last_funding_date",
    "last_funding_amount",
    "number_of_funding_rounds",
    "positioning_label",
    "category",
    "revenue_tier",
    "headcount_tier",
    "normalized_industry",
    "competitors_json",
    "company_health_score",
    "growth_score",
    "stability_score",
    "market_position_score",
    "readiness_score",
)


class CompaniesRepo:
    """Tenant-scoped company rows.

    Write methods leave committing to the caller so one enrichment save is a
    single transaction.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, company_id: int) -> Optional[Dict[str, Any]]:
        cur = self.conn.execute("SELECT * FROM companies WHERE id = ?", (company_id,))
        return fetch_one_dict(cur)

    def get_for_tenant(self, tenant_id: str, company_id: int) -> Optional[Dict[str, Any]]:
        cur = self.conn.execute(
            "SELECT * FROM companies WHERE id = ? AND tenant_id = ?", (company_id, tenant_id)
        )
        return fetch_one_dict(cur)

    def find_by_domain(self, tenant_id: str, domain: str) -> Optional[int]:
        cur = self.conn.execute(
            "SELECT id FROM companies WHERE tenant_id = ? AND domain = ?", (tenant_id, domain)
        )
        row = cur.fetchone()
        return int(row[0]) if row else None

    def count_by_domain(self, tenant_id: str, domain: str) -> int:
        cur = self.conn.execute(
            "SELECT COUNT(*) FROM companies WHERE tenant_id = ? AND domain = ?", (tenant_id, domain)
        )
        return int(cur.fetchone()[0])

    def create(self, tenant_id: str, fields: Dict[str, Any]) -> int:
        """Insert a company; raises sqlite3.IntegrityError if (tenant, domain) is taken."""
        columns = ["tenant_id"]
        values: List[Any] = [tenant_id]
        for key in ENRICHMENT_COLUMNS:
            if fields.get(key) is not None:
                columns.append(key)
                values.append(to_db(fields[key]))
        if "name" not in columns:
            # Never store a nameless company
            columns.append("name")
            values.append(fields.get("domain") or "Unknown Company")
        columns.append("last_enriched_at")
        values.append(fields.get("last_enriched_at"))
        placeholders = ", ".join("?" for _ in columns)
        cur = self.conn.execute(
            f"INSERT INTO companies ({', '.join(columns)}) VALUES ({placeholders});",
            tuple(values),
        )
        return int(cur.lastrowid)

    def update_enrichment(self, company_id: int, fields: Dict[str, Any]) -> None:
        """Write enrichment fields by id: new non-null values win, nulls never overwrite."""
        safe_fields: Dict[str, Any] = {k: v for k, v in fields.items() if v is not None}
        if safe_fields.get("domain"):
            cur = self.conn.execute(
                "SELECT other.id FROM companies other JOIN companies me ON me.tenant_id = other.tenant_id "
                "WHERE me.id = ? AND other.domain = ? AND other.id != me.id",
                (company_id, safe_fields["domain"]),
            )
            if cur.fetchone():
                # Another company in this tenant already owns the domain
                logging.info(
                    "Skipping company domain change that would collide",
                    extra={"step": "resolve_company", "status": "domain_skipped", "company_id": company_id},
                )
                safe_fields.pop("domain")

        columns = []
        values: List[Any] = []
        for key in ENRICHMENT_COLUMNS:
            if key in safe_fields:
                columns.append(f"{key} = ?")
                values.append(to_db(safe_fields[key]))
        if fields.get("last_enriched_at"):
            columns.append("last_enriched_at = ?")
            values.append(fields["last_enriched_at"])
        columns.append("updated_at = datetime('now')")
        sql = f"UPDATE companies SET {', '.join(columns)} WHERE id = ?;"
        values.append(company_id)
        self.conn.execute(sql, tuple(values))

    def upsert_by_domain(
        self,
        tenant_id: str,
        domain: str,
        fields: Dict[str, Any],
        max_attempts: int = 3,
    ) -> Tuple[int, bool]:
        """Create-or-update by (tenant, domain); returns (company_id, created).

        A concurrent insert of the same domain surfaces as an IntegrityError from the
        UNIQUE constraint and is retried as an update.
        """
        merged = dict(fields, domain=domain)
        for attempt in range(1, max_attempts + 1):
            existing = self.find_by_domain(tenant_id, domain)
            if existing is not None:
                self.update_enrichment(existing, merged)
                return existing, False
            try:
                return self.create(tenant_id, merged), True
            except sqlite3.IntegrityError as e:
                logging.info(
                    f"Company domain {domain} created concurrently; retrying as update",
                    extra={
                        "step": "resolve_company",
                        "status": "conflict_retry",
                        "tenant_id": tenant_id,
                        "error": str(e),
                    },
                )
        raise CompanyConflictError(tenant_id, domain, max_attempts)
