from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from db.repos._values import fetch_one_dict, to_db


ENRICHMENT_COLUMNS = (
    "full_name",
    "first_name",
    "last_name",
    "email",
    "phone",
    "linkedin_url",
    "title",
    "seniority",
    "department",
    "job_role",
    "city",
    "state",
    "country",
    "timezone",
    "current_role_start_date",
    "total_years_experience",
    "number_of_job_changes",
    "average_tenure_months",
    "career_progression",
    "recent_job_change",
    "recent_promotion",
    "current_tenure_years",
    "total_experience_years",
    "avg_tenure_years",
    "career_timeline_json",
    "company_name",
    "company_size",
    "company_industry",
    "domain",
    "seniority_score",
    "buying_power_score",
    "urgency_score",
    "role_power_score",
    "career_momentum_score",
    "career_stability_score",
    "buyer_likelihood_score",
    "readiness_to_buy_score",
    "enrichment_source",
    "enrichment_fetched_at",
    "enrichment_staging_key",
    "enrichment_payload_json",
    "last_enriched_at",
    "company_id",
)


class ContactsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create(
        self,
        tenant_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        linkedin_url: Optional[str] = None,
    ) -> int:
        """Insert a bare contact row (what exists before any enrichment); returns its id."""
        cur = self.conn.execute(
            "INSERT INTO contacts (tenant_id, first_name, last_name, email, linkedin_url) VALUES (?, ?, ?, ?, ?)",
            (tenant_id, first_name, last_name, email, linkedin_url),
        )
        self.conn.commit()
        return int(cur.lastrowid)

    def get(self, contact_id: int) -> Optional[Dict[str, Any]]:
        cur = self.conn.execute("SELECT * FROM contacts WHERE id = ?", (contact_id,))
        return fetch_one_dict(cur)

    def get_with_company(self, contact_id: int) -> Optional[Dict[str, Any]]:
        cur = self.conn.execute("SELECT * FROM v_contacts_with_company WHERE contact_id = ?", (contact_id,))
        return fetch_one_dict(cur)

    def update_enrichment(self, contact_id: int, fields: Dict[str, Any]) -> None:
        """Apply enrichment by id; a column keeps its stored value unless a non-null one arrives.

        Does not commit.
        """
        columns = []
        values: List[Any] = []
        for key in ENRICHMENT_COLUMNS:
            if fields.get(key) is not None:
                columns.append(f"{key} = ?")
                values.append(to_db(fields[key]))
        columns.append("updated_at = datetime('now')")
        sql = f"UPDATE contacts SET {', '.join(columns)} WHERE id = ?;"
        values.append(contact_id)
        self.conn.execute(sql, tuple(values))
