from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create companies, contacts, the enrichment staging cache and views (idempotent)."""
    cur = conn.cursor()

    # Companies are tenant-scoped; a domain identifies at most one company per tenant.
    # NULL domains (name-only companies) are not constrained.
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS companies (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  tenant_id TEXT NOT NULL,\n"
            "  name TEXT,\n"
            "  domain TEXT,\n"
            "  website TEXT,\n"
            "  industry TEXT,\n"
            "  headcount INTEGER,\n"
            "  revenue REAL,\n"
            "  revenue_range TEXT,\n"
            "  revenue_formatted TEXT,\n"
            "  growth_rate REAL,\n"
            "  funding_stage TEXT,\n"
            "  last_funding_date TEXT,\n"
            "  last_funding_amount REAL,\n"
            "  number_of_funding_rounds INTEGER,\n"
            "  positioning_label TEXT,\n"
            "  category TEXT,\n"
            "  revenue_tier TEXT,\n"
            "  headcount_tier TEXT,\n"
            "  normalized_industry TEXT,\n"
            "  competitors_json TEXT,\n"
            "  company_health_score INTEGER,\n"
            "  growth_score INTEGER,\n"
            "  stability_score INTEGER,\n"
            "  market_position_score INTEGER,\n"
            "  readiness_score INTEGER,\n"
            "  last_enriched_at TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  UNIQUE(tenant_id, domain)\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_companies_tenant_name ON companies(tenant_id, name);")

    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS contacts (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  tenant_id TEXT NOT NULL,\n"
            "  full_name TEXT,\n"
            "  first_name TEXT,\n"
            "  last_name TEXT,\n"
            "  email TEXT,\n"
            "  phone TEXT,\n"
            "  linkedin_url TEXT,\n"
            "  title TEXT,\n"
            "  seniority TEXT,\n"
            "  department TEXT,\n"
            "  job_role TEXT,\n"
            "  city TEXT,\n"
            "  state TEXT,\n"
            "  country TEXT,\n"
            "  timezone TEXT,\n"
            "  current_role_start_date TEXT,\n"
            "  total_years_experience REAL,\n"
            "  number_of_job_changes INTEGER,\n"
            "  average_tenure_months REAL,\n"
            "  career_progression TEXT,\n"
            "  recent_job_change INTEGER,\n"
            "  recent_promotion INTEGER,\n"
            "  current_tenure_years REAL,\n"
            "  total_experience_years REAL,\n"
            "  avg_tenure_years REAL,\n"
            "  career_timeline_json TEXT,\n"
            "  company_name TEXT,\n"
            "  company_size TEXT,\n"
            "  company_industry TEXT,\n"
            "  domain TEXT,\n"
            "  seniority_score INTEGER,\n"
            "  buying_power_score INTEGER,\n"
            "  urgency_score INTEGER,\n"
            "  role_power_score INTEGER,\n"
            "  career_momentum_score INTEGER,\n"
            "  career_stability_score INTEGER,\n"
            "  buyer_likelihood_score INTEGER,\n"
            "  readiness_to_buy_score INTEGER,\n"
            "  enrichment_source TEXT,\n"
            "  enrichment_fetched_at TEXT,\n"
            "  enrichment_staging_key TEXT,\n"
            "  enrichment_payload_json TEXT,\n"
            "  last_enriched_at TEXT,\n"
            "  company_id INTEGER,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  FOREIGN KEY(company_id) REFERENCES companies(id) ON DELETE SET NULL\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_contacts_tenant ON contacts(tenant_id);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_contacts_company_id ON contacts(company_id);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_contacts_last_first ON contacts(last_name, first_name);")

    # Raw provider payloads between fetch and explicit save
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS enrichment_staging (\n"
            "  key TEXT PRIMARY KEY,\n"
            "  payload_json TEXT NOT NULL,\n"
            "  fetched_at TEXT NOT NULL,\n"
            "  expires_at TEXT NOT NULL\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_enrichment_staging_expires ON enrichment_staging(expires_at);")

    cur.execute("DROP VIEW IF EXISTS v_contacts_with_company;")
    cur.execute(
        (
            "CREATE VIEW v_contacts_with_company AS\n"
            "SELECT\n"
            "  p.id AS contact_id,\n"
            "  p.tenant_id,\n"
            "  p.full_name,\n"
            "  p.first_name,\n"
            "  p.last_name,\n"
            "  p.email,\n"
            "  p.title,\n"
            "  p.seniority,\n"
            "  p.timezone,\n"
            "  p.career_progression,\n"
            "  p.seniority_score,\n"
            "  p.buying_power_score,\n"
            "  p.readiness_to_buy_score,\n"
            "  p.enrichment_source,\n"
            "  p.last_enriched_at,\n"
            "  c.id AS company_id,\n"
            "  c.name AS company_name,\n"
            "  c.domain AS company_domain,\n"
            "  c.industry AS company_industry,\n"
            "  c.headcount,\n"
            "  c.revenue_formatted,\n"
            "  c.funding_stage,\n"
            "  c.company_health_score,\n"
            "  c.readiness_score AS company_readiness_score\n"
            "FROM contacts p LEFT JOIN companies c ON p.company_id = c.id;"
        )
    )

    conn.commit()
