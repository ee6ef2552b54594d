from __future__ import annotations

import json
from datetime import timedelta

import pytest

from conftest import NOW
from db.repos.companies_repo import CompaniesRepo
from db.repos.contacts_repo import ContactsRepo
from db.repos.staging_repo import StagingRepo
from errors import (
    CompanyNotFoundError,
    ContactNotFoundError,
    InvalidPayloadError,
    StagingEntryNotFoundError,
)
from pipelines.save_enrichment import save_enrichment, save_enrichment_payload


def _stage(conn, key, payload):
    StagingRepo(conn, ttl_seconds=3600).put(key, payload, now=NOW)


def _count(conn, table):
    return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


def test_save_writes_contact_company_and_provenance(conn, payload):
    contact_id = ContactsRepo(conn).create("t1", first_name="Dana")
    _stage(conn, "enrichment:contact:1:1", payload)

    result = save_enrichment(conn, contact_id, "enrichment:contact:1:1", now=NOW)

    assert result.company_created is True
    assert result.staging_key == "enrichment:contact:1:1"
    assert result.contact_scores.seniority_score == 70
    assert result.company_scores.readiness_score == 90

    contact = result.contact
    assert contact["company_id"] == result.company_id
    assert contact["timezone"] == "America/Los_Angeles"
    assert contact["domain"] == "acme.io"
    assert contact["career_progression"] == "accelerating"
    assert contact["recent_promotion"] == 1
    assert contact["current_role_start_date"] == "2025-03-01"
    assert contact["readiness_to_buy_score"] == 85
    assert contact["enrichment_source"] == "apollo"
    assert contact["enrichment_staging_key"] == "enrichment:contact:1:1"
    assert contact["enrichment_fetched_at"] == "2025-06-15T12:00:00+00:00"
    assert json.loads(contact["enrichment_payload_json"]) == payload
    timeline = json.loads(contact["career_timeline_json"])
    assert [entry["title"] for entry in timeline] == ["Director of Operations", "Operations Manager"]
    assert contact["total_experience_years"] is not None

    company = CompaniesRepo(conn).get(result.company_id)
    assert company["tenant_id"] == "t1"
    assert company["name"] == "Acme"
    assert company["domain"] == "acme.io"
    assert company["funding_stage"] == "series b"
    assert company["revenue_formatted"] == "$42.0M"
    assert company["headcount_tier"] == "Mid-size"
    assert company["company_health_score"] == 100


def test_saving_twice_never_duplicates_company(conn, payload):
    contacts = ContactsRepo(conn)
    first = contacts.create("t1")
    second = contacts.create("t1")
    _stage(conn, "k", payload)

    a = save_enrichment(conn, first, "k", now=NOW)
    b = save_enrichment(conn, first, "k", now=NOW)
    c = save_enrichment(conn, second, "k", now=NOW)

    assert a.company_id == b.company_id == c.company_id
    assert (a.company_created, b.company_created, c.company_created) == (True, False, False)
    assert CompaniesRepo(conn).count_by_domain("t1", "acme.io") == 1


def test_company_identity_is_tenant_scoped(conn, payload):
    contacts = ContactsRepo(conn)
    _stage(conn, "k", payload)
    a = save_enrichment(conn, contacts.create("t1"), "k", now=NOW)
    b = save_enrichment(conn, contacts.create("t2"), "k", now=NOW)
    assert a.company_id != b.company_id
    assert b.company_created is True


def test_non_null_values_win_and_nulls_never_overwrite(conn, payload):
    contacts = ContactsRepo(conn)
    contact_id = contacts.create("t1", first_name="Dana", email="dana@personal.me")
    _stage(conn, "full", payload)
    save_enrichment(conn, contact_id, "full", now=NOW)

    sparse = {"person": {"title": "VP Operations"}, "organization": {"name": "Acme", "primary_domain": "acme.io"}}
    _stage(conn, "sparse", sparse)
    result = save_enrichment(conn, contact_id, "sparse", now=NOW)

    contact = result.contact
    assert contact["title"] == "VP Operations"
    assert contact["email"] == "dana@acme.io"
    assert contact["timezone"] == "America/Los_Angeles"
    assert contact["career_progression"] == "accelerating"

    company = CompaniesRepo(conn).get(result.company_id)
    assert company["industry"] == "logistics"
    assert company["headcount"] == 250


def test_missing_contact_is_not_found_and_writes_nothing(conn, payload):
    _stage(conn, "k", payload)
    with pytest.raises(ContactNotFoundError):
        save_enrichment(conn, 999, "k", now=NOW)
    assert _count(conn, "companies") == 0


def test_contact_of_other_tenant_is_not_found(conn, payload):
    contact_id = ContactsRepo(conn).create("t1")
    _stage(conn, "k", payload)
    with pytest.raises(ContactNotFoundError):
        save_enrichment(conn, contact_id, "k", tenant_id="t2", now=NOW)


def test_staging_miss_and_expiry(conn, payload):
    contact_id = ContactsRepo(conn).create("t1")
    with pytest.raises(StagingEntryNotFoundError):
        save_enrichment(conn, contact_id, "nope", now=NOW)

    _stage(conn, "k", payload)
    with pytest.raises(StagingEntryNotFoundError):
        save_enrichment(conn, contact_id, "k", now=NOW + timedelta(hours=2))
    assert _count(conn, "companies") == 0
    assert ContactsRepo(conn).get(contact_id)["last_enriched_at"] is None


def test_payload_without_subtrees_is_invalid(conn):
    contact_id = ContactsRepo(conn).create("t1")
    _stage(conn, "k", {"unrelated": True})
    with pytest.raises(InvalidPayloadError):
        save_enrichment(conn, contact_id, "k", now=NOW)
    assert ContactsRepo(conn).get(contact_id)["enrichment_staging_key"] is None


def test_unknown_existing_company_is_rejected(conn, payload):
    contact_id = ContactsRepo(conn).create("t1")
    other_tenant_company = CompaniesRepo(conn).create("t2", {"name": "Elsewhere"})
    conn.commit()
    _stage(conn, "k", payload)
    with pytest.raises(CompanyNotFoundError):
        save_enrichment(conn, contact_id, "k", existing_company_id=other_tenant_company, now=NOW)


def test_existing_company_id_is_updated_not_duplicated(conn, payload):
    contact_id = ContactsRepo(conn).create("t1")
    company_id = CompaniesRepo(conn).create("t1", {"name": "Acme Corp"})
    conn.commit()
    _stage(conn, "k", payload)
    result = save_enrichment(conn, contact_id, "k", existing_company_id=company_id, now=NOW)
    assert result.company_id == company_id
    assert result.company_created is False
    assert CompaniesRepo(conn).get(company_id)["domain"] == "acme.io"
    assert _count(conn, "companies") == 1


def test_person_only_payload_creates_no_company(conn, payload):
    del payload["organization"]
    contact_id = ContactsRepo(conn).create("t1")
    _stage(conn, "k", payload)
    result = save_enrichment(conn, contact_id, "k", now=NOW)
    assert result.company_id is None
    assert result.contact["domain"] == "acme.io"
    assert _count(conn, "companies") == 0


def test_name_only_company_is_created(conn):
    contact_id = ContactsRepo(conn).create("t1")
    _stage(conn, "k", {"organization": {"name": "Stealth Startup"}})
    result = save_enrichment(conn, contact_id, "k", now=NOW)
    assert result.company_created is True
    assert CompaniesRepo(conn).get(result.company_id)["domain"] is None
    # A second save reuses the linked company
    again = save_enrichment(conn, contact_id, "k", now=NOW)
    assert again.company_id == result.company_id
    assert _count(conn, "companies") == 1


def test_failure_during_write_rolls_back(conn, payload, monkeypatch):
    contact_id = ContactsRepo(conn).create("t1")
    _stage(conn, "k", payload)

    def explode(self, contact_id, fields):
        raise RuntimeError("disk full")

    monkeypatch.setattr(ContactsRepo, "update_enrichment", explode)
    with pytest.raises(RuntimeError):
        save_enrichment(conn, contact_id, "k", now=NOW)
    assert _count(conn, "companies") == 0


def test_direct_payload_path_stages_for_provenance(conn, payload):
    contact_id = ContactsRepo(conn).create("t1")
    result = save_enrichment_payload(conn, contact_id, payload, now=NOW)
    assert result.staging_key.startswith(f"enrichment:contact:{contact_id}:")
    assert result.contact["enrichment_staging_key"] == result.staging_key
    assert StagingRepo(conn).get(result.staging_key, now=NOW) == payload


def test_direct_payload_validates_before_staging(conn):
    contact_id = ContactsRepo(conn).create("t1")
    with pytest.raises(InvalidPayloadError):
        save_enrichment_payload(conn, contact_id, {"nothing": 1}, now=NOW)
    assert _count(conn, "enrichment_staging") == 0


class _Provider:
    def infer(self, company):
        from models.normalized_company import CompanyPositioning
        return CompanyPositioning(category="Logistics SaaS", competitors=["Flexport"])


def test_positioning_provider_is_used(conn, payload):
    contact_id = ContactsRepo(conn).create("t1")
    _stage(conn, "k", payload)
    result = save_enrichment(conn, contact_id, "k", positioning_provider=_Provider(), now=NOW)
    company = CompaniesRepo(conn).get(result.company_id)
    assert company["category"] == "Logistics SaaS"
    assert json.loads(company["competitors_json"]) == ["Flexport"]


class _InMemoryStaging:
    """Dict-backed staging cache implementing only the port methods."""

    def __init__(self):
        self.entries = {}

    def put(self, key, payload, ttl_seconds=None, now=None):
        self.entries[key] = (payload, "2025-06-14T08:30:00+00:00")

    def get(self, key, now=None):
        entry = self.entries.get(key)
        return entry[0] if entry else None

    def fetched_at(self, key):
        entry = self.entries.get(key)
        return entry[1] if entry else None

    def purge_expired(self, now=None):
        return 0


def test_save_through_custom_staging_cache(conn, payload):
    contact_id = ContactsRepo(conn).create("t1")
    cache = _InMemoryStaging()
    cache.put("mem", payload)

    result = save_enrichment(conn, contact_id, "mem", staging=cache, now=NOW)
    assert result.contact["enrichment_fetched_at"] == "2025-06-14T08:30:00+00:00"
    assert result.contact["enrichment_staging_key"] == "mem"
    assert _count(conn, "enrichment_staging") == 0

    with pytest.raises(StagingEntryNotFoundError):
        save_enrichment(conn, contact_id, "absent", staging=cache, now=NOW)


def test_direct_payload_through_custom_staging_cache(conn, payload):
    contact_id = ContactsRepo(conn).create("t1")
    cache = _InMemoryStaging()
    result = save_enrichment_payload(conn, contact_id, payload, staging=cache, now=NOW)
    assert list(cache.entries) == [result.staging_key]
    assert result.company_created is True
