from __future__ import annotations

import copy
import os
import sqlite3
import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.normalizer'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


TODAY = date(2025, 6, 15)
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)

SAMPLE_PAYLOAD = {
    "person": {
        "name": "Dana Reyes",
        "first_name": "Dana",
        "last_name": "Reyes",
        "email": "dana@acme.io",
        "title": "Director of Operations",
        "seniority": "director",
        "department": "operations",
        "city": "San Francisco",
        "state": "California",
        "country": "United States",
        "linkedin_url": "https://www.linkedin.com/in/dana-reyes",
        "phone_numbers": [
            {"raw_number": "+1 (415) 555-0100", "sanitized_number": "+14155550100"},
            {"raw_number": "+1 (415) 555-0199", "sanitized_number": "+14155550199"},
        ],
        "employment_history": [
            {
                "title": "Director of Operations",
                "organization_name": "Acme",
                "start_date": "2025-03-01",
                "end_date": None,
                "current": True,
            },
            {
                "title": "Operations Manager",
                "organization_name": "Acme",
                "start_date": "2021-01-01",
                "end_date": "2024-12-15",
            },
        ],
    },
    "organization": {
        "name": "Acme",
        "primary_domain": "acme.io",
        "website_url": "https://www.acme.io",
        "industry": "logistics",
        "estimated_num_employees": 250,
        "annual_revenue": 42_000_000,
        "growth_rate": 25,
        "funding_events": [
            {"date": "2024-11-01", "amount": "15M", "type": "Series B"},
            {"date": "2022-02-01", "amount": "3M", "type": "Series A"},
        ],
    },
}


@pytest.fixture
def payload():
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture
def conn(tmp_path):
    from db import schema

    db = sqlite3.connect(str(tmp_path / "t.db"))
    db.execute("PRAGMA foreign_keys=ON;")
    schema.bootstrap(db)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.setenv("ENRICH_TRACE", "false")
    from config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
