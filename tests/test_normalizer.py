from __future__ import annotations

from datetime import date

import pytest

from conftest import TODAY
from services.normalizer import (
    company_size_bucket,
    infer_funding_stage,
    normalize_company,
    normalize_contact,
)


def test_full_payload_contact(payload):
    contact = normalize_contact(payload, today=TODAY)
    assert contact.full_name == "Dana Reyes"
    assert contact.phone == "+14155550100"
    assert contact.timezone == "America/Los_Angeles"
    assert contact.job_role == "Director of Operations"
    assert contact.company_name == "Acme"
    assert contact.company_domain == "acme.io"
    assert contact.company_size == "201-500"
    assert contact.company_industry == "logistics"
    assert contact.number_of_job_changes == 2
    assert contact.career_progression == "accelerating"
    assert contact.recent_promotion is True
    assert contact.recent_job_change is True
    assert contact.current_role_start_date == date(2025, 3, 1)


def test_missing_organization_still_normalizes_contact(payload):
    del payload["organization"]
    contact = normalize_contact(payload, today=TODAY)
    assert contact.full_name == "Dana Reyes"
    assert contact.company_name is None
    assert contact.company_size is None
    # Email domain is the last resort for the contact's company domain
    assert contact.company_domain == "acme.io"
    assert normalize_company(payload).present_fields() == {}


def test_absent_fields_are_omitted_not_blank():
    contact = normalize_contact({"person": {"first_name": "Ana", "title": "  "}}, today=TODAY)
    assert contact.present_fields() == {"first_name": "Ana"}


def test_organization_nested_under_person(payload):
    org = payload.pop("organization")
    payload["person"]["organization"] = org
    assert normalize_company(payload).domain == "acme.io"


def test_top_level_organization_wins_over_nested(payload):
    payload["person"]["organization"] = {"name": "Other", "primary_domain": "other.com"}
    assert normalize_company(payload).company_name == "Acme"


def test_domain_fallback_chain(payload):
    org = payload["organization"]
    assert normalize_company(payload).domain == "acme.io"

    del org["primary_domain"]
    org["website_url"] = "https://www.acme-logistics.com/about?ref=x"
    assert normalize_company(payload).domain == "acme-logistics.com"

    del org["website_url"]
    assert normalize_company(payload).domain is None
    contact = normalize_contact(payload, today=TODAY)
    assert contact.company_domain == "acme.io"


def test_explicit_domain_is_cleaned(payload):
    payload["organization"]["primary_domain"] = "HTTPS://WWW.Acme.io/"
    assert normalize_company(payload).domain == "acme.io"


def test_website_with_unlisted_suffix_keeps_host(payload):
    org = payload["organization"]
    del org["primary_domain"]
    org["website_url"] = "http://www.acme.lan/contact"
    assert normalize_company(payload).domain == "acme.lan"

    org["website_url"] = "n/a"
    assert normalize_company(payload).domain is None


def test_phone_uses_first_entry_and_raw_fallback(payload):
    payload["person"]["phone_numbers"] = [{"raw_number": "555-0100"}, {"sanitized_number": "+15550199"}]
    assert normalize_contact(payload, today=TODAY).phone == "555-0100"
    payload["person"]["phone_numbers"] = []
    assert normalize_contact(payload, today=TODAY).phone is None


@pytest.mark.parametrize(
    "employees, bucket",
    [
        (1, "1-10"),
        (10, "1-10"),
        (11, "11-50"),
        (50, "11-50"),
        (51, "51-200"),
        (200, "51-200"),
        (201, "201-500"),
        (500, "201-500"),
        (501, "501-1000"),
        (1000, "1000+"),
        (25000, "1000+"),
        (0, None),
        (None, None),
    ],
)
def test_company_size_bucket(employees, bucket):
    assert company_size_bucket(employees) == bucket


def test_company_fields(payload):
    company = normalize_company(payload)
    assert company.company_name == "Acme"
    assert company.website == "https://www.acme.io"
    assert company.headcount == 250
    assert company.revenue == 42_000_000
    assert company.growth_rate == 25
    assert company.number_of_funding_rounds == 2
    assert company.last_funding_date == date(2024, 11, 1)
    assert company.last_funding_amount == 15_000_000
    assert company.funding_stage == "series b"


def test_funding_stage_inferred_from_amount(payload):
    payload["organization"]["funding_events"] = [{"date": "2024-01-10", "amount": "$2.5M"}]
    company = normalize_company(payload)
    assert company.funding_stage == "series-a"
    assert company.last_funding_amount == 2_500_000


@pytest.mark.parametrize(
    "amount, stage",
    [(500_000, "seed"), (4_000_000, "series-a"), (15_000_000, "series-b"), (80_000_000, "series-c"), (None, None)],
)
def test_infer_funding_stage(amount, stage):
    assert infer_funding_stage(amount) == stage


def test_revenue_shorthand_and_string_headcount(payload):
    payload["organization"]["annual_revenue"] = "930M"
    payload["organization"]["estimated_num_employees"] = "1,200"
    company = normalize_company(payload)
    assert company.revenue == 930_000_000
    assert company.headcount == 1200


def test_normalization_is_deterministic(payload):
    first = normalize_contact(payload, today=TODAY).model_dump_json()
    second = normalize_contact(payload, today=TODAY).model_dump_json()
    assert first == second
    assert normalize_company(payload).model_dump_json() == normalize_company(payload).model_dump_json()


def test_non_mapping_payload_is_tolerated():
    assert normalize_contact(None, today=TODAY).present_fields() == {}
    assert normalize_company([]).present_fields() == {}
