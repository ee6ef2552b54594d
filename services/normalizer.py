from __future__ import annotations

from datetime import date
from typing import Any, Dict, Mapping, Optional

from config.heuristics import Heuristics, get_heuristics
from models.normalized_company import NormalizedCompany
from models.normalized_contact import NormalizedContact
from services.career_history import analyze_career
from services.domain_utils import email_domain, hostname_from_website, normalize_domain
from services.timezone_inference import infer_timezone
from utils.date_parsing import parse_date
from utils.number_parsing import parse_amount, parse_int


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def get_person(payload: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    person = payload.get("person")
    return person if isinstance(person, Mapping) else None


def get_organization(payload: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    """Top-level ``organization`` subtree, else the one nested under ``person``."""
    org = payload.get("organization")
    if isinstance(org, Mapping):
        return org
    person = get_person(payload)
    if person is not None and isinstance(person.get("organization"), Mapping):
        return person["organization"]
    return None


def has_enrichment_subtrees(payload: Any) -> bool:
    if not isinstance(payload, Mapping):
        return False
    return get_person(payload) is not None or get_organization(payload) is not None


def company_domain(org: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Explicit primary domain, else the organization website's host name."""
    if not org:
        return None
    explicit = normalize_domain(_text(org.get("primary_domain")) or _text(org.get("domain")))
    if explicit:
        return explicit
    return hostname_from_website(_text(org.get("website_url")) or _text(org.get("website")))


def headcount(org: Optional[Mapping[str, Any]]) -> Optional[int]:
    if not org:
        return None
    for key in ("employees", "estimated_num_employees", "headcount"):
        value = parse_int(org.get(key))
        if value is not None and value > 0:
            return value
    return None


def company_size_bucket(employees: Optional[int], heuristics: Optional[Heuristics] = None) -> Optional[str]:
    if employees is None or employees <= 0:
        return None
    h = heuristics or get_heuristics()
    for minimum, label in h.company_size_bands:
        if employees >= minimum:
            return label
    return None


def first_phone(person: Mapping[str, Any]) -> Optional[str]:
    numbers = person.get("phone_numbers")
    if not isinstance(numbers, list) or not numbers:
        return None
    first = numbers[0]
    if isinstance(first, Mapping):
        return _text(first.get("sanitized_number")) or _text(first.get("raw_number"))
    return _text(first)


def infer_funding_stage(amount: Optional[float], heuristics: Optional[Heuristics] = None) -> Optional[str]:
    if not amount:
        return None
    h = heuristics or get_heuristics()
    for ceiling, stage in h.funding_stage_by_amount:
        if amount < ceiling:
            return stage
    return h.funding_stage_ceiling


def _funding_fields(org: Mapping[str, Any], h: Heuristics) -> Dict[str, Any]:
    events = org.get("funding_events")
    if not isinstance(events, list) or not events:
        return {}
    fields: Dict[str, Any] = {"number_of_funding_rounds": len(events)}
    dated = []
    for position, event in enumerate(events):
        if not isinstance(event, Mapping):
            continue
        when = parse_date(event.get("date"))
        if when is not None:
            dated.append((when, -position, event))
    if not dated:
        return fields
    when, _, latest = max(dated, key=lambda item: (item[0], item[1]))
    fields["last_funding_date"] = when
    amount = parse_amount(latest.get("amount"))
    if amount is not None:
        fields["last_funding_amount"] = amount
    round_name = _text(latest.get("round")) or _text(latest.get("type"))
    if round_name:
        fields["funding_stage"] = round_name.lower()
    else:
        stage = infer_funding_stage(amount, h)
        if stage:
            fields["funding_stage"] = stage
    return fields


def normalize_company(payload: Mapping[str, Any], heuristics: Optional[Heuristics] = None) -> NormalizedCompany:
    """Map the organization subtree to the canonical company shape."""
    org = get_organization(payload) if isinstance(payload, Mapping) else None
    if not org:
        return NormalizedCompany()
    h = heuristics or get_heuristics()

    fields: Dict[str, Any] = {
        "company_name": _text(org.get("name")),
        "domain": company_domain(org),
        "website": _text(org.get("website_url")) or _text(org.get("website")),
        "industry": _text(org.get("industry")),
        "headcount": headcount(org),
        "revenue_range": _text(org.get("revenue_range")),
    }
    revenue = parse_amount(org.get("annual_revenue"))
    if revenue:
        fields["revenue"] = revenue
    growth = org.get("growth_rate")
    if growth is not None and not isinstance(growth, bool):
        fields["growth_rate"] = parse_amount(growth)
    fields.update(_funding_fields(org, h))
    return NormalizedCompany(**{k: v for k, v in fields.items() if v is not None})


def normalize_contact(
    payload: Mapping[str, Any],
    today: Optional[date] = None,
    heuristics: Optional[Heuristics] = None,
) -> NormalizedContact:
    """Map the person subtree (plus company context) to the canonical contact shape.

    ``today`` anchors the recency signals; it defaults to the current date.
    """
    if not isinstance(payload, Mapping):
        return NormalizedContact()
    h = heuristics or get_heuristics()
    today = today or date.today()
    person = get_person(payload) or {}
    org = get_organization(payload)

    fields: Dict[str, Any] = {
        "full_name": _text(person.get("name")),
        "first_name": _text(person.get("first_name")),
        "last_name": _text(person.get("last_name")),
        "email": _text(person.get("email")),
        "phone": first_phone(person),
        "linkedin_url": _text(person.get("linkedin_url")),
        "title": _text(person.get("title")),
        "seniority": _text(person.get("seniority")),
        "department": _text(person.get("department")),
        "city": _text(person.get("city")),
        "state": _text(person.get("state")),
        "country": _text(person.get("country")),
    }
    fields["job_role"] = fields["title"]
    fields["timezone"] = infer_timezone(fields["city"], fields["state"], fields["country"], h)

    signals = analyze_career(person.get("employment_history"), today, h)
    if signals is not None:
        fields.update(
            current_role_start_date=signals.current_role_start_date,
            total_years_experience=signals.total_years_experience,
            number_of_job_changes=signals.number_of_job_changes,
            average_tenure_months=signals.average_tenure_months,
            career_progression=signals.career_progression,
            recent_job_change=signals.recent_job_change,
            recent_promotion=signals.recent_promotion,
        )

    if org:
        fields["company_name"] = _text(org.get("name"))
        fields["company_size"] = company_size_bucket(headcount(org), h)
        fields["company_industry"] = _text(org.get("industry"))
    fields["company_domain"] = company_domain(org) or email_domain(fields["email"])

    return NormalizedContact(**{k: v for k, v in fields.items() if v is not None})
