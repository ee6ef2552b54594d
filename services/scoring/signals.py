"""Named signals shared by the score functions.

Each signal reads only the raw payload and the normalized snapshot, never another
score, so every score can be computed independently of the others.
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Mapping, Optional

from models.intelligence_scores import NormalizedSnapshot
from utils.date_parsing import months_ago


@lru_cache(maxsize=None)
def _word_pattern(keyword: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(keyword)}\b")


def has_keyword(text: str, keywords) -> bool:
    """Whole-word match, so "cto" does not hit "director"."""
    return any(_word_pattern(k).search(text) for k in keywords)


# --- Contact context -------------------------------------------------------

def title(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> str:
    if snap.contact.title:
        return snap.contact.title.lower()
    person = payload.get("person") if isinstance(payload, Mapping) else None
    headline = person.get("headline") if isinstance(person, Mapping) else None
    return str(headline).lower() if headline else ""


def seniority(snap: NormalizedSnapshot) -> str:
    return (snap.contact.seniority or "").lower()


def department(snap: NormalizedSnapshot) -> str:
    return (snap.contact.department or "").lower()


def is_executive_level(level: str) -> bool:
    return "executive" in level or level in ("c_suite", "owner", "founder", "partner")


def is_top_executive(t: str) -> bool:
    if has_keyword(t, ("ceo", "founder", "owner")):
        return True
    return has_keyword(t, ("president",)) and not has_keyword(t, ("vice president",))


def is_c_suite_or_vp(t: str) -> bool:
    return has_keyword(t, ("cfo", "cto", "coo", "vp", "vice president"))


def is_director_level(t: str) -> bool:
    return has_keyword(t, ("director", "head of", "chief"))


def is_manager_level(t: str) -> bool:
    return has_keyword(t, ("manager", "senior", "lead"))


def title_authority_points(t: str) -> int:
    """Decision authority from title alone (0-60)."""
    if is_top_executive(t):
        return 60
    if is_c_suite_or_vp(t):
        return 50
    if is_director_level(t):
        return 40
    if is_manager_level(t):
        return 25
    if t:
        return 15
    return 0


def buyer_role_points(t: str) -> int:
    if is_top_executive(t):
        return 30
    if has_keyword(t, ("cfo", "cto", "vp", "director")):
        return 20
    if has_keyword(t, ("manager", "head of")):
        return 10
    return 0


def recent_job_change(snap: NormalizedSnapshot) -> bool:
    return bool(snap.contact.recent_job_change)


def job_count(snap: NormalizedSnapshot) -> int:
    return snap.contact.number_of_job_changes or 0


def average_tenure_months(snap: NormalizedSnapshot) -> Optional[float]:
    return snap.contact.average_tenure_months


# --- Company context -------------------------------------------------------

def employees(snap: NormalizedSnapshot) -> int:
    return snap.company.headcount or 0


def revenue(snap: NormalizedSnapshot) -> float:
    return snap.company.revenue or 0.0


def revenue_range(snap: NormalizedSnapshot) -> str:
    return (snap.company.revenue_range or "").lower()


def growth_rate(snap: NormalizedSnapshot) -> Optional[float]:
    return snap.company.growth_rate


def funded_within(snap: NormalizedSnapshot, months: int) -> bool:
    last = snap.company.last_funding_date
    return last is not None and last >= months_ago(snap.evaluated_at, months)


def has_funding_history(snap: NormalizedSnapshot) -> bool:
    return bool(snap.company.number_of_funding_rounds) or snap.company.last_funding_date is not None


def company_size_points(count: int) -> int:
    """Budget proxy from headcount (0-25)."""
    if count >= 10000:
        return 25
    if count >= 1000:
        return 20
    if count >= 100:
        return 15
    if count >= 10:
        return 10
    if count > 0:
        return 5
    return 0


def revenue_points(amount: float, band: str) -> int:
    """Budget proxy from revenue (0-15); revenue range text as a fallback."""
    if amount >= 1_000_000_000:
        return 15
    if amount >= 100_000_000:
        return 12
    if amount >= 10_000_000:
        return 10
    if amount >= 1_000_000:
        return 7
    if amount > 0:
        return 5
    if "million" in band or "billion" in band:
        return 8
    return 0


# --- Composite signals -----------------------------------------------------

def buying_power(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    return (
        title_authority_points(title(payload, snap))
        + company_size_points(employees(snap))
        + revenue_points(revenue(snap), revenue_range(snap))
    )


def urgency(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    score = 50.0
    if recent_job_change(snap):
        score += 30
    rate = growth_rate(snap) or 0
    if rate > 50:
        score += 20
    elif rate > 20:
        score += 15
    elif rate > 0:
        score += 10
    if funded_within(snap, 12):
        score += 15
    return score


def buyer_likelihood(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    score = 50.0 + buyer_role_points(title(payload, snap))
    count = employees(snap)
    if count >= 100:
        score += 20
    elif count >= 10:
        score += 10
    return score


def company_health(snap: NormalizedSnapshot) -> float:
    score = 50.0
    count = employees(snap)
    if count >= 1000:
        score += 30
    elif count >= 100:
        score += 25
    elif count >= 10:
        score += 15
    elif count > 0:
        score += 5

    amount = revenue(snap)
    if amount >= 1_000_000_000:
        score += 30
    elif amount >= 100_000_000:
        score += 25
    elif amount >= 10_000_000:
        score += 20
    elif amount >= 1_000_000:
        score += 15
    elif amount > 0:
        score += 10
    elif "billion" in revenue_range(snap):
        score += 25
    elif "million" in revenue_range(snap):
        score += 15

    rate = growth_rate(snap)
    if rate is not None:
        if rate > 50:
            score += 20
        elif rate > 20:
            score += 15
        elif rate > 0:
            score += 10
        elif rate < -10:
            score -= 10

    if funded_within(snap, 24):
        score += 20
    elif has_funding_history(snap):
        score += 10
    return score


def company_growth(snap: NormalizedSnapshot) -> float:
    rate = growth_rate(snap) or 0
    if rate > 50:
        return 90
    if rate > 20:
        return 75
    if rate > 0:
        return 60
    if rate < -10:
        return 30
    return 50
