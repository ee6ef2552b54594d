"""Contact-level intelligence scores (0-100).

Defaults when a score cannot be computed are declared at registration.
"""
from __future__ import annotations

from typing import Any, Mapping

from models.intelligence_scores import NormalizedSnapshot
from services.scoring import signals
from services.scoring.registry import register


READINESS_WEIGHTS = {"urgency": 0.40, "buying_power": 0.35, "buyer_likelihood": 0.25}


@register("seniority_score", "contact", default=0)
def seniority_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    """Title-ladder tier: C-level 95, VP 80, director 70, manager/senior 60,
    individual contributor 40, entry 20, unknown-but-titled 50, no data 0.
    """
    level = signals.seniority(snap)
    t = signals.title(payload, snap)
    dept = signals.department(snap)

    if (
        signals.is_executive_level(level)
        or "c_suite" in dept
        or signals.has_keyword(t, ("ceo", "cto", "cfo", "coo", "founder"))
        or signals.is_top_executive(t)
    ):
        return 95
    if "vp" in level or signals.has_keyword(t, ("vp", "vice president")):
        return 80
    if "director" in level or signals.has_keyword(t, ("director", "head of")):
        return 70
    if level in ("manager", "senior") or signals.is_manager_level(t):
        return 60
    if any(k in level for k in ("individual", "contributor")) or signals.has_keyword(
        t, ("specialist", "analyst", "coordinator")
    ):
        return 40
    if level in ("entry", "junior", "associate") or signals.has_keyword(t, ("junior", "associate", "intern")):
        return 20
    return 50 if t else 0


@register("buying_power_score", "contact", default=0)
def buying_power_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    """Title authority (0-60) + headcount (0-25) + revenue (0-15)."""
    return signals.buying_power(payload, snap)


@register("urgency_score", "contact", default=50)
def urgency_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    """Neutral 50, raised by a recent job change, company growth and recent funding."""
    return signals.urgency(payload, snap)


@register("role_power_score", "contact", default=0)
def role_power_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    t = signals.title(payload, snap)
    if signals.is_top_executive(t) or signals.is_executive_level(signals.seniority(snap)):
        return 95
    if signals.is_c_suite_or_vp(t):
        return 80
    if signals.is_director_level(t):
        return 65
    if signals.is_manager_level(t):
        return 45
    return 30 if t else 0


@register("career_momentum_score", "contact", default=50)
def career_momentum_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    if signals.job_count(snap) < 2:
        return 50
    score = 50
    if snap.contact.career_progression == "accelerating":
        score += 30
    if signals.recent_job_change(snap):
        score += 20
    return score


@register("career_stability_score", "contact", default=50)
def career_stability_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    tenure = signals.average_tenure_months(snap)
    if tenure is None or tenure <= 0:
        return 50
    score = 50
    if tenure >= 36:
        score += 30
    elif tenure >= 24:
        score += 20
    elif tenure >= 12:
        score += 10

    jobs = signals.job_count(snap)
    if jobs <= 2:
        score += 20
    elif jobs <= 4:
        score += 10
    else:
        score -= 10
    return score


@register("buyer_likelihood_score", "contact", default=50)
def buyer_likelihood_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    return signals.buyer_likelihood(payload, snap)


@register("readiness_to_buy_score", "contact", default=0)
def readiness_to_buy_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    # Combines the urgency, budget and role signals directly, each capped at 100
    parts = {
        "urgency": min(100.0, signals.urgency(payload, snap)),
        "buying_power": min(100.0, signals.buying_power(payload, snap)),
        "buyer_likelihood": min(100.0, signals.buyer_likelihood(payload, snap)),
    }
    return sum(parts[k] * w for k, w in READINESS_WEIGHTS.items())
