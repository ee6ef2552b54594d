from __future__ import annotations

from typing import Any, Mapping

from models.intelligence_scores import NormalizedSnapshot
from services.scoring import signals
from services.scoring.registry import register


@register("company_health_score", "company", default=50)
def company_health_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    return signals.company_health(snap)


@register("growth_score", "company", default=50)
def growth_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    return signals.company_growth(snap)


@register("stability_score", "company", default=50)
def stability_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    count = signals.employees(snap)
    amount = signals.revenue(snap)
    score = 50
    if count >= 1000:
        score += 30
    elif count >= 100:
        score += 20
    elif count >= 10:
        score += 10
    if amount >= 10_000_000:
        score += 20
    elif amount >= 1_000_000:
        score += 10
    return score


@register("market_position_score", "company", default=50)
def market_position_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    count = signals.employees(snap)
    amount = signals.revenue(snap)
    if count >= 1000 and amount >= 100_000_000:
        return 90
    if count >= 100 and amount >= 10_000_000:
        return 75
    if count >= 10 and amount >= 1_000_000:
        return 60
    if count > 0 or amount > 0:
        return 40
    return 50


@register("readiness_score", "company", default=50)
def readiness_score(payload: Mapping[str, Any], snap: NormalizedSnapshot) -> float:
    """60% health signal, 40% growth signal."""
    return min(100.0, signals.company_health(snap)) * 0.6 + signals.company_growth(snap) * 0.4
