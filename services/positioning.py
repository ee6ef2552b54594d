from __future__ import annotations

import logging
from typing import Optional

from config.heuristics import Heuristics, get_heuristics
from models.normalized_company import CompanyPositioning, NormalizedCompany
from ports.positioning import PositioningProviderPort


def revenue_tier(revenue: Optional[float], heuristics: Optional[Heuristics] = None) -> str:
    h = heuristics or get_heuristics()
    if revenue:
        for floor, label in h.revenue_tiers:
            if revenue > floor:
                return label
    return h.revenue_tier_floor


def headcount_tier(headcount: Optional[int], heuristics: Optional[Heuristics] = None) -> str:
    h = heuristics or get_heuristics()
    if headcount:
        for floor, label in h.headcount_tiers:
            if headcount > floor:
                return label
    return h.headcount_tier_floor


def format_revenue(revenue: Optional[float]) -> Optional[str]:
    """Render revenue as $26.1B / $125.5M / $12.0K / $950; None when unknown."""
    if not revenue:
        return None
    if revenue >= 1_000_000_000:
        return f"${revenue / 1_000_000_000:.1f}B"
    if revenue >= 1_000_000:
        return f"${revenue / 1_000_000:.1f}M"
    if revenue >= 1_000:
        return f"${revenue / 1_000:.1f}K"
    return f"${revenue:.0f}"


class DeterministicPositioning:
    """Table-driven positioning used when no inference provider is configured."""

    def infer(self, company: NormalizedCompany) -> CompanyPositioning:
        tier = headcount_tier(company.headcount)
        return CompanyPositioning(
            positioning_label=f"{tier.lower()} {company.industry or 'company'}",
            revenue_tier=revenue_tier(company.revenue),
            headcount_tier=tier,
            normalized_industry=company.industry,
        )


def resolve_positioning(
    company: NormalizedCompany,
    provider: Optional[PositioningProviderPort] = None,
) -> CompanyPositioning:
    """Deterministic tiers, overlaid with whatever an external provider supplies.

    Tiers are always computed locally; a failing provider degrades to the
    deterministic result.
    """
    base = DeterministicPositioning().infer(company)
    if provider is None:
        return base
    try:
        inferred = provider.infer(company)
    except Exception as e:
        logging.warning(
            "Positioning provider failed; using deterministic positioning",
            extra={"step": "positioning", "status": "fallback", "error": str(e)},
        )
        return base
    return CompanyPositioning(
        positioning_label=inferred.positioning_label or base.positioning_label,
        category=inferred.category or base.category,
        revenue_tier=base.revenue_tier,
        headcount_tier=base.headcount_tier,
        normalized_industry=inferred.normalized_industry or base.normalized_industry,
        competitors=list(inferred.competitors[:3]) if inferred.competitors else [],
    )
