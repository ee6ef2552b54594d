"""Immutable lookup tables behind timezone, career and sizing heuristics.

The tables are read from ``heuristics.json`` next to this module exactly once per
process and exposed as a frozen dataclass of tuples and read-only mappings.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Tuple


HEURISTICS_PATH = Path(__file__).resolve().parent / "heuristics.json"


@dataclass(frozen=True)
class Heuristics:
    us_country_aliases: Tuple[str, ...]
    # (timezone, state keywords) in match order; Pacific first
    us_state_groups: Tuple[Tuple[str, Tuple[str, ...]], ...]
    us_default_timezone: str
    city_timezones: Tuple[Tuple[str, Tuple[str, ...]], ...]
    country_timezones: Mapping[str, str]

    seniority_ladder: Tuple[str, ...]
    promotion_keywords: Tuple[str, ...]
    demotion_keywords: Tuple[str, ...]
    progression_pairs: Tuple[Tuple[str, str], ...]

    # (minimum, label) pairs, highest minimum first
    company_size_bands: Tuple[Tuple[int, str], ...]
    revenue_tiers: Tuple[Tuple[float, str], ...]
    revenue_tier_floor: str
    headcount_tiers: Tuple[Tuple[int, str], ...]
    headcount_tier_floor: str
    funding_stage_by_amount: Tuple[Tuple[float, str], ...]
    funding_stage_ceiling: str


def _groups(raw, key: str) -> Tuple[Tuple[str, Tuple[str, ...]], ...]:
    return tuple((g["timezone"], tuple(s.lower() for s in g[key])) for g in raw)


def _thresholds(raw) -> tuple:
    return tuple((value, label) for value, label in raw)


def load_heuristics(path: Path = HEURISTICS_PATH) -> Heuristics:
    data = json.loads(path.read_text(encoding="utf-8"))
    return Heuristics(
        us_country_aliases=tuple(a.lower() for a in data["us_country_aliases"]),
        us_state_groups=_groups(data["us_state_groups"], "states"),
        us_default_timezone=data["us_default_timezone"],
        city_timezones=_groups(data["city_timezones"], "cities"),
        country_timezones=MappingProxyType({k.lower(): v for k, v in data["country_timezones"].items()}),
        seniority_ladder=tuple(data["seniority_ladder"]),
        promotion_keywords=tuple(data["promotion_keywords"]),
        demotion_keywords=tuple(data["demotion_keywords"]),
        progression_pairs=tuple((a, b) for a, b in data["progression_pairs"]),
        company_size_bands=_thresholds(data["company_size_bands"]),
        revenue_tiers=_thresholds(data["revenue_tiers"]),
        revenue_tier_floor=data["revenue_tier_floor"],
        headcount_tiers=_thresholds(data["headcount_tiers"]),
        headcount_tier_floor=data["headcount_tier_floor"],
        funding_stage_by_amount=_thresholds(data["funding_stage_by_amount"]),
        funding_stage_ceiling=data["funding_stage_ceiling"],
    )


@lru_cache(maxsize=1)
def get_heuristics() -> Heuristics:
    return load_heuristics()
