from __future__ import annotations

from typing import Optional

from config.heuristics import Heuristics, get_heuristics


def _clean(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def infer_timezone(
    city: Optional[str] = None,
    state: Optional[str] = None,
    country: Optional[str] = None,
    heuristics: Optional[Heuristics] = None,
) -> Optional[str]:
    """Map a city/state/country triple to an IANA timezone id, or None.

    US countries resolve by state keyword group (Pacific, Mountain, Central, Eastern,
    checked in that order) and fall back to Eastern. Everything else tries the
    international city table, then the country defaults.
    """
    h = heuristics or get_heuristics()
    city_l, state_l, country_l = _clean(city), _clean(state), _clean(country)

    if country_l in h.us_country_aliases:
        for tz, states in h.us_state_groups:
            if any(s in state_l for s in states):
                return tz
        return h.us_default_timezone

    if city_l:
        for tz, cities in h.city_timezones:
            if any(c in city_l for c in cities):
                return tz

    if country_l:
        return h.country_timezones.get(country_l)
    return None
