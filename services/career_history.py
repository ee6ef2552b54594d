from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from config.heuristics import Heuristics, get_heuristics
from models.employment_record import CareerTimelineEntry, EmploymentRecord
from utils.date_parsing import is_still_employed_marker, months_ago, months_between, parse_date


_START_KEYS = ("started_at", "started_on", "start_date", "startDate")
_END_KEYS = ("ended_at", "ended_on", "end_date", "endDate")

RECENT_JOB_CHANGE_MONTHS = 6
RECENT_PROMOTION_MONTHS = 12


@dataclass(frozen=True)
class CareerSignals:
    current_role: Optional[EmploymentRecord]
    total_years_experience: Optional[float]
    number_of_job_changes: int
    average_tenure_months: Optional[float]
    career_progression: Optional[str]
    recent_job_change: bool
    recent_promotion: bool

    @property
    def current_role_start_date(self) -> Optional[date]:
        return self.current_role.started_at if self.current_role else None


def _first(entry: Mapping[str, Any], keys: Sequence[str]) -> tuple[bool, Any]:
    for key in keys:
        if key in entry:
            return True, entry[key]
    return False, None


def _employer_name(entry: Mapping[str, Any]) -> Optional[str]:
    org = entry.get("organization")
    if isinstance(org, Mapping) and org.get("name"):
        return str(org["name"])
    for key in ("organization_name", "company", "company_name"):
        if entry.get(key):
            return str(entry[key])
    return None


def parse_employment_history(raw: Any) -> List[EmploymentRecord]:
    """Turn the provider's employment list into records, in provider order.

    Entries with an unparseable start or end date keep their title/employer but lose
    their dates, which takes them out of tenure and progression math.
    """
    if not isinstance(raw, list):
        return []
    records: List[EmploymentRecord] = []
    for position, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            logging.debug("Skipping non-object employment entry", extra={"step": "career", "status": "skipped"})
            continue
        _, start_raw = _first(entry, _START_KEYS)
        has_end, end_raw = _first(entry, _END_KEYS)
        started = parse_date(start_raw)
        if start_raw not in (None, "") and started is None:
            logging.debug(
                "Unparseable employment start date; excluding entry from tenure math",
                extra={"step": "career", "status": "skipped"},
            )
        ended: Optional[date] = None
        if not (entry.get("current") is True or not has_end or is_still_employed_marker(end_raw)):
            ended = parse_date(end_raw)
            if ended is None:
                logging.debug(
                    "Unparseable employment end date; excluding entry from tenure math",
                    extra={"step": "career", "status": "skipped"},
                )
                started = None
        title = entry.get("title")
        records.append(
            EmploymentRecord(
                started_at=started,
                ended_at=ended,
                title=str(title).strip() if title else None,
                organization_name=_employer_name(entry),
                position=position,
            )
        )
    return records


def sort_dated(records: Iterable[EmploymentRecord]) -> List[EmploymentRecord]:
    """Records with a known start date, most recent start first."""
    dated = [r for r in records if r.started_at is not None]
    return sorted(dated, key=lambda r: (r.started_at, -r.position), reverse=True)


def find_current_role(sorted_records: Sequence[EmploymentRecord]) -> Optional[EmploymentRecord]:
    for record in sorted_records:
        if record.is_open:
            return record
    return None


def _total_months(sorted_records: Sequence[EmploymentRecord], today: date) -> float:
    return sum(months_between(r.started_at, r.ended_at or today) for r in sorted_records)


def _has_upward_step(sorted_records: Sequence[EmploymentRecord], h: Heuristics) -> bool:
    titles = [(r.title or "").lower() for r in sorted_records]
    # sorted newest first: titles[i] followed titles[i + 1]
    for newer, older in zip(titles, titles[1:]):
        for before, after in h.progression_pairs:
            if before in older and after in newer:
                return True
    return False


def classify_progression(
    sorted_records: Sequence[EmploymentRecord],
    history_length: int,
    heuristics: Optional[Heuristics] = None,
) -> Optional[str]:
    """``accelerating`` on any known upward title step, else ``stable``.

    This rule never yields ``declining``; no downward trigger is defined.
    """
    if history_length == 0:
        return None
    if history_length < 2:
        return "stable"
    h = heuristics or get_heuristics()
    return "accelerating" if _has_upward_step(sorted_records, h) else "stable"


def ladder_index(title: str, heuristics: Optional[Heuristics] = None) -> int:
    """Position of the first ladder keyword contained in ``title``; -1 when none."""
    h = heuristics or get_heuristics()
    lowered = title.lower()
    for idx, level in enumerate(h.seniority_ladder):
        if level in lowered:
            return idx
    return -1


def is_promotion(previous_title: str, current_title: str, heuristics: Optional[Heuristics] = None) -> bool:
    h = heuristics or get_heuristics()
    prev_l, curr_l = previous_title.lower(), current_title.lower()

    prev_level = ladder_index(prev_l, h)
    curr_level = ladder_index(curr_l, h)
    if prev_level > -1 and curr_level > -1 and curr_level > prev_level:
        return True

    gained = any(k in curr_l and k not in prev_l for k in h.promotion_keywords)
    demoted = any(k in curr_l and k not in prev_l for k in h.demotion_keywords)
    return gained and not demoted


def detect_recent_promotion(
    sorted_records: Sequence[EmploymentRecord],
    current: Optional[EmploymentRecord],
    history_length: int,
    today: date,
    heuristics: Optional[Heuristics] = None,
) -> bool:
    if history_length < 2 or current is None or current.started_at is None:
        return False
    if current.started_at < months_ago(today, RECENT_PROMOTION_MONTHS):
        return False
    employer = (current.organization_name or "").strip().lower()
    if not employer:
        return False
    current_title = (current.title or "").strip()

    idx = sorted_records.index(current)
    for previous in sorted_records[idx + 1:]:
        if (previous.organization_name or "").strip().lower() != employer:
            continue
        previous_title = (previous.title or "").strip()
        if previous_title.lower() == current_title.lower():
            continue
        return is_promotion(previous_title, current_title, heuristics)
    return False


def analyze_career(
    raw_history: Any,
    today: date,
    heuristics: Optional[Heuristics] = None,
) -> Optional[CareerSignals]:
    """Derive tenure, progression and promotion signals from an employment list.

    Returns None when the payload carries no employment history at all.
    """
    if not isinstance(raw_history, list) or not raw_history:
        return None
    h = heuristics or get_heuristics()
    history_length = len(raw_history)
    records = parse_employment_history(raw_history)
    sorted_records = sort_dated(records)
    current = find_current_role(sorted_records)

    total_years: Optional[float] = None
    average_months: Optional[float] = None
    if sorted_records:
        total_months = _total_months(sorted_records, today)
        total_years = round(total_months / 12, 2)
        average_months = round(total_months / len(sorted_records), 2)

    recent_change = bool(
        current is not None
        and current.started_at >= months_ago(today, RECENT_JOB_CHANGE_MONTHS)
    )

    return CareerSignals(
        current_role=current,
        total_years_experience=total_years,
        number_of_job_changes=history_length,
        average_tenure_months=average_months,
        career_progression=classify_progression(sorted_records, history_length, h),
        recent_job_change=recent_change,
        recent_promotion=detect_recent_promotion(sorted_records, current, history_length, today, h),
    )


def career_stats(raw_history: Any, today: date) -> dict:
    """Current tenure, total experience and average tenure in years (1 decimal)."""
    records = parse_employment_history(raw_history)
    sorted_records = sort_dated(records)
    current = find_current_role(sorted_records)
    current_tenure = months_between(current.started_at, today) / 12 if current else 0.0
    total_months = _total_months(sorted_records, today)
    valid = len(sorted_records)
    return {
        "current_tenure_years": round(current_tenure, 1),
        "total_experience_years": round(total_months / 12, 1),
        "avg_tenure_years": round(total_months / valid / 12, 1) if valid else 0.0,
        "number_of_jobs": len(raw_history) if isinstance(raw_history, list) else 0,
        "valid_jobs": valid,
    }


def career_timeline(raw_history: Any, today: date) -> List[CareerTimelineEntry]:
    entries: List[CareerTimelineEntry] = []
    for record in sort_dated(parse_employment_history(raw_history)):
        months = months_between(record.started_at, record.ended_at or today)
        entries.append(
            CareerTimelineEntry(
                start_date=record.started_at,
                end_date=record.ended_at,
                title=record.title or "Unknown Title",
                company=record.organization_name or "Unknown Company",
                duration_months=int(round(months)),
                duration_years=round(months / 12, 1),
            )
        )
    return entries
