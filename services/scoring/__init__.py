from typing import Any, Mapping

from models.intelligence_scores import CompanyScores, ContactScores, NormalizedSnapshot

from . import company_scores, contact_scores  # noqa: F401 ensure registration
from .registry import available_scores, compute_scores, get_score, register


def score_contact(payload: Mapping[str, Any], snapshot: NormalizedSnapshot) -> ContactScores:
    return ContactScores(**compute_scores("contact", payload, snapshot))


def score_company(payload: Mapping[str, Any], snapshot: NormalizedSnapshot) -> CompanyScores:
    return CompanyScores(**compute_scores("company", payload, snapshot))


__all__ = [
    "available_scores",
    "compute_scores",
    "get_score",
    "register",
    "score_contact",
    "score_company",
]
