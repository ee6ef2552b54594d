from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Literal, Mapping, Optional

from models.intelligence_scores import NormalizedSnapshot


ScoreKind = Literal["contact", "company"]
ScoreFn = Callable[[Mapping[str, Any], NormalizedSnapshot], float]

SCORE_MIN = 0
SCORE_MAX = 100


@dataclass(frozen=True)
class ScoreDefinition:
    name: str
    kind: ScoreKind
    compute: ScoreFn
    # Returned when compute raises
    default: int


_REGISTRY: Dict[str, ScoreDefinition] = {}


def register(name: str, kind: ScoreKind, default: int) -> Callable[[ScoreFn], ScoreFn]:
    def decorator(fn: ScoreFn) -> ScoreFn:
        if name in _REGISTRY:
            raise ValueError(f"Score already registered: {name}")
        _REGISTRY[name] = ScoreDefinition(name=name, kind=kind, compute=fn, default=default)
        return fn

    return decorator


def get_score(name: str) -> ScoreDefinition:
    if name not in _REGISTRY:
        raise KeyError(f"Unknown score: {name}")
    return _REGISTRY[name]


def available_scores(kind: Optional[ScoreKind] = None) -> Dict[str, ScoreDefinition]:
    return {n: d for n, d in _REGISTRY.items() if kind is None or d.kind == kind}


def clamp(value: float) -> int:
    return int(min(SCORE_MAX, max(SCORE_MIN, round(value))))


def evaluate(definition: ScoreDefinition, payload: Mapping[str, Any], snapshot: NormalizedSnapshot) -> int:
    """Run one score; any failure yields the score's declared default."""
    try:
        return clamp(definition.compute(payload, snapshot))
    except Exception as e:
        logging.warning(
            f"Score {definition.name} failed; using default {definition.default}",
            extra={"step": "score", "status": "default", "error": str(e)},
        )
        return definition.default


def compute_scores(kind: ScoreKind, payload: Mapping[str, Any], snapshot: NormalizedSnapshot) -> Dict[str, int]:
    """Evaluate every registered score of ``kind`` against the same snapshot."""
    return {
        name: evaluate(definition, payload, snapshot)
        for name, definition in available_scores(kind).items()
    }
