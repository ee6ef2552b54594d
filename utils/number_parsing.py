from __future__ import annotations

import re
from typing import Any, Optional


_SHORTHAND = re.compile(r"^([0-9]+(?:\.[0-9]+)?)([KMBD]?)$")
_FACTORS = {"": 1, "D": 1, "K": 1_000, "M": 1_000_000, "B": 1_000_000_000}


def parse_amount(value: Any) -> Optional[float]:
    """Parse money-ish values like 930M, '$500K', '2.5B', '1,200,000' or plain numbers.

    Returns None for unparsable inputs. Booleans are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    s = value.strip().upper().replace("$", "").replace(",", "")
    if s.endswith("+"):
        s = s[:-1]
    if not s:
        return None
    m = _SHORTHAND.match(s)
    if m:
        return float(m.group(1)) * _FACTORS[m.group(2)]
    try:
        return float(s)
    except ValueError:
        return None


def parse_int(value: Any) -> Optional[int]:
    """Whole-number variant of parse_amount (headcounts and round counts)."""
    parsed = parse_amount(value)
    if parsed is None:
        return None
    return int(round(parsed))
