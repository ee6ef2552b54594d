from __future__ import annotations

import json
import sqlite3
from datetime import date, datetime
from typing import Any, Dict, Optional


def to_db(value: Any) -> Any:
    """Convert model values into sqlite-storable values.

    Lists and dicts become JSON text (non-ASCII preserved), dates ISO text, bools 0/1.
    """
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return value


def fetch_one_dict(cur: sqlite3.Cursor) -> Optional[Dict[str, Any]]:
    """Next row as a column-name mapping, whatever row factory the connection uses."""
    row = cur.fetchone()
    if row is None:
        return None
    return {col[0]: row[i] for i, col in enumerate(cur.description)}
