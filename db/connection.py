from __future__ import annotations

import sqlite3
from typing import Optional


def get_connection(db_path: str, timeout: Optional[float] = 30.0) -> sqlite3.Connection:
    """Open a SQLite connection with pragmas suited to concurrent enrichment saves.

    - WAL journal so readers don't block the single writer
    - NORMAL synchronous for performance
    - foreign_keys ON so contact -> company links stay valid
    """
    conn = sqlite3.connect(db_path, timeout=timeout or 30.0)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn
