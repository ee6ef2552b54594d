from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Protocol


class StagingCachePort(Protocol):
    def put(self, key: str, payload: Dict[str, Any], ttl_seconds: Optional[int] = None, now: Optional[datetime] = None) -> None:
        ...

    def get(self, key: str, now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
        ...

    def fetched_at(self, key: str) -> Optional[str]:
        ...

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        ...
