from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Tuple


class ContactsRepoPort(Protocol):
    def create(
        self,
        tenant_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        linkedin_url: Optional[str] = None,
    ) -> int:
        ...

    def get(self, contact_id: int) -> Optional[Dict[str, Any]]:
        ...

    def update_enrichment(self, contact_id: int, fields: Dict[str, Any]) -> None:
        ...


class CompaniesRepoPort(Protocol):
    def get(self, company_id: int) -> Optional[Dict[str, Any]]:
        ...

    def find_by_domain(self, tenant_id: str, domain: str) -> Optional[int]:
        ...

    def upsert_by_domain(
        self,
        tenant_id: str,
        domain: str,
        fields: Dict[str, Any],
        max_attempts: int = 3,
    ) -> Tuple[int, bool]:
        ...

    def create(self, tenant_id: str, fields: Dict[str, Any]) -> int:
        ...

    def update_enrichment(self, company_id: int, fields: Dict[str, Any]) -> None:
        ...
