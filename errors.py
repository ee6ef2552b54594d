from __future__ import annotations


class EnrichmentError(RuntimeError):
    """Base class for failures surfaced by the enrichment save path."""


class ContactNotFoundError(EnrichmentError):
    def __init__(self, contact_id: int) -> None:
        super().__init__(f"Contact not found: {contact_id}")
        self.contact_id = contact_id


class StagingEntryNotFoundError(EnrichmentError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Staged enrichment not found or expired: {key}")
        self.key = key


class InvalidPayloadError(EnrichmentError):
    pass


class CompanyConflictError(EnrichmentError):
    def __init__(self, tenant_id: str, domain: str, attempts: int) -> None:
        super().__init__(f"Company domain conflict for {tenant_id}/{domain} after {attempts} attempts")
        self.tenant_id = tenant_id
        self.domain = domain
        self.attempts = attempts


class CompanyNotFoundError(EnrichmentError):
    def __init__(self, company_id: int) -> None:
        super().__init__(f"Company not found for this tenant: {company_id}")
        self.company_id = company_id
