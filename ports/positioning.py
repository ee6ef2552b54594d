from __future__ import annotations

from typing import Protocol

from models.normalized_company import CompanyPositioning, NormalizedCompany


class PositioningProviderPort(Protocol):
    def infer(self, company: NormalizedCompany) -> CompanyPositioning:
        ...
