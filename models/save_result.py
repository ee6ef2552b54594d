from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from models.intelligence_scores import CompanyScores, ContactScores


class SaveEnrichmentResult(BaseModel):
    """What the save entrypoint hands back to its caller."""

    contact: Dict[str, Any]
    contact_scores: ContactScores
    company_scores: CompanyScores
    company_id: Optional[int] = None
    company_created: bool = False
    staging_key: str

    model_config = ConfigDict(frozen=True)
