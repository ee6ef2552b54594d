from .employment_record import CareerTimelineEntry, EmploymentRecord
from .normalized_contact import NormalizedContact
from .normalized_company import CompanyPositioning, NormalizedCompany
from .intelligence_scores import CompanyScores, ContactScores, NormalizedSnapshot
from .save_result import SaveEnrichmentResult

__all__ = [
    "EmploymentRecord",
    "CareerTimelineEntry",
    "NormalizedContact",
    "NormalizedCompany",
    "CompanyPositioning",
    "NormalizedSnapshot",
    "ContactScores",
    "CompanyScores",
    "SaveEnrichmentResult",
]
