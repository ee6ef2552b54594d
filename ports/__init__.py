from .positioning import PositioningProviderPort
from .repos import CompaniesRepoPort, ContactsRepoPort
from .staging import StagingCachePort

__all__ = [
    "PositioningProviderPort",
    "CompaniesRepoPort",
    "ContactsRepoPort",
    "StagingCachePort",
]
