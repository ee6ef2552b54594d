# Namespace for pipeline steps
from .load_inputs import LoadContact, LoadStagedPayload, ValidatePayload  # noqa: F401
from .normalize import NormalizePayload  # noqa: F401
from .score import ScoreSnapshot  # noqa: F401
from .resolve_company import ResolveCompany  # noqa: F401
from .persist_contact import PersistContact  # noqa: F401
