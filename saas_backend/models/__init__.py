"""Models package. Importing it registers every table on the metadata."""

from saas_backend.models.role import Role
from saas_backend.models.person import Person, PersonStatus
from saas_backend.models.business import Business
from saas_backend.models.refresh_token import RefreshToken

__all__ = [
    "Role", "Person", "PersonStatus", "Business", "RefreshToken",
]
