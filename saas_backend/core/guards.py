"""Identity and capability gates.

The identity gate answers "who is calling": it turns a bearer token into a
live person, re-reading the database on every request. The capability gate
answers "may they do this": it checks that person's role against a route's
``AccessRequirement``. Neither knows about HTTP; the API layer maps their
outcomes to 401 and 403.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Optional

from saas_backend.core.permissions import Permission, RoleName
from saas_backend.core.security import TokenError


class IdentityState(str, enum.Enum):
    no_token = "no_token"
    token_present = "token_present"
    valid = "valid"
    invalid = "invalid"
    authenticated = "authenticated"
    rejected = "rejected"


@dataclass
class IdentityResult:
    state: IdentityState
    principal: Optional[Any] = None
    reason: Optional[str] = None
    path: List[IdentityState] = field(default_factory=list)

    @property
    def authenticated(self) -> bool:
        return self.state is IdentityState.authenticated


class IdentityGate:
    """Resolves a bearer token to a live principal.

    ``auth`` needs ``decode_access_token(token)`` and
    ``validate_principal_by_id(id)``; ``AuthService`` provides both.
    """

    def __init__(self, auth, logger: Optional[logging.Logger] = None):
        self.auth = auth
        self.logger = logger or logging.getLogger(__name__)

    def evaluate(self, token: Optional[str]) -> IdentityResult:
        path = [IdentityState.no_token]
        if not token:
            return self._reject(path, "no bearer token")

        path.append(IdentityState.token_present)
        try:
            payload = self.auth.decode_access_token(token)
        except TokenError as e:
            path.append(IdentityState.invalid)
            return self._reject(path, str(e))

        path.append(IdentityState.valid)
        principal = self.auth.validate_principal_by_id(payload["sub"])
        if principal is None:
            return self._reject(path, f"principal {payload['sub']} not found or deleted")

        path.append(IdentityState.authenticated)
        return IdentityResult(IdentityState.authenticated, principal=principal, path=path)

    def _reject(self, path: List[IdentityState], reason: str) -> IdentityResult:
        path.append(IdentityState.rejected)
        self.logger.info("Identity rejected: %s", reason)
        return IdentityResult(IdentityState.rejected, reason=reason, path=path)


class GateDecision(str, enum.Enum):
    allowed = "allowed"
    unauthenticated = "unauthenticated"
    forbidden = "forbidden"


@dataclass(frozen=True)
class AccessRequirement:
    """Roles (exact match, any of) and permissions (all of) a route needs."""

    roles: FrozenSet[RoleName] = frozenset()
    permissions: FrozenSet[Permission] = frozenset()

    @property
    def is_open(self) -> bool:
        return not self.roles and not self.permissions


def requires(*items) -> AccessRequirement:
    """Build a requirement from a mix of ``RoleName`` and ``Permission`` values."""
    roles = frozenset(i for i in items if isinstance(i, RoleName))
    permissions = frozenset(i for i in items if isinstance(i, Permission))
    unknown = [i for i in items if not isinstance(i, (RoleName, Permission))]
    if unknown:
        raise TypeError(f"Not a role or permission: {unknown!r}")
    return AccessRequirement(roles=roles, permissions=permissions)


class CapabilityGate:
    """Checks a principal's role against an ``AccessRequirement``.

    There is no role hierarchy here: Admin passes a Manager-only route only if
    the route also lists Admin, or asks for a permission Admin's role holds.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def evaluate(self, principal, requirement: Optional[AccessRequirement]) -> GateDecision:
        if requirement is None or requirement.is_open:
            return GateDecision.allowed
        if principal is None:
            return GateDecision.unauthenticated

        role = getattr(principal, "role", None)
        if role is None or getattr(role, "is_deleted", False):
            self.logger.info("Principal %s has no live role", principal.id)
            return GateDecision.forbidden

        if requirement.roles and RoleName(role.role_name) not in requirement.roles:
            return GateDecision.forbidden

        if requirement.permissions and not requirement.permissions <= set(role.permissions):
            return GateDecision.forbidden

        return GateDecision.allowed
