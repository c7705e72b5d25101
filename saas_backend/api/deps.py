"""FastAPI dependencies: services per request and the two auth gates."""

import logging
from typing import Mapping, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from saas_backend.api.access import ROUTE_ACCESS
from saas_backend.core.exceptions import AuthenticationError, AuthorizationError
from saas_backend.core.guards import AccessRequirement, CapabilityGate, GateDecision, IdentityGate
from saas_backend.core.security import security_scheme
from saas_backend.db.session import get_db
from saas_backend.models.person import Person
from saas_backend.services.auth_service import AuthService
from saas_backend.services.business_service import BusinessService
from saas_backend.services.cache_service import CacheService, get_cache
from saas_backend.services.role_service import RoleService
from saas_backend.services.token_registry import TokenRegistry
from saas_backend.services.user_service import UserService

logger = logging.getLogger("saas_backend.access")
capability_gate = CapabilityGate(logger=logger)


def get_user_service(
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache),
) -> UserService:
    return UserService(db, cache=cache, logger=logging.getLogger("saas_backend.users"))


def get_role_service(
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache),
) -> RoleService:
    return RoleService(db, cache=cache, logger=logging.getLogger("saas_backend.roles"))


def get_business_service(
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache),
) -> BusinessService:
    return BusinessService(db, cache=cache, logger=logging.getLogger("saas_backend.businesses"))


def get_auth_service(users: UserService = Depends(get_user_service)) -> AuthService:
    return AuthService(
        users,
        registry=TokenRegistry(users.db, logger=logging.getLogger("saas_backend.tokens")),
        logger=logging.getLogger("saas_backend.auth"),
    )


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> Person:
    """Identity gate: a live person for the bearer token, or 401."""
    token = credentials.credentials if credentials is not None else None
    result = IdentityGate(auth, logger=logger).evaluate(token)
    if not result.authenticated:
        raise AuthenticationError("Not authenticated")
    return result.principal


class RequireAccess:
    """Dependency that runs the capability gate for a registered route id."""

    def __init__(self, route_id: str, table: Optional[Mapping[str, AccessRequirement]] = None):
        self.route_id = route_id
        self.table = table if table is not None else ROUTE_ACCESS

    def __call__(self, principal: Person = Depends(get_current_principal)) -> Person:
        requirement = self.table.get(self.route_id)
        if requirement is None:
            logger.error("No access rule registered for route %s", self.route_id)
            raise AuthorizationError("Insufficient permissions")

        decision = capability_gate.evaluate(principal, requirement)
        if decision is GateDecision.unauthenticated:
            raise AuthenticationError("Not authenticated")
        if decision is GateDecision.forbidden:
            logger.info("Principal %s denied on %s", principal.id, self.route_id)
            raise AuthorizationError("Insufficient permissions")
        return principal
