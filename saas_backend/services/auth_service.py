"""Auth service: credential validation, token issuance and refresh."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from saas_backend.core.config import settings
from saas_backend.core.exceptions import AuthenticationError
from saas_backend.core.security import TokenError, TokenIssuer, TokenKind, token_issuer
from saas_backend.models.person import Person
from saas_backend.schemas.schemas import (
    AccessTokenResponse, PrincipalView, TokenResponse, principal_view, token_claims,
)
from saas_backend.services.token_registry import TokenRegistry
from saas_backend.services.user_service import UserService


class AuthService:
    """Orchestrates login, refresh, and per-request principal resolution.

    Every failure on these paths surfaces as an ``AuthenticationError`` with
    a generic message; what actually went wrong is only logged.
    """

    def __init__(
        self,
        users: UserService,
        issuer: Optional[TokenIssuer] = None,
        registry: Optional[TokenRegistry] = None,
        access_ttl: Optional[timedelta] = None,
        refresh_ttl: Optional[timedelta] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.users = users
        self.issuer = issuer or token_issuer
        self.registry = registry
        self.access_ttl = access_ttl or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRY_MINUTES)
        self.refresh_ttl = refresh_ttl or timedelta(days=settings.REFRESH_TOKEN_EXPIRY_DAYS)
        self.logger = logger or logging.getLogger(__name__)

    def validate_credentials(self, email: str, password: str) -> Optional[PrincipalView]:
        """Return the principal view for valid credentials, else None.

        Unknown email, soft-deleted person, and wrong password all look the
        same to the caller.
        """
        self.logger.info("Validating user credentials for email: %s", email)
        person = self.users.verify_credentials(email, password)
        if person is None:
            return None
        return principal_view(person)

    def login(self, principal) -> TokenResponse:
        """Issue an access/refresh token pair for an already validated principal."""
        self.logger.info("Generating tokens for user: %s", principal.email)
        claims = token_claims(principal)

        access_token = self.issuer.sign(claims, TokenKind.access, self.access_ttl)

        refresh_jti = uuid.uuid4().hex
        refresh_token = self.issuer.sign(
            {**claims, "jti": refresh_jti}, TokenKind.refresh, self.refresh_ttl
        )
        if self.registry is not None:
            self.registry.record(
                refresh_jti,
                principal.id,
                datetime.now(timezone.utc) + self.refresh_ttl,
            )

        user = principal if isinstance(principal, PrincipalView) else principal_view(principal)
        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            user=user,
        )

    def authenticate(self, email: str, password: str) -> TokenResponse:
        """Validate credentials and log in.

        Raises:
            AuthenticationError: If credentials are invalid.
        """
        principal = self.validate_credentials(email, password)
        if principal is None:
            raise AuthenticationError("Invalid email or password")
        return self.login(principal)

    def refresh_access_token(self, refresh_token: str) -> AccessTokenResponse:
        """Mint a new access token from the person's current database state."""
        self.logger.info("Processing refresh token request")
        try:
            payload = self.issuer.verify(refresh_token, TokenKind.refresh)
        except TokenError as e:
            self.logger.error("Invalid refresh token: %s", e)
            raise AuthenticationError("Invalid refresh token") from e

        if self.registry is not None and not self.registry.is_active(payload.get("jti")):
            self.logger.warning("Refresh token %s is revoked or unknown", payload.get("jti"))
            raise AuthenticationError("Invalid refresh token")

        person = self.validate_principal_by_id(payload["sub"])
        if person is None:
            raise AuthenticationError("Invalid refresh token")

        access_token = self.issuer.sign(token_claims(person), TokenKind.access, self.access_ttl)
        return AccessTokenResponse(access_token=access_token)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """Verify an access token. Raises ``TokenError``."""
        return self.issuer.verify(token, TokenKind.access)

    def validate_principal_by_id(self, person_id: str) -> Optional[Person]:
        """Resolve a live person by id. Never raises."""
        self.logger.debug("Validating user by ID: %s", person_id)
        try:
            person = self.users.find_by_id(person_id)
        except SQLAlchemyError as e:
            self.users.db.rollback()
            self.logger.warning("Lookup of user %s failed: %s", person_id, e)
            return None
        if person is None:
            self.logger.warning("User not found: %s", person_id)
        return person

    def logout(self, person_id: str) -> int:
        """Revoke the person's refresh tokens. Without a registry this is a no-op."""
        if self.registry is None:
            return 0
        return self.registry.revoke_all(person_id)
