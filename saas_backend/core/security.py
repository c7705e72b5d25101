"""Password hashing and JWT signing/verification."""

import enum
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
from fastapi.security import HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from saas_backend.core.config import settings
from saas_backend.core.exceptions import ValidationError

# JWT bearer scheme
security_scheme = HTTPBearer(auto_error=False)


class TokenKind(str, enum.Enum):
    access = "access"
    refresh = "refresh"


class TokenError(Exception):
    """Raised when a token cannot be verified."""
    pass


class TokenExpiredError(TokenError):
    pass


class PasswordHasher:
    """bcrypt hashing with a configurable work factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Raises:
            ValidationError: The password is longer than bcrypt's 72-byte input limit.
        """
        encoded = password.encode("utf-8")
        if len(encoded) > 72:
            raise ValidationError("Password must be at most 72 bytes long")
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(encoded, salt).decode("utf-8")

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash. Malformed hashes never match."""
        try:
            return bcrypt.checkpw(
                plain_password.encode("utf-8"), hashed_password.encode("utf-8")
            )
        except (ValueError, TypeError):
            return False


class TokenIssuer:
    """Signs and verifies HS256 JWTs that carry a ``type`` claim."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def sign(
        self,
        claims: Dict[str, Any],
        kind: TokenKind,
        expires_delta: timedelta,
    ) -> str:
        """Create a signed token of the given kind.

        A ``jti`` already present in ``claims`` is kept; otherwise one is
        generated.
        """
        now = datetime.now(timezone.utc)
        to_encode = dict(claims)
        to_encode.setdefault("jti", uuid.uuid4().hex)
        to_encode.update({
            "type": kind.value,
            "iat": now,
            "exp": now + expires_delta,
        })
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str, expected_kind: TokenKind) -> Dict[str, Any]:
        """Decode a token, checking signature, expiry, and kind.

        Raises:
            TokenExpiredError: The token is past its ``exp``.
            TokenError: The token is malformed, badly signed, lacks a subject,
                or is of the wrong kind.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JWTError as e:
            raise TokenError(f"Invalid token: {e}") from e

        if payload.get("type") != expected_kind.value:
            raise TokenError(
                f"Expected {expected_kind.value} token, got {payload.get('type')}"
            )
        if not payload.get("sub"):
            raise TokenError("Token has no subject")
        return payload


password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
token_issuer = TokenIssuer(settings.JWT_SECRET, settings.JWT_ALGORITHM)
