"""Refresh-token registry: remembers issued refresh tokens so logout can revoke them."""

from datetime import datetime, timezone

from saas_backend.db.base import utcnow
from saas_backend.models.refresh_token import RefreshToken
from saas_backend.services.base import EntityService


class TokenRegistry(EntityService):
    """Tracks refresh tokens by their ``jti`` claim."""

    def record(self, jti: str, person_id: str, expires_at: datetime) -> RefreshToken:
        if expires_at.tzinfo is not None:
            expires_at = expires_at.astimezone(timezone.utc).replace(tzinfo=None)
        entry = RefreshToken(person_id=person_id, jti=jti, expires_at=expires_at)
        self.db.add(entry)
        self.db.commit()
        return entry

    def is_active(self, jti: str) -> bool:
        """True if the token was issued here, is unrevoked, and unexpired."""
        if not jti:
            return False
        entry = (
            self.db.query(RefreshToken)
            .filter(RefreshToken.jti == jti, RefreshToken.revoked_at.is_(None))
            .first()
        )
        return entry is not None and entry.expires_at > utcnow()

    def revoke_all(self, person_id: str) -> int:
        """Revoke every outstanding refresh token of a person."""
        count = (
            self.db.query(RefreshToken)
            .filter(RefreshToken.person_id == person_id, RefreshToken.revoked_at.is_(None))
            .update({"revoked_at": utcnow()}, synchronize_session=False)
        )
        self.db.commit()
        self.logger.info("Revoked %d refresh token(s) for person %s", count, person_id)
        return count
