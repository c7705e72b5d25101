"""Issued refresh tokens, tracked so logout can revoke them."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func

from saas_backend.db.base import Base


class RefreshToken(Base):
    """Refresh token issued at login, identified by its ``jti`` claim."""
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    person_id = Column(String(36), ForeignKey("persons.id", ondelete="CASCADE"), nullable=False, index=True)
    jti = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
