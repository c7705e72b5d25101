"""Shared plumbing for the session-backed services."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from saas_backend.core.exceptions import ResourceConflictError


class EntityService:
    """Holds the request session, the cache, and an injected logger."""

    def __init__(
        self,
        db: Session,
        cache=None,
        logger: Optional[logging.Logger] = None,
    ):
        self.db = db
        self.cache = cache
        self.logger = logger or logging.getLogger(type(self).__module__)

    def _commit(self, conflict_message: str) -> None:
        """Commit, turning a unique-constraint violation into a conflict.

        The constraint is the authoritative check; the service-level
        pre-checks only give a friendlier answer in the common case.
        """
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            self.logger.warning("Unique constraint violated: %s", e.orig)
            raise ResourceConflictError(conflict_message) from e

    def _invalidate(self, pattern: str) -> None:
        if self.cache is not None:
            self.cache.invalidate_pattern(pattern)
