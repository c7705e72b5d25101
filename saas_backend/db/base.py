"""Declarative base and the soft-delete mixin shared by all entities."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what DateTime columns hand back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SoftDeleteMixin:
    """Logical deletion via flag + timestamp.

    ``live`` is True for live rows and NULL for deleted ones. Unique
    constraints declared over ``(key, live)`` therefore only bind live rows,
    since NULLs never compare equal.
    """

    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    deleted_at = Column(DateTime, nullable=True)
    live = Column(Boolean, default=True, nullable=True)

    def soft_delete(self) -> None:
        self.is_deleted = True
        self.deleted_at = utcnow()
        self.live = None

    def restore(self) -> None:
        self.is_deleted = False
        self.deleted_at = None
        self.live = True
