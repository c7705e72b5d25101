"""Person model: the principal that authenticates."""

import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, UniqueConstraint, func
from sqlalchemy.orm import relationship

from saas_backend.db.base import Base, SoftDeleteMixin, new_id


class PersonStatus(str, enum.Enum):
    active = "Active"
    inactive = "Inactive"


class Person(SoftDeleteMixin, Base):
    """Platform user holding a reference to exactly one role."""
    __tablename__ = "persons"
    __table_args__ = (
        UniqueConstraint("email", "live", name="uq_persons_email_live"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, index=True)
    given_name = Column(String(255), nullable=False)
    family_name = Column(String(255), nullable=False)
    telephone = Column(String(50), nullable=True)
    password_hash = Column(String(255), nullable=False)
    status = Column(
        Enum(PersonStatus, name="person_status", values_callable=lambda e: [m.value for m in e]),
        default=PersonStatus.active,
        nullable=False,
        index=True,
    )
    role_id = Column(String(36), ForeignKey("roles.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    role = relationship("Role", lazy="joined")
