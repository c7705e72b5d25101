"""Business model: a tenant founded by a person."""

import json

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship

from saas_backend.db.base import Base, SoftDeleteMixin, new_id


class Business(SoftDeleteMixin, Base):
    """Local business with a flattened postal address."""
    __tablename__ = "businesses"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    street_address = Column(String(255), nullable=True)
    address_locality = Column(String(255), nullable=True)
    address_region = Column(String(255), nullable=True)
    postal_code = Column(String(32), nullable=True)
    address_country = Column(String(100), nullable=True)
    telephone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    url = Column(String(500), nullable=True)
    same_as_json = Column(Text, nullable=True)  # JSON list of profile URLs
    opening_hours_json = Column(Text, nullable=True)  # JSON list, e.g. "Mo-Fr 09:00-17:00"
    founder_id = Column(String(36), ForeignKey("persons.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    founder = relationship("Person", lazy="joined")

    @property
    def same_as(self):
        return json.loads(self.same_as_json) if self.same_as_json else []

    @same_as.setter
    def same_as(self, values) -> None:
        self.same_as_json = json.dumps(list(values)) if values else None

    @property
    def opening_hours(self):
        return json.loads(self.opening_hours_json) if self.opening_hours_json else []

    @opening_hours.setter
    def opening_hours(self, values) -> None:
        self.opening_hours_json = json.dumps(list(values)) if values else None
