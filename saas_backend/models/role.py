"""Role model for RBAC."""

import json

from sqlalchemy import Column, String, Text, DateTime, Enum, UniqueConstraint, func

from saas_backend.core.permissions import RoleName, parse_permissions
from saas_backend.db.base import Base, SoftDeleteMixin, new_id


class Role(SoftDeleteMixin, Base):
    """Named role with a JSON list of permission tokens."""
    __tablename__ = "roles"
    __table_args__ = (
        UniqueConstraint("role_name", "live", name="uq_roles_role_name_live"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    role_name = Column(
        Enum(RoleName, name="role_name", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    permissions_json = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def permissions(self):
        return parse_permissions(json.loads(self.permissions_json or "[]"))

    @permissions.setter
    def permissions(self, values) -> None:
        self.permissions_json = json.dumps([getattr(v, "value", v) for v in values])
