"""Role service: CRUD, default permissions and name uniqueness."""

from typing import List, Optional

from saas_backend.core.exceptions import ResourceConflictError, ResourceNotFoundError
from saas_backend.core.permissions import RoleName, get_default_permissions
from saas_backend.models.role import Role
from saas_backend.schemas.schemas import RoleCreate, RoleOut, RoleUpdate, role_out
from saas_backend.services.base import EntityService


class RoleService(EntityService):
    """Manages roles. Role names are unique among live roles."""

    def create(self, data: RoleCreate) -> Role:
        """Create a role.

        An absent or empty permission list is replaced by the role's
        defaults. An explicit list is stored as given and never merged.
        """
        role_name = RoleName(data.role_name)
        self.logger.info("Creating new role: %s", role_name.value)

        if self.find_by_name(role_name) is not None:
            raise ResourceConflictError(f"Role with name '{role_name.value}' already exists.")

        if data.permissions:
            permissions = list(dict.fromkeys(data.permissions))
        else:
            permissions = get_default_permissions(role_name)

        role = Role(role_name=role_name)
        role.permissions = permissions
        self.db.add(role)
        self._commit(f"Role with name '{role_name.value}' already exists.")
        self.db.refresh(role)

        self._invalidate("roles:*")
        self.logger.info("Successfully created role with id: %s", role.id)
        return role

    def list(self, page: int = 1, page_size: int = 10) -> List[RoleOut]:
        """List live roles, served from cache when possible."""
        key = f"roles:all:{page}:{page_size}"
        if self.cache is not None:
            cached = self.cache.get_json(key)
            if cached is not None:
                return [RoleOut.model_validate(item) for item in cached]

        roles = (
            self.db.query(Role)
            .filter(Role.is_deleted.is_(False))
            .order_by(Role.created_at, Role.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        result = [role_out(r) for r in roles]
        if self.cache is not None:
            self.cache.set_json(key, [r.model_dump(mode="json") for r in result])
        return result

    def get(self, role_id: str) -> Role:
        """Get a live role by id."""
        role = self.db.get(Role, role_id)
        if role is None or role.is_deleted:
            raise ResourceNotFoundError(f"Role with id {role_id} not found")
        return role

    def find_by_name(self, role_name) -> Optional[Role]:
        return (
            self.db.query(Role)
            .filter(Role.role_name == RoleName(role_name), Role.is_deleted.is_(False))
            .first()
        )

    def update(self, role_id: str, data: RoleUpdate) -> Role:
        """Rename a role and/or replace its permission list."""
        self.logger.info("Updating role with id: %s", role_id)
        role = self.get(role_id)

        if data.role_name is not None and RoleName(data.role_name) != role.role_name:
            clash = self.find_by_name(data.role_name)
            if clash is not None and clash.id != role.id:
                raise ResourceConflictError("Role name already exists")
            role.role_name = RoleName(data.role_name)

        if data.permissions is not None:
            role.permissions = list(dict.fromkeys(data.permissions))

        self._commit("Role name already exists")
        self.db.refresh(role)
        self._invalidate("roles:*")
        self.logger.info("Successfully updated role with id: %s", role_id)
        return role

    def soft_delete(self, role_id: str) -> Role:
        self.logger.info("Soft deleting role with id: %s", role_id)
        role = self.get(role_id)
        role.soft_delete()
        self.db.commit()
        self.db.refresh(role)
        self._invalidate("roles:*")
        self.logger.info("Successfully soft deleted role with id: %s", role_id)
        return role

    def restore(self, role_id: str) -> Role:
        """Restore a soft-deleted role. Restoring a live role changes nothing."""
        self.logger.info("Restoring role with id: %s", role_id)
        role = self.db.get(Role, role_id)
        if role is None:
            raise ResourceNotFoundError(f"Role with id {role_id} not found")

        if not role.is_deleted:
            self.logger.warning("Role with id %s is not deleted, no action needed", role_id)
            return role

        if self.find_by_name(role.role_name) is not None:
            raise ResourceConflictError(
                f"Role with name '{role.role_name.value}' already exists."
            )

        role.restore()
        self._commit(f"Role with name '{role.role_name.value}' already exists.")
        self.db.refresh(role)
        self._invalidate("roles:*")
        self.logger.info("Successfully restored role with id: %s", role_id)
        return role
