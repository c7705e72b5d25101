"""User service, the credential store for persons."""

from typing import List, Optional

from saas_backend.core.exceptions import ResourceConflictError, ResourceNotFoundError
from saas_backend.core.security import PasswordHasher, password_hasher
from saas_backend.models.person import Person, PersonStatus
from saas_backend.models.role import Role
from saas_backend.schemas.schemas import PersonCreate, PersonUpdate
from saas_backend.services.base import EntityService


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService(EntityService):
    """Persists persons. Deleted persons are invisible unless asked for."""

    def __init__(self, db, cache=None, logger=None, hasher: Optional[PasswordHasher] = None):
        super().__init__(db, cache=cache, logger=logger)
        self.hasher = hasher or password_hasher

    # ---- lookups ----
    def find_by_email(self, email: str, include_deleted: bool = False) -> Optional[Person]:
        query = self.db.query(Person).filter(Person.email == normalize_email(email))
        if not include_deleted:
            query = query.filter(Person.is_deleted.is_(False))
        # Several deleted rows may share an email; prefer the live one.
        return query.order_by(Person.is_deleted).first()

    def find_by_id(self, person_id: str, include_deleted: bool = False) -> Optional[Person]:
        person = self.db.get(Person, person_id)
        if person is None or (person.is_deleted and not include_deleted):
            return None
        return person

    def get(self, person_id: str) -> Person:
        person = self.find_by_id(person_id)
        if person is None:
            raise ResourceNotFoundError(f"Person with id {person_id} not found")
        return person

    def list(self, page: int = 1, page_size: int = 10) -> List[Person]:
        return (
            self.db.query(Person)
            .filter(Person.is_deleted.is_(False))
            .order_by(Person.created_at, Person.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )

    def verify_credentials(self, email: str, password: str) -> Optional[Person]:
        """Return the live person whose password matches, else None."""
        person = self.find_by_email(email)
        if person is None:
            return None
        if not self.hasher.verify(password, person.password_hash):
            return None
        return person

    # ---- mutations ----
    def create(self, data: PersonCreate) -> Person:
        email = normalize_email(data.email)
        self.logger.info("Creating new person with email: %s", email)

        if self.find_by_email(email) is not None:
            raise ResourceConflictError("Email already exists")

        role = self._live_role(data.role_id)
        person = Person(
            email=email,
            given_name=data.given_name,
            family_name=data.family_name,
            telephone=data.telephone,
            password_hash=self.hasher.hash(data.password),
            status=data.status or PersonStatus.active,
            role_id=role.id,
        )
        self.db.add(person)
        self._commit("Email already exists")
        self.db.refresh(person)
        self.logger.info("Successfully created person with id: %s", person.id)
        return person

    def update(self, person_id: str, data: PersonUpdate) -> Person:
        self.logger.info("Updating person with id: %s", person_id)
        person = self.get(person_id)
        changes = data.model_dump(exclude_unset=True)

        email = changes.pop("email", None)
        if email is not None:
            email = normalize_email(email)
            clash = self.find_by_email(email)
            if clash is not None and clash.id != person.id:
                raise ResourceConflictError("Email already exists")
            person.email = email

        password = changes.pop("password", None)
        if password:
            person.password_hash = self.hasher.hash(password)

        role_id = changes.pop("role_id", None)
        if role_id:
            person.role_id = self._live_role(role_id).id

        for field, value in changes.items():
            if value is None and field in ("given_name", "family_name", "status"):
                continue
            setattr(person, field, value)

        self._commit("Email already exists")
        # Drop the cached relationship so a new role_id is loaded.
        self.db.expire(person)
        self.db.refresh(person)
        self._invalidate_founder_views()
        self.logger.info("Successfully updated person with id: %s", person_id)
        return person

    def soft_delete(self, person_id: str) -> Person:
        self.logger.info("Soft deleting person with id: %s", person_id)
        person = self.get(person_id)
        person.soft_delete()
        self.db.commit()
        self.db.refresh(person)
        self._invalidate_founder_views()
        self.logger.info("Successfully soft deleted person with id: %s", person_id)
        return person

    def restore(self, person_id: str) -> Person:
        """Restore a soft-deleted person. Restoring a live person changes nothing."""
        self.logger.info("Restoring person with id: %s", person_id)
        person = self.find_by_id(person_id, include_deleted=True)
        if person is None:
            raise ResourceNotFoundError(f"Person with id {person_id} not found")

        if not person.is_deleted:
            self.logger.warning("Person with id %s is not deleted, no action needed", person_id)
            return person

        if self.find_by_email(person.email) is not None:
            raise ResourceConflictError("Email already exists")

        person.restore()
        self._commit("Email already exists")
        self.db.refresh(person)
        self._invalidate_founder_views()
        self.logger.info("Successfully restored person with id: %s", person_id)
        return person

    def _invalidate_founder_views(self) -> None:
        # Cached business listings embed a founder summary.
        self._invalidate("businesses:*")

    def _live_role(self, role_id: str) -> Role:
        role = self.db.get(Role, role_id)
        if role is None or role.is_deleted:
            raise ResourceNotFoundError(f"Role with id {role_id} not found")
        return role
