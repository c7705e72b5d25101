from sqlalchemy.exc import SQLAlchemyError

from saas_backend.core.config import settings
from saas_backend.core.permissions import RoleName, get_default_permissions
from saas_backend.db.seeds.seed_admin import seed_admin
from saas_backend.db.seeds.seed_roles import seed_default_roles
from saas_backend.models.role import Role
from saas_backend.services.role_service import RoleService
from saas_backend.services.user_service import UserService


def test_seed_creates_each_default_role(db):
    created = seed_default_roles(db)
    assert created == list(RoleName)
    for name in RoleName:
        role = RoleService(db).find_by_name(name)
        assert role.permissions == get_default_permissions(name)


def test_seed_is_idempotent(db):
    seed_default_roles(db)
    assert seed_default_roles(db) == []
    assert db.query(Role).count() == 3


def test_seed_recreates_soft_deleted_role(db):
    seed_default_roles(db)
    service = RoleService(db)
    service.soft_delete(service.find_by_name(RoleName.manager).id)
    assert seed_default_roles(db) == [RoleName.manager]


def test_seed_continues_after_a_failure(db, monkeypatch):
    real_commit = db.commit
    calls = {"n": 0}

    def flaky_commit():
        calls["n"] += 1
        if calls["n"] == 1:
            raise SQLAlchemyError("disk full")
        real_commit()

    monkeypatch.setattr(db, "commit", flaky_commit)
    created = seed_default_roles(db)
    monkeypatch.undo()

    assert created == [RoleName.manager, RoleName.assistant]
    assert RoleService(db).find_by_name(RoleName.admin) is None


def test_seed_admin(db):
    seed_default_roles(db)
    admin = seed_admin(db)
    assert admin.email == settings.ADMIN_EMAIL
    assert admin.role.role_name == RoleName.admin
    assert UserService(db).verify_credentials(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD) is admin
    assert seed_admin(db) is None


def test_seed_admin_needs_roles(db):
    assert seed_admin(db) is None
