"""Seed the first admin person from env vars."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from saas_backend.core.config import settings
from saas_backend.core.permissions import RoleName
from saas_backend.models.person import Person
from saas_backend.schemas.schemas import PersonCreate
from saas_backend.services.role_service import RoleService
from saas_backend.services.user_service import UserService


def seed_admin(db: Session, logger: Optional[logging.Logger] = None) -> Optional[Person]:
    """Create the admin person if not already present. Run after seeding roles."""
    logger = logger or logging.getLogger(__name__)
    admin_role = RoleService(db, logger=logger).find_by_name(RoleName.admin)
    if admin_role is None:
        logger.warning("Admin role not found. Run seed_default_roles first.")
        return None

    users = UserService(db, logger=logger)
    if users.find_by_email(settings.ADMIN_EMAIL) is not None:
        logger.info("Admin '%s' already exists, skipping.", settings.ADMIN_EMAIL)
        return None

    admin = users.create(PersonCreate(
        email=settings.ADMIN_EMAIL,
        password=settings.ADMIN_PASSWORD,
        given_name=settings.ADMIN_GIVEN_NAME,
        family_name=settings.ADMIN_FAMILY_NAME,
        role_id=admin_role.id,
    ))
    logger.info("Created admin: %s", admin.email)
    return admin
