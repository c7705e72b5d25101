"""Seed default roles into the database."""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from saas_backend.core.permissions import RoleName, get_default_permissions
from saas_backend.models.role import Role


def seed_default_roles(db: Session, logger: Optional[logging.Logger] = None) -> List[RoleName]:
    """Insert each default role that has no live counterpart.

    A failure on one role is logged and the rest are still attempted.
    Returns the names that were created.
    """
    logger = logger or logging.getLogger(__name__)
    logger.info("Starting role seeding process...")
    created = []

    for role_name in RoleName:
        try:
            existing = (
                db.query(Role)
                .filter(Role.role_name == role_name, Role.is_deleted.is_(False))
                .first()
            )
            if existing is not None:
                logger.info('Role "%s" already exists. Skipping creation.', role_name.value)
                continue

            role = Role(role_name=role_name)
            role.permissions = get_default_permissions(role_name)
            db.add(role)
            db.commit()
            created.append(role_name)
            logger.info('Role "%s" created successfully with id: %s.', role_name.value, role.id)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error('Error seeding role "%s": %s', role_name.value, e, exc_info=True)

    logger.info("Role seeding process finished.")
    return created
