"""Role names, permission tokens, and the default role -> permission table."""

import enum
from typing import List


class RoleName(str, enum.Enum):
    admin = "Admin"
    manager = "Manager"
    assistant = "Assistant"


class Permission(str, enum.Enum):
    # Admin scope
    manage_user_roles = "user_role_management.manage"
    manage_business_details = "business_details.manage"
    manage_customers_admin = "customers.manage_admin"
    access_customer_chat_full_admin = "customer_chat.access_full_admin"
    manage_external_integrations = "external_integrations.manage"

    # Manager scope
    manage_customers_manager = "customers.manage_manager"
    access_customer_chat_full_manager = "customer_chat.access_full_manager"

    # Assistant scope
    access_customer_chat_read_write = "customer_chat.access_read_write"


# Explicit table, not a hierarchy: Admin gets admin-scoped tokens rather than
# Manager's.
DEFAULT_PERMISSIONS = {
    RoleName.admin: (
        Permission.manage_user_roles,
        Permission.manage_business_details,
        Permission.manage_customers_admin,
        Permission.access_customer_chat_full_admin,
        Permission.manage_external_integrations,
    ),
    RoleName.manager: (
        Permission.manage_customers_manager,
        Permission.access_customer_chat_full_manager,
    ),
    RoleName.assistant: (
        Permission.access_customer_chat_read_write,
    ),
}


def get_default_permissions(role_name) -> List[Permission]:
    """Return the default permissions for a role name.

    Accepts a ``RoleName`` or its string value. Unknown names get an empty
    list instead of an error.
    """
    try:
        key = RoleName(role_name)
    except ValueError:
        return []
    return list(DEFAULT_PERMISSIONS.get(key, ()))


def parse_permissions(values) -> List[Permission]:
    """Convert stored permission strings back to ``Permission`` members.

    Values that are no longer valid permissions are dropped.
    """
    result = []
    for value in values or []:
        try:
            result.append(Permission(value))
        except ValueError:
            continue
    return result
