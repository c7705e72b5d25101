"""Route access table.

Every route guarded by ``RequireAccess`` is listed here by id. The table is
read when a request is dispatched, so tests and deployments can swap an
entry without touching the routers. An empty requirement means "any
authenticated person".
"""

from typing import Dict

from saas_backend.core.guards import AccessRequirement, requires
from saas_backend.core.permissions import Permission, RoleName

AUTHENTICATED = AccessRequirement()

ROUTE_ACCESS: Dict[str, AccessRequirement] = {
    # Persons
    "users.list": AUTHENTICATED,
    "users.read": AUTHENTICATED,
    "users.create": requires(Permission.manage_user_roles),
    "users.update": requires(Permission.manage_user_roles),
    "users.delete": requires(Permission.manage_user_roles),
    "users.restore": requires(Permission.manage_user_roles),

    # Roles
    "roles.list": AUTHENTICATED,
    "roles.read": AUTHENTICATED,
    "roles.create": requires(RoleName.admin),
    "roles.update": requires(RoleName.admin),
    "roles.delete": requires(RoleName.admin),
    "roles.restore": requires(RoleName.admin),

    # Businesses
    "businesses.list": requires(RoleName.admin, RoleName.manager),
    "businesses.read": requires(RoleName.admin, RoleName.manager),
    "businesses.by_founder": requires(RoleName.admin, RoleName.manager),
    "businesses.create": requires(Permission.manage_business_details),
    "businesses.update": requires(Permission.manage_business_details),
    "businesses.delete": requires(Permission.manage_business_details),
    "businesses.restore": requires(Permission.manage_business_details),
}
