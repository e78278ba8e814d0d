# Overview: Role-based authorization package.
# Re-exports the role enums, the action table, and authorize().

from .categories import PermissionCategory
from .definitions import (
    PERMISSION_DEFINITIONS,
    USER_PERMISSIONS,
    BUSINESS_PERMISSIONS,
    PLATFORM_PERMISSIONS,
    BUSINESS_SCOPED_ACTIONS,
    LIST_USERS,
    CREATE_USER,
    VIEW_USER,
    UPDATE_USER_STATUS,
    DELETE_USER,
    MANAGE_BUSINESS,
    MANAGE_PRODUCTS,
    MANAGE_CATEGORIES,
    MANAGE_CUSTOMERS,
    CREATE_SALE,
    VIEW_SALES,
    MANAGE_EXPENSES,
    VIEW_BUSINESS_ANALYTICS,
    VIEW_MERCHANT_OVERVIEW,
    VIEW_PLATFORM_OVERVIEW,
    VIEW_PLATFORM_GROWTH,
)
from .roles import Role, UserStatus, DEFAULT_ROLE_PERMISSIONS, PROVISIONING_RULES, MANAGED_ROLES
from .helpers import (
    Decision,
    authorize,
    managed_roles_for,
    role_permissions,
    get_all_permission_codes,
    get_permissions_by_category,
    get_permission_definition,
    validate_permission_code,
)

__all__ = [
    "PermissionCategory",
    "PERMISSION_DEFINITIONS",
    "USER_PERMISSIONS",
    "BUSINESS_PERMISSIONS",
    "PLATFORM_PERMISSIONS",
    "BUSINESS_SCOPED_ACTIONS",
    "LIST_USERS",
    "CREATE_USER",
    "VIEW_USER",
    "UPDATE_USER_STATUS",
    "DELETE_USER",
    "MANAGE_BUSINESS",
    "MANAGE_PRODUCTS",
    "MANAGE_CATEGORIES",
    "MANAGE_CUSTOMERS",
    "CREATE_SALE",
    "VIEW_SALES",
    "MANAGE_EXPENSES",
    "VIEW_BUSINESS_ANALYTICS",
    "VIEW_MERCHANT_OVERVIEW",
    "VIEW_PLATFORM_OVERVIEW",
    "VIEW_PLATFORM_GROWTH",
    "Role",
    "UserStatus",
    "DEFAULT_ROLE_PERMISSIONS",
    "PROVISIONING_RULES",
    "MANAGED_ROLES",
    "Decision",
    "authorize",
    "managed_roles_for",
    "role_permissions",
    "get_all_permission_codes",
    "get_permissions_by_category",
    "get_permission_definition",
    "validate_permission_code",
]
