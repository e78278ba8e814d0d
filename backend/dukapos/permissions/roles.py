# Overview: Closed role and status enums plus the default (role, action) table.

from enum import Enum

from .definitions import (
    BUSINESS_SCOPED_ACTIONS,
    LIST_USERS,
    CREATE_USER,
    VIEW_USER,
    UPDATE_USER_STATUS,
    DELETE_USER,
    VIEW_MERCHANT_OVERVIEW,
    VIEW_PLATFORM_OVERVIEW,
    VIEW_PLATFORM_GROWTH,
)


class Role(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    APP_STAFF = "APP_STAFF"
    SPONSOR = "SPONSOR"
    MERCHANT = "MERCHANT"
    STAFF = "STAFF"

    @classmethod
    def parse(cls, value):
        """Role for a raw string, or None when it is not a known role."""
        try:
            return cls(value)
        except ValueError:
            return None


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            return None


# Every role may work inside a business it owns; ownership is checked separately.
DEFAULT_ROLE_PERMISSIONS = {
    Role.SUPER_ADMIN: {
        LIST_USERS,
        CREATE_USER,
        VIEW_USER,
        UPDATE_USER_STATUS,
        DELETE_USER,
        VIEW_MERCHANT_OVERVIEW,
        VIEW_PLATFORM_OVERVIEW,
        VIEW_PLATFORM_GROWTH,
        *BUSINESS_SCOPED_ACTIONS,
    },
    Role.APP_STAFF: {
        LIST_USERS,
        CREATE_USER,
        VIEW_USER,
        UPDATE_USER_STATUS,
        VIEW_MERCHANT_OVERVIEW,
        VIEW_PLATFORM_GROWTH,
        *BUSINESS_SCOPED_ACTIONS,
    },
    Role.SPONSOR: set(BUSINESS_SCOPED_ACTIONS),
    Role.MERCHANT: set(BUSINESS_SCOPED_ACTIONS),
    Role.STAFF: set(BUSINESS_SCOPED_ACTIONS),
}

# Roles each actor may provision through CREATE_USER.
PROVISIONING_RULES = {
    Role.SUPER_ADMIN: frozenset({Role.APP_STAFF, Role.SPONSOR}),
    Role.APP_STAFF: frozenset({Role.MERCHANT}),
}

# Roles whose accounts each actor may list, view, and change status of.
# None means unrestricted.
MANAGED_ROLES = {
    Role.SUPER_ADMIN: None,
    Role.APP_STAFF: frozenset({Role.MERCHANT}),
}
