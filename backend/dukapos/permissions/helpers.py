# Overview: Utility functions for action lookups and the authorize() decision.

from dataclasses import dataclass

from .definitions import (
    PERMISSION_DEFINITIONS,
    CREATE_USER,
    LIST_USERS,
    VIEW_USER,
    UPDATE_USER_STATUS,
)
from .roles import Role, DEFAULT_ROLE_PERMISSIONS, PROVISIONING_RULES, MANAGED_ROLES


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


def get_all_permission_codes():
    """Get list of all action codes."""
    return [perm[0] for perm in PERMISSION_DEFINITIONS]


def get_permissions_by_category(category):
    """Get all actions in a category."""
    return [perm for perm in PERMISSION_DEFINITIONS if perm[3] == category]


def get_permission_definition(code):
    """Get full definition for an action code."""
    for perm in PERMISSION_DEFINITIONS:
        if perm[0] == code:
            return {
                "code": perm[0],
                "name": perm[1],
                "description": perm[2],
                "category": perm[3],
            }
    return None


def validate_permission_code(code):
    """Check if an action code is valid."""
    return code in get_all_permission_codes()


def role_permissions(role) -> set[str]:
    parsed = Role.parse(role)
    if parsed is None:
        return set()
    return set(DEFAULT_ROLE_PERMISSIONS.get(parsed, set()))


def authorize(actor_role, action: str, target_role=None) -> Decision:
    """
    Decide whether a role may perform an action, optionally on a target role.

    The target is the role being provisioned (CREATE_USER) or the role of the
    account being listed/viewed/changed (LIST_USERS, VIEW_USER,
    UPDATE_USER_STATUS). Unknown roles and unknown actions are denied.
    """
    role = Role.parse(actor_role)
    if role is None:
        return Decision(False, "Unknown role")

    if not validate_permission_code(action):
        return Decision(False, f"Unknown action {action}")

    if action not in DEFAULT_ROLE_PERMISSIONS.get(role, set()):
        return Decision(False, f"Role {role.value} may not perform {action}")

    if action == CREATE_USER:
        target = Role.parse(target_role)
        if target is None:
            return Decision(False, "Unknown target role")
        if target not in PROVISIONING_RULES.get(role, frozenset()):
            return Decision(False, f"Role {role.value} may not create {target.value} users")
        return Decision(True)

    if action in (LIST_USERS, VIEW_USER, UPDATE_USER_STATUS) and target_role is not None:
        target = Role.parse(target_role)
        if target is None:
            return Decision(False, "Unknown target role")
        managed = MANAGED_ROLES.get(role, frozenset())
        if managed is not None and target not in managed:
            return Decision(False, f"Role {role.value} may not manage {target.value} users")

    return Decision(True)


def managed_roles_for(actor_role):
    """Roles the actor may list; None means all roles."""
    role = Role.parse(actor_role)
    if role is None:
        return frozenset()
    return MANAGED_ROLES.get(role, frozenset())
