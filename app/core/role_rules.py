"""
Role invariants for tenant user administration.

Rules:
- Only an ADMIN may list, invite, re-role or delete tenant users.
- A principal never changes its own role or deletes itself through the
  admin endpoints (profile edits go through /users/me instead).
- A tenant always keeps at least one ADMIN.

The can_* predicates are pure; the ensure_* helpers raise ForbiddenException
and are called by the user service before any mutation.
"""

import logging

from app.core.exceptions import ForbiddenException
from app.models.principal import Principal
from app.models.role import UserRole

logger = logging.getLogger(__name__)


def can_demote(target_user_id: int, target_current_role: UserRole, tenant_admin_count: int) -> bool:
    """False when the target is the tenant's only ADMIN."""
    return not (target_current_role == UserRole.ADMIN and tenant_admin_count == 1)


def can_delete(target_user_id: int, target_current_role: UserRole, tenant_admin_count: int) -> bool:
    """Same rule as demotion: the last ADMIN cannot be removed."""
    return can_demote(target_user_id, target_current_role, tenant_admin_count)


def can_act_on_self(actor_id: int, target_id: int) -> bool:
    """False when actor and target are the same user."""
    return actor_id != target_id


def ensure_admin(principal: Principal) -> None:
    if not principal.is_admin():
        logger.warning(
            "Non-admin attempted user administration",
            extra={"tenant_id": principal.tenant_id, "user_id": principal.user_id},
        )
        raise ForbiddenException("Admin privileges required")


def ensure_not_self(principal: Principal, target_id: int, action: str) -> None:
    """
    Args:
        action: "role" or "delete", selects the error message
    """
    if can_act_on_self(principal.user_id, target_id):
        return

    logger.warning(
        "Self-%s attempt rejected",
        action,
        extra={"tenant_id": principal.tenant_id, "user_id": principal.user_id},
    )
    if action == "role":
        raise ForbiddenException("You cannot change your own role")
    raise ForbiddenException("You cannot delete yourself")


def ensure_can_demote(
    principal: Principal, target_id: int, target_role: UserRole, admin_count: int
) -> None:
    if not can_demote(target_id, target_role, admin_count):
        logger.warning(
            "Demotion of last admin rejected",
            extra={"tenant_id": principal.tenant_id, "target_user_id": target_id},
        )
        raise ForbiddenException("Cannot demote the last administrator of the tenant")


def ensure_can_delete(
    principal: Principal, target_id: int, target_role: UserRole, admin_count: int
) -> None:
    if not can_delete(target_id, target_role, admin_count):
        logger.warning(
            "Deletion of last admin rejected",
            extra={"tenant_id": principal.tenant_id, "target_user_id": target_id},
        )
        raise ForbiddenException("Cannot delete the last administrator of the tenant")
