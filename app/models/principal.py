"""Authenticated principal passed explicitly to every service call."""

from dataclasses import dataclass

from app.models.role import UserRole


@dataclass(frozen=True)
class Principal:
    """
    Identity making the current request.

    Built once per request by the session resolver from the bearer token and
    the stored user row. The tenant_id here is the only tenant identifier the
    services ever use for scoping; nothing client-supplied replaces it.

    Attributes:
        user_id: Authenticated user's id
        tenant_id: Tenant the user belongs to
        role: The user's current role (read from the store, not the token)
    """

    user_id: int
    tenant_id: int
    role: UserRole

    def is_admin(self) -> bool:
        """Check if principal is a tenant ADMIN."""
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<Principal(user_id={self.user_id}, tenant_id={self.tenant_id}, role={self.role.value})>"
