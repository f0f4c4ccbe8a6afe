"""User role enum for role-based access control."""

from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    """
    Roles a user can hold inside their tenant.

    Permissions:
    - ADMIN: Everything MEMBER can do, plus list/invite users, change roles
      and delete users of the same tenant
    - MEMBER: Create/edit/delete projects and tasks, edit own profile

    Every tenant keeps at least one ADMIN at all times.
    """

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
