import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import role_rules
from app.core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from app.core.security import generate_temporary_password, hash_password, verify_password
from app.models.principal import Principal
from app.models.role import UserRole
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user_schemas import (
    PasswordChange,
    ProfileUpdate,
    UserInviteRequest,
    UserRoleUpdate,
)

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for tenant user administration and self-service profile"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)

    def list_users(self, principal: Principal) -> list[User]:
        """
        List all users of the principal's tenant (ADMIN only).

        Raises:
            ForbiddenException: If principal is not ADMIN
        """
        role_rules.ensure_admin(principal)
        return self.user_repo.get_by_tenant(principal.tenant_id)

    def invite_user(
        self, invite_request: UserInviteRequest, principal: Principal
    ) -> tuple[User, str]:
        """
        Create a user in the principal's tenant with a temporary password.

        Args:
            invite_request: Email and role for the new user
            principal: Current principal

        Returns:
            (created user, plain temporary password)

        Raises:
            ForbiddenException: If principal is not ADMIN
            ConflictException: If the email is already used, in this tenant or another
        """
        role_rules.ensure_admin(principal)

        existing = self.user_repo.get_by_email(invite_request.email)
        if existing:
            if existing.tenant_id == principal.tenant_id:
                raise ConflictException("A user with this email already exists in your organization")
            raise ConflictException("This email is already used by another organization")

        temporary_password = generate_temporary_password()
        user = User(
            tenant_id=principal.tenant_id,
            email=invite_request.email,
            name=invite_request.email.split("@")[0],
            password_hash=hash_password(temporary_password),
            role=invite_request.role,
        )

        try:
            user = self.user_repo.create(user)
        except IntegrityError:
            self.user_repo.rollback()
            raise ConflictException("This email is already in use")

        logger.info(
            "Invited user %s as %s", user.id, user.role.value,
            extra={"tenant_id": principal.tenant_id, "user_id": principal.user_id},
        )
        return user, temporary_password

    def update_user_role(
        self, user_id: int, role_update: UserRoleUpdate, principal: Principal
    ) -> User:
        """
        Change a tenant user's role (ADMIN only).

        Check order: admin → not self → target in tenant → last admin.
        The admin rows stay locked from the count until the commit.

        Raises:
            ForbiddenException: Not ADMIN, self-change, or demoting the last ADMIN
            NotFoundException: If user not found in this tenant
        """
        role_rules.ensure_admin(principal)
        role_rules.ensure_not_self(principal, user_id, "role")

        user = self.user_repo.get_by_id_and_tenant(user_id, principal.tenant_id)
        if not user:
            raise NotFoundException("User not found")

        if user.role == role_update.role:
            return user

        if role_update.role != UserRole.ADMIN:
            admin_count = self.user_repo.lock_tenant_admins(principal.tenant_id)
            self.db.refresh(user, with_for_update=True)
            try:
                role_rules.ensure_can_demote(principal, user.id, user.role, admin_count)
            except ForbiddenException:
                self.user_repo.rollback()
                raise

        user.role = role_update.role
        user = self.user_repo.update(user)
        logger.info(
            "Changed role of user %s to %s", user.id, user.role.value,
            extra={"tenant_id": principal.tenant_id, "user_id": principal.user_id},
        )
        return user

    def delete_user(self, user_id: int, principal: Principal) -> None:
        """
        Delete a tenant user (ADMIN only).

        Tasks assigned to the user are left unassigned.

        Raises:
            ForbiddenException: Not ADMIN, self-delete, or deleting the last ADMIN
            NotFoundException: If user not found in this tenant
        """
        role_rules.ensure_admin(principal)
        role_rules.ensure_not_self(principal, user_id, "delete")

        user = self.user_repo.get_by_id_and_tenant(user_id, principal.tenant_id)
        if not user:
            raise NotFoundException("User not found")

        admin_count = self.user_repo.lock_tenant_admins(principal.tenant_id)
        self.db.refresh(user, with_for_update=True)
        try:
            role_rules.ensure_can_delete(principal, user.id, user.role, admin_count)
        except ForbiddenException:
            self.user_repo.rollback()
            raise

        self.user_repo.delete(user)
        logger.info(
            "Deleted user %s", user_id,
            extra={"tenant_id": principal.tenant_id, "user_id": principal.user_id},
        )

    def get_profile(self, principal: Principal) -> User:
        """Get the principal's own user record"""
        user = self.user_repo.get_by_id_and_tenant(principal.user_id, principal.tenant_id)
        if not user:
            raise NotFoundException("User not found")
        return user

    def update_profile(self, profile_update: ProfileUpdate, principal: Principal) -> User:
        """Update own name and/or image. An empty image string clears it."""
        user = self.get_profile(principal)
        changes = profile_update.model_dump(exclude_unset=True)

        if "name" in changes:
            if changes["name"] is None:
                raise ValidationException("name cannot be null")
            user.name = changes["name"]
        if "image" in changes:
            user.image = changes["image"] or None

        return self.user_repo.update(user)

    def change_password(self, password_change: PasswordChange, principal: Principal) -> None:
        """
        Change own password after verifying the current one.

        Raises:
            ValidationException: If the current password is wrong
        """
        user = self.get_profile(principal)

        if not verify_password(password_change.current_password, user.password_hash):
            raise ValidationException("Current password is incorrect")

        user.password_hash = hash_password(password_change.new_password)
        self.user_repo.update(user)
        logger.info(
            "Password changed",
            extra={"tenant_id": principal.tenant_id, "user_id": principal.user_id},
        )
