from sqlalchemy.orm import Session

from app.core.tenant_scope import scope_to_tenant
from app.models.role import UserRole
from app.models.user import User


class UserRepository:
    """Repository for User model operations with multi-tenant support"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> User | None:
        """Get user by email across all tenants (email is globally unique)"""
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id_and_tenant(self, user_id: int, tenant_id: int) -> User | None:
        """
        Get user ensuring it belongs to tenant (multi-tenant safety).

        Returns None if user doesn't exist or belongs to another tenant.
        """
        query = self.db.query(User).filter(User.id == user_id)
        return scope_to_tenant(query, User, tenant_id).first()

    def get_by_tenant(self, tenant_id: int) -> list[User]:
        """Get all users of a tenant ordered by name"""
        query = scope_to_tenant(self.db.query(User), User, tenant_id)
        return query.order_by(User.name.asc(), User.id.asc()).all()

    def lock_tenant_admins(self, tenant_id: int) -> int:
        """
        Lock the tenant's ADMIN rows and return how many there are.

        Uses SELECT ... FOR UPDATE so the count stays valid until the caller
        commits or rolls back. Concurrent demote/delete requests on the same
        tenant queue behind the lock and re-evaluate the role filter.
        """
        query = scope_to_tenant(self.db.query(User.id), User, tenant_id)
        admin_ids = query.filter(User.role == UserRole.ADMIN).with_for_update().all()
        return len(admin_ids)

    def create(self, user: User) -> User:
        """Create new user"""
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user: User) -> User:
        """Update existing user"""
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        """Delete user (assigned tasks are detached)"""
        self.db.delete(user)
        self.db.commit()

    def rollback(self) -> None:
        """Release locks and discard pending changes"""
        self.db.rollback()
