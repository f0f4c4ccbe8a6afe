"""Repository for Tenant model operations."""

from sqlalchemy.orm import Session
from app.models.tenant import Tenant
from app.models.user import User


class TenantRepository:
    """Repository for Tenant model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        """Get tenant by its unique subdomain"""
        return self.db.query(Tenant).filter(Tenant.subdomain == subdomain).first()

    def create_with_admin(self, tenant: Tenant, admin: User) -> tuple[Tenant, User]:
        """
        Create a tenant and its first ADMIN user in one transaction.

        Args:
            tenant: Tenant object to create
            admin: User object (role ADMIN) to attach to the tenant

        Returns:
            Created (tenant, admin) with IDs populated

        Raises:
            IntegrityError: If subdomain or email already exists
        """
        self.db.add(tenant)
        self.db.flush()  # Assign tenant ID without committing

        admin.tenant_id = tenant.id
        self.db.add(admin)
        self.db.commit()

        self.db.refresh(tenant)
        self.db.refresh(admin)
        return tenant, admin
