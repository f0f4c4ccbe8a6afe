import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException, UnauthorizedException
from app.core.security import create_access_token, hash_password, verify_password
from app.models.role import UserRole
from app.models.tenant import Tenant
from app.models.user import User
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository
from app.schemas.auth_schemas import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)


class AuthService:
    """Service for tenant registration and credential login"""

    def __init__(self, db: Session):
        self.db = db
        self.tenant_repo = TenantRepository(db)
        self.user_repo = UserRepository(db)

    def register(self, data: RegisterRequest) -> tuple[Tenant, User]:
        """
        Create a tenant and its first ADMIN user atomically.

        Raises:
            ConflictException: If subdomain or email is already taken
        """
        if self.tenant_repo.get_by_subdomain(data.subdomain):
            raise ConflictException("Subdomain already taken")

        if self.user_repo.get_by_email(data.email):
            raise ConflictException("Email already registered")

        tenant = Tenant(name=data.tenant_name, subdomain=data.subdomain)
        admin = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=UserRole.ADMIN,
        )

        try:
            tenant, admin = self.tenant_repo.create_with_admin(tenant, admin)
        except IntegrityError:
            # Lost a race against a concurrent registration
            self.db.rollback()
            raise ConflictException("Subdomain or email already taken")

        logger.info(
            "Registered tenant '%s'", tenant.subdomain,
            extra={"tenant_id": tenant.id, "user_id": admin.id},
        )
        return tenant, admin

    def login(self, data: LoginRequest) -> str:
        """
        Verify credentials and issue an access token.

        Raises:
            UnauthorizedException: If email unknown or password wrong
        """
        user = self.user_repo.get_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            raise UnauthorizedException("Invalid email or password")

        return create_access_token(user.id, user.tenant_id, user.role.value)
