from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.security import decode_jwt
from app.core.exceptions import UnauthorizedException
from app.database import get_db
from app.models.principal import Principal
from app.repositories.user_repository import UserRepository

security = HTTPBearer(auto_error=False)


def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> Principal:
    """
    FastAPI dependency resolving the authenticated principal.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using SECRET_KEY
    3. Load the user by 'sub', requiring it to still belong to the token's tenant
    4. Return Principal with the role as currently stored

    Raises:
        UnauthorizedException: If header missing, token invalid/expired,
            or the user no longer exists
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    payload = decode_jwt(credentials.credentials)

    try:
        user_id = int(payload["sub"])
        tenant_id = int(payload["tenant_id"])
    except (TypeError, ValueError):
        raise UnauthorizedException("Malformed token claims")

    user = UserRepository(db).get_by_id_and_tenant(user_id, tenant_id)
    if not user:
        raise UnauthorizedException("User not found")

    return Principal(user_id=user.id, tenant_id=user.tenant_id, role=user.role)
