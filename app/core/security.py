import secrets
import string
from datetime import datetime, timedelta, UTC

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings
from app.core.exceptions import UnauthorizedException

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TEMP_PASSWORD_ALPHABET = string.ascii_letters + string.digits


def hash_password(password: str) -> str:
    """Hash a password with bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against its bcrypt hash"""
    return pwd_context.verify(plain_password, hashed_password)


def generate_temporary_password(length: int | None = None) -> str:
    """Random password handed to invited users"""
    length = length or settings.TEMP_PASSWORD_LENGTH
    return "".join(secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(length))


def create_access_token(user_id: int, tenant_id: int, role: str) -> str:
    """
    Issue a signed access token.

    Claims: sub (user id as string), tenant_id, role, iat, exp.
    """
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "tenant_id": tenant_id,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub', 'tenant_id', 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    # Validate expiration (jose checks the value automatically when present)
    if payload.get("exp") is None:
        raise UnauthorizedException("Token missing expiration")

    if payload.get("sub") is None:
        raise UnauthorizedException("Token missing user identifier")

    if payload.get("tenant_id") is None:
        raise UnauthorizedException("Token missing tenant identifier")

    return payload
