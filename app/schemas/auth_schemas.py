from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from app.schemas.user_schemas import UserResponse


class RegisterRequest(BaseModel):
    """Create a tenant together with its first ADMIN user"""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    tenant_name: str = Field(..., min_length=1, max_length=255)
    subdomain: str = Field(
        ...,
        min_length=2,
        max_length=63,
        pattern=r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$",
        description="Lowercase letters, digits and hyphens",
    )


class TenantResponse(BaseModel):
    """Tenant details response"""

    id: int
    name: str
    subdomain: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    message: str
    tenant: TenantResponse
    user: UserResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
