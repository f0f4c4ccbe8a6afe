from typing import Optional
from pydantic import BaseModel, EmailStr, Field, HttpUrl, TypeAdapter, field_validator, model_validator

from app.models.role import UserRole

_http_url = TypeAdapter(HttpUrl)


class UserResponse(BaseModel):
    """User details (never includes the password hash)"""

    id: int
    tenant_id: int
    name: str
    email: str
    image: Optional[str] = None
    role: UserRole

    model_config = {"from_attributes": True}


class UserRoleUpdate(BaseModel):
    """Change a tenant user's role (ADMIN only)"""

    role: UserRole = Field(..., description="New role to assign")


class UserInviteRequest(BaseModel):
    """Invite a new user into the caller's tenant (ADMIN only)"""

    email: EmailStr
    role: UserRole = Field(default=UserRole.MEMBER, description="Role to assign (default: MEMBER)")


class UserInviteResponse(BaseModel):
    """
    Created user plus the one-time temporary password.

    The password is shown only here; it is stored hashed.
    """

    message: str
    user: UserResponse
    temporary_password: str


class UserDeleteResponse(BaseModel):
    """Response after deleting a user"""

    message: str
    deleted_user_id: int


class ProfileUpdate(BaseModel):
    """Self-service profile edit. An empty image string clears the image."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    image: Optional[str] = Field(None, max_length=2048)

    @field_validator("image")
    @classmethod
    def image_must_be_url(cls, value: Optional[str]) -> Optional[str]:
        if value:
            _http_url.validate_python(value)
        return value


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)
    confirm_new_password: str = Field(..., min_length=6, max_length=128)

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordChange":
        if self.new_password != self.confirm_new_password:
            raise ValueError("New passwords do not match")
        return self


class MessageResponse(BaseModel):
    message: str
