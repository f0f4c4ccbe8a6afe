from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_principal
from app.models.principal import Principal
from app.services.user_service import UserService
from app.schemas.user_schemas import (
    MessageResponse,
    PasswordChange,
    ProfileUpdate,
    UserDeleteResponse,
    UserInviteRequest,
    UserInviteResponse,
    UserResponse,
    UserRoleUpdate,
)

router = APIRouter()


# Self-service routes are declared before /{user_id} routes so "me" is never
# parsed as a user id.
@router.get("/me", response_model=UserResponse)
def get_me(principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Get the caller's own profile"""
    service = UserService(db)
    return service.get_profile(principal)


@router.put("/me", response_model=UserResponse)
def update_me(
    profile_update: ProfileUpdate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Update own name and/or image (empty image string removes it)"""
    service = UserService(db)
    return service.update_profile(profile_update, principal)


@router.put("/me/password", response_model=MessageResponse)
def change_password(
    password_change: PasswordChange,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Change own password"""
    service = UserService(db)
    service.change_password(password_change, principal)
    return {"message": "Password updated successfully"}


@router.get("", response_model=list[UserResponse])
def list_users(principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """
    List users of the caller's tenant.

    - **Requires ADMIN**
    """
    service = UserService(db)
    return service.list_users(principal)


@router.post("/invite", response_model=UserInviteResponse, status_code=status.HTTP_201_CREATED)
def invite_user(
    invite_request: UserInviteRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """
    Invite a new user into the tenant.

    - **Requires ADMIN**
    - Default role: MEMBER
    - Returns a temporary password, shown only once
    """
    service = UserService(db)
    user, temporary_password = service.invite_user(invite_request, principal)
    return {
        "message": "User invited successfully",
        "user": user,
        "temporary_password": temporary_password,
    }


@router.put("/{user_id}/role", response_model=UserResponse)
def update_user_role(
    user_id: int,
    role_update: UserRoleUpdate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """
    Change a user's role.

    - **Requires ADMIN**
    - Cannot change your own role
    - Cannot demote the last ADMIN
    """
    service = UserService(db)
    return service.update_user_role(user_id, role_update, principal)


@router.delete("/{user_id}", response_model=UserDeleteResponse)
def delete_user(
    user_id: int,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """
    Delete a user from the tenant.

    - **Requires ADMIN**
    - Cannot delete yourself
    - Cannot delete the last ADMIN
    """
    service = UserService(db)
    service.delete_user(user_id, principal)
    return {"message": "User deleted successfully", "deleted_user_id": user_id}
