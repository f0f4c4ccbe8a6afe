from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.auth_service import AuthService
from app.schemas.auth_schemas import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """
    Register a new tenant and its first user.

    - The user becomes the tenant's ADMIN
    - Subdomain and email must be unused (409 otherwise)
    """
    service = AuthService(db)
    tenant, user = service.register(data)
    return {"message": "Tenant and user created successfully", "tenant": tenant, "user": user}


@router.post("/auth/login", response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    service = AuthService(db)
    return TokenResponse(access_token=service.login(data))
