from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_principal
from app.models.principal import Principal
from app.services.project_service import ProjectService
from app.schemas.project_schemas import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectWithStatsResponse,
    ProjectDeleteResponse,
)

router = APIRouter()


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    data: ProjectCreate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Create a new project in the caller's tenant"""
    service = ProjectService(db)
    return service.create_project(data, principal)


@router.get("", response_model=list[ProjectWithStatsResponse])
def list_projects(principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Get all tenant projects, newest first, with task counters"""
    service = ProjectService(db)
    return service.list_projects(principal)


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: int, principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
):
    """Get specific project details"""
    service = ProjectService(db)
    return service.get_project(project_id, principal)


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: int,
    data: ProjectUpdate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Update project name and description"""
    service = ProjectService(db)
    return service.update_project(project_id, data, principal)


@router.delete("/{project_id}", response_model=ProjectDeleteResponse)
def delete_project(
    project_id: int, principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
):
    """Delete project and all its tasks"""
    service = ProjectService(db)
    service.delete_project(project_id, principal)
    return {"message": "Project deleted", "deleted_project_id": project_id}
