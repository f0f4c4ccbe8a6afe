from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    """Schema for creating a new project"""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)


class ProjectUpdate(BaseModel):
    """
    Schema for updating a project.

    name is required, as on create. An omitted description is kept; an
    explicit null clears it.
    """

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)


class ProjectResponse(BaseModel):
    """Schema for project response"""

    id: int
    tenant_id: int
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectWithStatsResponse(ProjectResponse):
    """Project list item with task counters"""

    total_tasks: int = 0
    completed_tasks: int = 0


class ProjectDeleteResponse(BaseModel):
    message: str
    deleted_project_id: int
