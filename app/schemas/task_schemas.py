from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional

from app.models.task import TaskStatus, TaskPriority

# Fields that may be omitted from an update but never set to null
NON_NULLABLE_UPDATE_FIELDS = ("title", "status", "priority")


class TaskCreate(BaseModel):
    """Schema for creating a new task"""

    title: str = Field(..., min_length=1, max_length=255)
    project_id: int = Field(..., gt=0)
    description: Optional[str] = Field(None, max_length=5000)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: Optional[int] = None
    due_date: Optional[datetime] = None


class TaskUpdate(BaseModel):
    """
    Schema for partially updating a task.

    Only fields present in the request body are applied; an explicit null
    assignee_id detaches the assignee and an explicit null due_date clears it.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assignee_id: Optional[int] = None
    due_date: Optional[datetime] = None


class TaskAssignee(BaseModel):
    """Compact user summary embedded in task responses"""

    model_config = {"from_attributes": True}

    id: int
    name: str
    email: str


class TaskResponse(BaseModel):
    """Schema for task response"""

    model_config = {"from_attributes": True}

    id: int
    project_id: int
    title: str
    description: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    completed: bool
    assignee_id: Optional[int]
    assignee: Optional[TaskAssignee] = None
    due_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class TaskDeleteResponse(BaseModel):
    message: str
    deleted_task_id: int
