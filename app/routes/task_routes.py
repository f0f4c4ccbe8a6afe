from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_principal
from app.models.principal import Principal
from app.models.task import TaskStatus, TaskPriority
from app.services.task_service import TaskService
from app.schemas.task_schemas import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskDeleteResponse,
)

router = APIRouter()


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """
    Create a new task.

    - Requires a project_id owned by the tenant
    - assignee_id, when given, must be a user of the same tenant
    - Defaults: status "todo", priority "MEDIUM"
    """
    service = TaskService(db)
    return service.create_task(task_data, principal)


@router.get("", response_model=list[TaskResponse])
def list_tasks(
    project_id: Optional[int] = Query(None, description="Filter by project ID"),
    status: Optional[TaskStatus] = Query(None, description="Filter by status"),
    priority: Optional[TaskPriority] = Query(None, description="Filter by priority"),
    completed: Optional[bool] = Query(None, description="true: done tasks, false: open tasks"),
    sort_by: Optional[str] = Query(
        None, description="title, created_at, priority or status (default created_at)"
    ),
    sort_order: Optional[str] = Query(None, description="asc or desc (default desc)"),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """
    List tenant tasks with optional filters.

    - Unknown sort_by values fall back to newest first
    """
    service = TaskService(db)
    return service.get_tasks(
        principal=principal,
        project_id=project_id,
        status=status,
        priority=priority,
        completed=completed,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Get task by ID"""
    service = TaskService(db)
    return service.get_task(task_id, principal)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """
    Partially update a task.

    - Only fields present in the body change
    - assignee_id: null unassigns; due_date: null clears
    """
    service = TaskService(db)
    return service.update_task(task_id, task_data, principal)


@router.delete("/{task_id}", response_model=TaskDeleteResponse)
def delete_task(
    task_id: int,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Delete a task"""
    service = TaskService(db)
    service.delete_task(task_id, principal)
    return {"message": "Task deleted", "deleted_task_id": task_id}
