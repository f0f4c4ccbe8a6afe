"""
Tenant-scoping guard.

Every repository query over tenant-owned data goes through
scope_to_tenant(), so the tenant filter lives in exactly one place. Tasks have
no tenant column and are scoped by joining their project.
"""

from sqlalchemy.orm import Query

from app.models.project import Project
from app.models.task import Task
from app.models.user import User

DIRECTLY_SCOPED = (Project, User)


def scope_to_tenant(query: Query, model: type, tenant_id: int) -> Query:
    """
    Restrict a query over `model` to rows owned by `tenant_id`.

    Args:
        query: Query selecting `model`
        model: Project, User or Task
        tenant_id: Tenant id taken from the authenticated principal

    Returns:
        The filtered query

    Raises:
        TypeError: If the model is not tenant-owned
    """
    if model in DIRECTLY_SCOPED:
        return query.filter(model.tenant_id == tenant_id)
    if model is Task:
        return query.join(Project, Task.project_id == Project.id).filter(
            Project.tenant_id == tenant_id
        )
    raise TypeError(f"{model.__name__} is not a tenant-scoped model")
