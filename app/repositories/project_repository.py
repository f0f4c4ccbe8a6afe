from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.tenant_scope import scope_to_tenant
from app.models.project import Project
from app.models.task import Task, TaskStatus


class ProjectRepository:
    """Repository for Project model operations with multi-tenant support"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_tenant(self, tenant_id: int) -> list[Project]:
        """Get all projects for a tenant, newest first"""
        query = scope_to_tenant(self.db.query(Project), Project, tenant_id)
        return query.order_by(Project.created_at.desc(), Project.id.desc()).all()

    def get_by_id_and_tenant(self, project_id: int, tenant_id: int) -> Project | None:
        """
        Get project ensuring it belongs to tenant (multi-tenant safety).

        Returns None if project doesn't exist or belongs to another tenant.
        """
        query = self.db.query(Project).filter(Project.id == project_id)
        return scope_to_tenant(query, Project, tenant_id).first()

    def get_task_counts(self, project_ids: list[int]) -> dict[int, tuple[int, int]]:
        """
        Count tasks per project.

        Returns:
            Mapping project_id -> (total_tasks, completed_tasks)
        """
        if not project_ids:
            return {}

        rows = (
            self.db.query(Task.project_id, Task.status, func.count(Task.id))
            .filter(Task.project_id.in_(project_ids))
            .group_by(Task.project_id, Task.status)
            .all()
        )

        counts: dict[int, tuple[int, int]] = {}
        for project_id, status, count in rows:
            total, completed = counts.get(project_id, (0, 0))
            total += count
            if status == TaskStatus.DONE:
                completed += count
            counts[project_id] = (total, completed)
        return counts

    def create(self, project: Project) -> Project:
        """Create new project"""
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)
        return project

    def update(self, project: Project) -> Project:
        """Update existing project"""
        self.db.commit()
        self.db.refresh(project)
        return project

    def delete(self, project: Project) -> None:
        """Delete project (cascades to tasks)"""
        self.db.delete(project)
        self.db.commit()
