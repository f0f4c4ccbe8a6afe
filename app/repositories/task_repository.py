from typing import Optional
from sqlalchemy import case
from sqlalchemy.orm import Session, joinedload

from app.core.tenant_scope import scope_to_tenant
from app.models.task import Task, TaskStatus, TaskPriority

PRIORITY_RANK = case(
    (Task.priority == TaskPriority.LOW, 1),
    (Task.priority == TaskPriority.MEDIUM, 2),
    (Task.priority == TaskPriority.HIGH, 3),
    else_=0,
)

STATUS_RANK = case(
    (Task.status == TaskStatus.TODO, 1),
    (Task.status == TaskStatus.IN_PROGRESS, 2),
    (Task.status == TaskStatus.DONE, 3),
    else_=0,
)

# Recognized sort_by values; anything else falls back to created_at desc
SORT_COLUMNS = {
    "title": Task.title,
    "created_at": Task.created_at,
    "priority": PRIORITY_RANK,
    "status": STATUS_RANK,
}

DEFAULT_SORT = ("created_at", "desc")


class TaskRepository:
    """Repository for Task data access, scoped through the parent project"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id_and_tenant(self, task_id: int, tenant_id: int) -> Optional[Task]:
        """
        Get task by ID, ensuring it belongs to the tenant.
        Joins with Project to verify tenant ownership.

        Args:
            task_id: Task ID
            tenant_id: Tenant ID

        Returns:
            Task object or None if not found or belongs to different tenant
        """
        query = self.db.query(Task).options(joinedload(Task.assignee)).filter(Task.id == task_id)
        return scope_to_tenant(query, Task, tenant_id).first()

    def get_with_filters(
        self,
        tenant_id: int,
        project_id: Optional[int] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        completed: Optional[bool] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> list[Task]:
        """
        Get tasks with filters, ensuring multi-tenant isolation.

        Args:
            tenant_id: Tenant ID for isolation
            project_id: Optional project filter
            status: Optional status filter
            priority: Optional priority filter
            completed: True keeps done tasks, False keeps the others
            sort_by: title, created_at, priority or status
            sort_order: asc or desc (default desc)

        Returns:
            List of tasks
        """
        query = scope_to_tenant(
            self.db.query(Task).options(joinedload(Task.assignee)), Task, tenant_id
        )

        if project_id is not None:
            query = query.filter(Task.project_id == project_id)

        if status is not None:
            query = query.filter(Task.status == status)

        if priority is not None:
            query = query.filter(Task.priority == priority)

        if completed is True:
            query = query.filter(Task.status == TaskStatus.DONE)
        elif completed is False:
            query = query.filter(Task.status != TaskStatus.DONE)

        return query.order_by(*self._order_by(sort_by, sort_order)).all()

    @staticmethod
    def _order_by(sort_by: Optional[str], sort_order: Optional[str]) -> list:
        if sort_by not in SORT_COLUMNS:
            sort_by, sort_order = DEFAULT_SORT
        descending = sort_order != "asc"

        column = SORT_COLUMNS[sort_by]
        tiebreak = Task.id
        if descending:
            return [column.desc(), tiebreak.desc()]
        return [column.asc(), tiebreak.asc()]

    def create(self, task: Task) -> Task:
        """Create a new task"""
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def update(self, task: Task) -> Task:
        """Update a task"""
        self.db.commit()
        self.db.refresh(task)
        return task

    def delete(self, task: Task) -> None:
        """Delete a task"""
        self.db.delete(task)
        self.db.commit()
