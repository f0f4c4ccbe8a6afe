import logging
from typing import Optional
from sqlalchemy.orm import Session

from app.models.principal import Principal
from app.models.task import Task, TaskStatus, TaskPriority
from app.repositories.task_repository import TaskRepository
from app.repositories.project_repository import ProjectRepository
from app.repositories.user_repository import UserRepository
from app.schemas.task_schemas import TaskCreate, TaskUpdate, NON_NULLABLE_UPDATE_FIELDS
from app.core.exceptions import NotFoundException, ValidationException

logger = logging.getLogger(__name__)


class TaskService:
    """Service layer for task business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.task_repo = TaskRepository(db)
        self.project_repo = ProjectRepository(db)
        self.user_repo = UserRepository(db)

    def _check_assignee(self, assignee_id: int, principal: Principal) -> None:
        """Assignee must be a user of the principal's tenant"""
        if not self.user_repo.get_by_id_and_tenant(assignee_id, principal.tenant_id):
            raise ValidationException(f"Invalid assignee {assignee_id}")

    def create_task(self, task_data: TaskCreate, principal: Principal) -> Task:
        """
        Create a new task in a tenant project.

        Args:
            task_data: Task creation data
            principal: Current principal

        Returns:
            Created task

        Raises:
            NotFoundException: If project doesn't exist in the tenant
            ValidationException: If assignee is not a user of the tenant
        """
        project = self.project_repo.get_by_id_and_tenant(task_data.project_id, principal.tenant_id)
        if not project:
            raise NotFoundException(f"Project {task_data.project_id} not found")

        if task_data.assignee_id is not None:
            self._check_assignee(task_data.assignee_id, principal)

        task = Task(
            project_id=project.id,
            title=task_data.title,
            description=task_data.description,
            status=task_data.status,
            priority=task_data.priority,
            assignee_id=task_data.assignee_id,
            due_date=task_data.due_date,
        )
        task = self.task_repo.create(task)
        logger.info(
            "Created task %s in project %s", task.id, project.id,
            extra={"tenant_id": principal.tenant_id, "user_id": principal.user_id},
        )
        return task

    def get_task(self, task_id: int, principal: Principal) -> Task:
        """
        Get task by ID with tenant verification.

        Raises:
            NotFoundException: If task doesn't exist or belongs to another tenant
        """
        task = self.task_repo.get_by_id_and_tenant(task_id, principal.tenant_id)
        if not task:
            raise NotFoundException(f"Task {task_id} not found")
        return task

    def get_tasks(
        self,
        principal: Principal,
        project_id: Optional[int] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        completed: Optional[bool] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> list[Task]:
        """
        Get tenant tasks with filters and sorting.

        Unrecognized sort_by values fall back to newest first.
        """
        return self.task_repo.get_with_filters(
            tenant_id=principal.tenant_id,
            project_id=project_id,
            status=status,
            priority=priority,
            completed=completed,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def update_task(self, task_id: int, task_data: TaskUpdate, principal: Principal) -> Task:
        """
        Apply a partial update.

        Only fields present in the request are written. A null assignee_id
        detaches the assignee; a non-null one must belong to the tenant.

        Raises:
            NotFoundException: If task doesn't exist or belongs to another tenant
            ValidationException: If a required field is nulled or assignee invalid
        """
        changes = task_data.model_dump(exclude_unset=True)

        for field in NON_NULLABLE_UPDATE_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationException(f"{field} cannot be null")

        task = self.get_task(task_id, principal)

        if changes.get("assignee_id") is not None:
            self._check_assignee(changes["assignee_id"], principal)

        for field, value in changes.items():
            setattr(task, field, value)

        return self.task_repo.update(task)

    def delete_task(self, task_id: int, principal: Principal) -> None:
        """
        Delete task.

        Raises:
            NotFoundException: If task doesn't exist or belongs to another tenant
        """
        task = self.get_task(task_id, principal)
        self.task_repo.delete(task)
        logger.info(
            "Deleted task %s", task_id,
            extra={"tenant_id": principal.tenant_id, "user_id": principal.user_id},
        )
