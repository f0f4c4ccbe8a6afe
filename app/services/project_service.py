import logging

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException
from app.models.principal import Principal
from app.models.project import Project
from app.repositories.project_repository import ProjectRepository
from app.schemas.project_schemas import ProjectCreate, ProjectUpdate, ProjectWithStatsResponse

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for project business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProjectRepository(db)

    def create_project(self, data: ProjectCreate, principal: Principal) -> Project:
        """Create new project in the principal's tenant"""
        project = Project(
            tenant_id=principal.tenant_id,
            name=data.name,
            description=data.description,
        )
        project = self.repo.create(project)
        logger.info(
            "Created project %s", project.id,
            extra={"tenant_id": principal.tenant_id, "user_id": principal.user_id},
        )
        return project

    def list_projects(self, principal: Principal) -> list[ProjectWithStatsResponse]:
        """Get all tenant projects, newest first, with task counters"""
        projects = self.repo.get_by_tenant(principal.tenant_id)
        counts = self.repo.get_task_counts([p.id for p in projects])

        result = []
        for project in projects:
            total, completed = counts.get(project.id, (0, 0))
            item = ProjectWithStatsResponse.model_validate(project)
            item.total_tasks = total
            item.completed_tasks = completed
            result.append(item)
        return result

    def get_project(self, project_id: int, principal: Principal) -> Project:
        """
        Get specific project ensuring tenant ownership.

        Raises:
            NotFoundException: If project not found or belongs to another tenant
        """
        project = self.repo.get_by_id_and_tenant(project_id, principal.tenant_id)
        if not project:
            raise NotFoundException("Project not found")
        return project

    def update_project(self, project_id: int, data: ProjectUpdate, principal: Principal) -> Project:
        """Update project name, and description when it is sent"""
        project = self.get_project(project_id, principal)
        changes = data.model_dump(exclude_unset=True)

        project.name = data.name
        if "description" in changes:
            project.description = changes["description"]

        return self.repo.update(project)

    def delete_project(self, project_id: int, principal: Principal) -> None:
        """Delete project and all its tasks (cascade)"""
        project = self.get_project(project_id, principal)
        self.repo.delete(project)
        logger.info(
            "Deleted project %s", project_id,
            extra={"tenant_id": principal.tenant_id, "user_id": principal.user_id},
        )
