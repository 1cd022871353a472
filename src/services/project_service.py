"""Project service: owner-scoped storage of opaque project documents."""

import logging
import uuid
from datetime import datetime, timezone

from domain.model.errors import NotFoundError, PermissionDeniedError
from domain.model.project import Project
from port.project_repository import ProjectRepository

logger = logging.getLogger(__name__)


def list_projects(repo: ProjectRepository, user_id: str) -> list[Project]:
    return repo.list_by_owner(user_id)


def get_project(repo: ProjectRepository, user_id: str, project_id: str) -> Project:
    """Raises NotFoundError if the project does not exist for this owner."""
    project = repo.get_by_id(project_id, user_id)
    if not project:
        raise NotFoundError("Project not found")
    return project


def save_project(repo: ProjectRepository, user_id: str, data: dict) -> Project:
    """Create or replace a project. The id comes from ``data['projectId']`` when present.

    Raises:
        PermissionDeniedError: the id belongs to another user's project
    """
    project_id = str(data.get("projectId") or uuid.uuid4())
    project = Project(
        id=project_id,
        user_id=user_id,
        data=data,
        updated_at=datetime.now(timezone.utc),
    )
    if not repo.upsert(project):
        raise PermissionDeniedError("Cannot save project")

    logger.info("Project saved", extra={"projectId": project_id, "userId": user_id})
    return project


def update_project(repo: ProjectRepository, user_id: str, project_id: str, data: dict) -> Project:
    """Replace the document of an existing project.

    Raises:
        NotFoundError: the project does not exist for this owner
    """
    get_project(repo, user_id, project_id)
    project = Project(
        id=project_id,
        user_id=user_id,
        data=data,
        updated_at=datetime.now(timezone.utc),
    )
    if not repo.upsert(project):
        raise NotFoundError("Project not found")
    return project


def delete_project(repo: ProjectRepository, user_id: str, project_id: str) -> None:
    if not repo.delete(project_id, user_id):
        raise NotFoundError("Project not found")
    logger.info("Project deleted", extra={"projectId": project_id, "userId": user_id})
