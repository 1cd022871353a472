"""Project storage routes. Every endpoint requires a bearer token.

- GET    /api/projects: List the caller's projects
- POST   /api/projects: Create or replace a project
- GET    /api/projects/{project_id}: Get one project
- PUT    /api/projects/{project_id}: Replace a project's document
- DELETE /api/projects/{project_id}: Delete a project
"""

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, status

from api.dependencies import get_project_repo
from api.models import ProjectListResponse, ProjectResponse, ProjectSavedResponse
from api.security import get_current_user_id
from domain.model.errors import NotFoundError, PermissionDeniedError
from port.project_repository import ProjectRepository
from services import project_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


def _not_found(e: NotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    user_id: str = Depends(get_current_user_id),
    repo: ProjectRepository = Depends(get_project_repo),
):
    projects = project_service.list_projects(repo, user_id)
    return ProjectListResponse(projects=[ProjectResponse.from_domain(p) for p in projects])


@router.post("", response_model=ProjectSavedResponse)
async def save_project(
    data: dict = Body(...),
    user_id: str = Depends(get_current_user_id),
    repo: ProjectRepository = Depends(get_project_repo),
):
    try:
        project = project_service.save_project(repo, user_id, data)
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return ProjectSavedResponse(project_id=project.id)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: ProjectRepository = Depends(get_project_repo),
):
    try:
        project = project_service.get_project(repo, user_id, project_id)
    except NotFoundError as e:
        raise _not_found(e)
    return ProjectResponse.from_domain(project)


@router.put("/{project_id}", response_model=ProjectSavedResponse)
async def update_project(
    project_id: str,
    data: dict = Body(...),
    user_id: str = Depends(get_current_user_id),
    repo: ProjectRepository = Depends(get_project_repo),
):
    try:
        project_service.update_project(repo, user_id, project_id, data)
    except NotFoundError as e:
        raise _not_found(e)
    return ProjectSavedResponse(project_id=project_id)


@router.delete("/{project_id}", response_model=ProjectSavedResponse)
async def delete_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: ProjectRepository = Depends(get_project_repo),
):
    try:
        project_service.delete_project(repo, user_id, project_id)
    except NotFoundError as e:
        raise _not_found(e)
    return ProjectSavedResponse(project_id=project_id)
