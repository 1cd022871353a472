"""Port definition for ProjectRepository."""

from typing import Protocol

from domain.model.project import Project


class ProjectRepository(Protocol):
    def list_by_owner(self, user_id: str) -> list[Project]:
        """Return the owner's projects, most recently updated first."""
        ...

    def get_by_id(self, project_id: str, user_id: str) -> Project | None: ...

    def upsert(self, project: Project) -> bool: ...

    def delete(self, project_id: str, user_id: str) -> bool: ...
