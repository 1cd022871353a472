"""In-memory implementation of ProjectRepository for testing."""

from domain.model.project import Project


class FakeProjectRepository:
    def __init__(self):
        self.store: dict[str, Project] = {}

    # ── write operations ─────────────────────────────────────

    def upsert(self, project: Project) -> bool:
        existing = self.store.get(project.id)
        if existing and existing.user_id != project.user_id:
            return False
        self.store[project.id] = project
        return True

    def delete(self, project_id: str, user_id: str) -> bool:
        project = self.store.get(project_id)
        if not project or project.user_id != user_id:
            return False
        del self.store[project_id]
        return True

    # ── read operations ──────────────────────────────────────

    def list_by_owner(self, user_id: str) -> list[Project]:
        projects = [p for p in self.store.values() if p.user_id == user_id]
        return sorted(projects, key=lambda p: p.updated_at, reverse=True)

    def get_by_id(self, project_id: str, user_id: str) -> Project | None:
        project = self.store.get(project_id)
        if project and project.user_id == user_id:
            return project
        return None
