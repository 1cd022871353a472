"""MongoDB implementation of ProjectRepository."""

from logging import getLogger

from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import PROJECTS_COLLECTION_NAME
from domain.model.project import Project

logger = getLogger(__name__)


class MongoProjectRepository:
    def __init__(self, db: Database):
        self.collection = db[PROJECTS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(
                self.collection,
                [('user_id', 1), ('updated_at', -1)],
                'idx_projects_user_updated',
            )
            return True
        except Exception as e:
            logger.error("Failed to create projects indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> Project:
        return Project(
            id=doc['_id'],
            user_id=doc['user_id'],
            data=doc.get('data') or {},
            updated_at=doc['updated_at'],
        )

    def upsert(self, project: Project) -> bool:
        """Insert or replace by id. Fails if the id belongs to another owner."""
        try:
            self.collection.replace_one(
                {'_id': project.id, 'user_id': project.user_id},
                {
                    'user_id': project.user_id,
                    'data': project.data,
                    'updated_at': project.updated_at,
                },
                upsert=True,
            )
            return True
        except DuplicateKeyError:
            # _id exists under a different user_id
            logger.warning("Project id owned by another user", extra={"projectId": project.id})
            return False
        except PyMongoError as e:
            logger.error("Failed to save project", extra={"projectId": project.id, "error": str(e)})
            raise

    def delete(self, project_id: str, user_id: str) -> bool:
        try:
            result = self.collection.delete_one({'_id': project_id, 'user_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to delete project", extra={"projectId": project_id, "error": str(e)})
            raise
        return result.deleted_count > 0

    def list_by_owner(self, user_id: str) -> list[Project]:
        try:
            cursor = self.collection.find({'user_id': user_id}).sort('updated_at', DESCENDING)
            return [self._to_domain(doc) for doc in cursor]
        except PyMongoError as e:
            logger.error("Failed to list projects", extra={"userId": user_id, "error": str(e)})
            raise

    def get_by_id(self, project_id: str, user_id: str) -> Project | None:
        try:
            doc = self.collection.find_one({'_id': project_id, 'user_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get project", extra={"projectId": project_id, "error": str(e)})
            raise
        return self._to_domain(doc) if doc else None
