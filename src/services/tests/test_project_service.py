"""Unit tests for project_service module."""

import unittest

from adapter.fake.project_repository import FakeProjectRepository
from domain.model.errors import NotFoundError, PermissionDeniedError
from services import project_service


class TestProjectService(unittest.TestCase):

    def setUp(self):
        self.repo = FakeProjectRepository()

    def test_save_generates_id_when_absent(self):
        project = project_service.save_project(self.repo, 'user-1', {'name': 'Boiler'})

        self.assertTrue(project.id)
        self.assertEqual(project_service.get_project(self.repo, 'user-1', project.id).data,
                         {'name': 'Boiler'})

    def test_save_uses_project_id_from_document(self):
        project = project_service.save_project(self.repo, 'user-1', {'projectId': 'p-1', 'v': 1})
        project_service.save_project(self.repo, 'user-1', {'projectId': 'p-1', 'v': 2})

        self.assertEqual(project.id, 'p-1')
        self.assertEqual(len(project_service.list_projects(self.repo, 'user-1')), 1)
        self.assertEqual(project_service.get_project(self.repo, 'user-1', 'p-1').data['v'], 2)

    def test_cannot_overwrite_another_users_project(self):
        project_service.save_project(self.repo, 'user-1', {'projectId': 'p-1'})

        with self.assertRaises(PermissionDeniedError):
            project_service.save_project(self.repo, 'user-2', {'projectId': 'p-1'})

    def test_projects_are_scoped_to_owner(self):
        project_service.save_project(self.repo, 'user-1', {'projectId': 'p-1'})

        self.assertEqual(project_service.list_projects(self.repo, 'user-2'), [])
        with self.assertRaises(NotFoundError):
            project_service.get_project(self.repo, 'user-2', 'p-1')
        with self.assertRaises(NotFoundError):
            project_service.delete_project(self.repo, 'user-2', 'p-1')

    def test_update_requires_existing_project(self):
        with self.assertRaises(NotFoundError):
            project_service.update_project(self.repo, 'user-1', 'missing', {})

        project_service.save_project(self.repo, 'user-1', {'projectId': 'p-1', 'v': 1})
        updated = project_service.update_project(self.repo, 'user-1', 'p-1', {'v': 3})
        self.assertEqual(updated.data, {'v': 3})

    def test_delete(self):
        project_service.save_project(self.repo, 'user-1', {'projectId': 'p-1'})
        project_service.delete_project(self.repo, 'user-1', 'p-1')

        with self.assertRaises(NotFoundError):
            project_service.get_project(self.repo, 'user-1', 'p-1')


if __name__ == '__main__':
    unittest.main()
