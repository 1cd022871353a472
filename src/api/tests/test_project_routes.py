"""Tests for project storage API routes."""

import unittest

from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_project_repo
from api.security import get_token_secret
from adapter.fake.project_repository import FakeProjectRepository
from services.session_token import issue_token


class TestProjectRoutes(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        self.repo = FakeProjectRepository()
        app.dependency_overrides[get_project_repo] = lambda: self.repo
        secret = get_token_secret()
        self.headers = {"Authorization": f"Bearer {issue_token('user-1', 'a@example.com', secret)}"}
        self.other_headers = {"Authorization": f"Bearer {issue_token('user-2', 'b@example.com', secret)}"}

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_requires_bearer_token(self):
        assert self.client.get("/api/projects").status_code == 401
        assert self.client.post("/api/projects", json={}).status_code == 401
        assert self.client.delete("/api/projects/p1").status_code == 401

    def test_forged_token_rejected(self):
        forged = issue_token('user-1', 'a@example.com', 'wrong-secret')
        response = self.client.get("/api/projects", headers={"Authorization": f"Bearer {forged}"})
        assert response.status_code == 401

    def test_create_list_get_delete(self):
        created = self.client.post(
            "/api/projects", json={"projectId": "p1", "name": "Chiller"}, headers=self.headers
        )
        assert created.status_code == 200
        assert created.json()['projectId'] == 'p1'

        listed = self.client.get("/api/projects", headers=self.headers).json()
        assert [p['id'] for p in listed['projects']] == ['p1']

        fetched = self.client.get("/api/projects/p1", headers=self.headers)
        assert fetched.json()['data']['name'] == 'Chiller'

        assert self.client.delete("/api/projects/p1", headers=self.headers).status_code == 200
        assert self.client.get("/api/projects/p1", headers=self.headers).status_code == 404

    def test_update(self):
        self.client.post("/api/projects", json={"projectId": "p1", "v": 1}, headers=self.headers)

        response = self.client.put("/api/projects/p1", json={"v": 2}, headers=self.headers)

        assert response.status_code == 200
        assert self.repo.get_by_id('p1', 'user-1').data == {"v": 2}

    def test_other_user_cannot_access(self):
        self.client.post("/api/projects", json={"projectId": "p1"}, headers=self.headers)

        assert self.client.get("/api/projects/p1", headers=self.other_headers).status_code == 404
        assert self.client.put("/api/projects/p1", json={}, headers=self.other_headers).status_code == 404
        overwrite = self.client.post("/api/projects", json={"projectId": "p1"}, headers=self.other_headers)
        assert overwrite.status_code == 403


if __name__ == '__main__':
    unittest.main()
