"""Tests for authentication API routes."""

import unittest

from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_rate_limiter, get_reset_token_repo, get_user_repo
from adapter.fake.reset_token_repository import FakeResetTokenRepository
from adapter.fake.user_repository import FakeUserRepository
from services.auth_service import RESET_REQUESTED_MESSAGE
from services.rate_limiter import RateLimiter

PASSWORD = 'pw123456'


class AuthRoutesTestCase(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        self.user_repo = FakeUserRepository()
        self.token_repo = FakeResetTokenRepository()
        self.limiter = RateLimiter()
        app.dependency_overrides[get_user_repo] = lambda: self.user_repo
        app.dependency_overrides[get_reset_token_repo] = lambda: self.token_repo
        app.dependency_overrides[get_rate_limiter] = lambda: self.limiter

    def tearDown(self):
        app.dependency_overrides.clear()

    def _signup(self, email='a@example.com', password=PASSWORD, name='Alice'):
        return self.client.post(
            "/api/auth/signup", json={"email": email, "password": password, "name": name}
        )

    def _auth_header(self, token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}


class TestSignupAndSignin(AuthRoutesTestCase):

    def test_signup_returns_token_and_user(self):
        response = self._signup()

        assert response.status_code == 201
        data = response.json()
        assert data['success'] is True
        assert data['token'].count('.') == 2
        assert data['user']['email'] == 'a@example.com'
        assert data['user']['name'] == 'Alice'
        assert data['user']['provider'] == 'password'
        assert 'password_hash' not in data['user']

    def test_signup_duplicate_is_409(self):
        self._signup()
        response = self._signup()
        assert response.status_code == 409

    def test_signup_short_password_is_400(self):
        response = self._signup(password='short')
        assert response.status_code == 400

    def test_signup_invalid_email_is_422(self):
        response = self._signup(email='not-an-email')
        assert response.status_code == 422

    def test_signin_success(self):
        self._signup()
        response = self.client.post(
            "/api/auth/signin", json={"email": "a@example.com", "password": PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()['user']['email'] == 'a@example.com'

    def test_signin_failures_are_uniform(self):
        self._signup()
        wrong_password = self.client.post(
            "/api/auth/signin", json={"email": "a@example.com", "password": "wrong"}
        )
        unknown_email = self.client.post(
            "/api/auth/signin", json={"email": "nobody@example.com", "password": PASSWORD}
        )

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()

    def test_federated_login_creates_account(self):
        response = self.client.post("/api/auth/google", json={
            "idToken": "opaque-assertion",
            "email": "g@example.com",
            "name": "Gee",
            "photoURL": "https://img.example.com/g.png",
        })

        assert response.status_code == 200
        user = response.json()['user']
        assert user['provider'] == 'federated'
        assert user['photoURL'] == 'https://img.example.com/g.png'
        assert self.user_repo.get_by_email('g@example.com').password_hash is None


class TestProtectedAuthRoutes(AuthRoutesTestCase):

    def test_me_requires_token(self):
        response = self.client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.headers['WWW-Authenticate'] == 'Bearer'

    def test_me_rejects_other_scheme(self):
        token = self._signup().json()['token']
        response = self.client.get("/api/auth/me", headers={"Authorization": f"Basic {token}"})
        assert response.status_code == 401

    def test_openapi_declares_bearer_scheme(self):
        schemes = self.client.get("/openapi.json").json()['components']['securitySchemes']
        assert schemes['HTTPBearer']['type'] == 'http'
        assert schemes['HTTPBearer']['scheme'] == 'bearer'

    def test_me_rejects_invalid_token(self):
        response = self.client.get("/api/auth/me", headers=self._auth_header("a.b.c"))
        assert response.status_code == 401

    def test_me_returns_current_user(self):
        token = self._signup().json()['token']

        response = self.client.get("/api/auth/me", headers=self._auth_header(token))

        assert response.status_code == 200
        assert response.json()['email'] == 'a@example.com'

    def test_change_password(self):
        token = self._signup().json()['token']

        response = self.client.post(
            "/api/auth/change-password",
            json={"currentPassword": PASSWORD, "newPassword": "changed-pw"},
            headers=self._auth_header(token),
        )

        assert response.status_code == 200
        signin = self.client.post(
            "/api/auth/signin", json={"email": "a@example.com", "password": "changed-pw"}
        )
        assert signin.status_code == 200

    def test_change_password_wrong_current(self):
        token = self._signup().json()['token']

        response = self.client.post(
            "/api/auth/change-password",
            json={"currentPassword": "wrong-pw", "newPassword": "changed-pw"},
            headers=self._auth_header(token),
        )
        assert response.status_code == 400

    def test_change_password_requires_token(self):
        response = self.client.post(
            "/api/auth/change-password",
            json={"currentPassword": PASSWORD, "newPassword": "changed-pw"},
        )
        assert response.status_code == 401


class TestPasswordResetRoutes(AuthRoutesTestCase):

    def _forgot(self, email):
        return self.client.post("/api/auth/forgot-password", json={"email": email})

    def test_forgot_response_is_identical_for_unknown_email(self):
        self._signup()

        known = self._forgot('a@example.com')
        unknown = self._forgot('nobody@example.com')

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert known.json()['message'] == RESET_REQUESTED_MESSAGE
        assert len(self.token_repo.store) == 1

    def test_forgot_rate_limited(self):
        self._signup()
        for _ in range(5):
            assert self._forgot('a@example.com').status_code == 200

        response = self._forgot('a@example.com')
        assert response.status_code == 429
        assert 'Retry-After' in response.headers

    def test_forgot_rate_limit_is_identical_for_unknown_email(self):
        self._signup()
        for _ in range(5):
            self._forgot('a@example.com')
            self._forgot('nobody@example.com')

        known = self._forgot('a@example.com')
        unknown = self._forgot('nobody@example.com')

        assert known.status_code == unknown.status_code == 429
        assert known.json() == unknown.json()
        assert 'Retry-After' in unknown.headers

    def test_reset_flow(self):
        self._signup()
        self._forgot('a@example.com')
        token = next(iter(self.token_repo.store.values())).token

        response = self.client.post(
            "/api/auth/reset-password", json={"token": token, "newPassword": "after-reset"}
        )
        assert response.status_code == 200

        replay = self.client.post(
            "/api/auth/reset-password", json={"token": token, "newPassword": "again-reset"}
        )
        assert replay.status_code == 400

        signin = self.client.post(
            "/api/auth/signin", json={"email": "a@example.com", "password": "after-reset"}
        )
        assert signin.status_code == 200

    def test_reset_with_unknown_token(self):
        response = self.client.post(
            "/api/auth/reset-password", json={"token": "nope", "newPassword": "after-reset"}
        )
        assert response.status_code == 400


if __name__ == '__main__':
    unittest.main()
