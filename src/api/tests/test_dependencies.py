"""Unit tests for API dependencies: repository wiring and the shared limiter."""

import unittest
from unittest.mock import patch, MagicMock

from fastapi import HTTPException

from api.dependencies import (
    DATABASE_NAME,
    get_clock,
    get_project_repo,
    get_rate_limiter,
    get_reset_token_repo,
    get_user_repo,
)
from adapter.mongodb.project_repository import MongoProjectRepository
from adapter.mongodb.reset_token_repository import MongoResetTokenRepository
from adapter.mongodb.user_repository import MongoUserRepository
from services.rate_limiter import RateLimiter
from utils.clock import utc_now


class TestRepositoryDependencies(unittest.TestCase):

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_mongo_repositories_when_connected(self, mock_get_client):
        mock_client = MagicMock()
        mock_get_client.return_value = mock_client

        self.assertIsInstance(get_user_repo(), MongoUserRepository)
        self.assertIsInstance(get_reset_token_repo(), MongoResetTokenRepository)
        self.assertIsInstance(get_project_repo(), MongoProjectRepository)
        mock_client.__getitem__.assert_called_with(DATABASE_NAME)

    @patch('api.dependencies.get_mongodb_client')
    def test_raises_503_when_mongodb_unavailable(self, mock_get_client):
        mock_get_client.return_value = None

        for dependency in (get_user_repo, get_reset_token_repo, get_project_repo):
            with self.assertRaises(HTTPException) as context:
                dependency()
            self.assertEqual(context.exception.status_code, 503)
            self.assertEqual(context.exception.detail, "Database unavailable")


class TestSharedDependencies(unittest.TestCase):

    def test_rate_limiter_comes_from_app_state(self):
        limiter = RateLimiter()
        request = MagicMock()
        request.app.state.rate_limiter = limiter

        self.assertIs(get_rate_limiter(request), limiter)

    def test_clock_is_utc_now(self):
        self.assertIs(get_clock(), utc_now)


if __name__ == '__main__':
    unittest.main()
