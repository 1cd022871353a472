from fastapi import HTTPException, Request

from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.project_repository import MongoProjectRepository
from adapter.mongodb.reset_token_repository import MongoResetTokenRepository
from adapter.mongodb.user_repository import MongoUserRepository
from port.project_repository import ProjectRepository
from port.reset_token_repository import ResetTokenRepository
from port.user_repository import UserRepository
from services.rate_limiter import RateLimiter
from utils.clock import Clock, utc_now


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_reset_token_repo() -> ResetTokenRepository:
    return MongoResetTokenRepository(_get_db())


def get_project_repo() -> ProjectRepository:
    return MongoProjectRepository(_get_db())


def get_rate_limiter(request: Request) -> RateLimiter:
    """The application-scoped limiter created in api.main."""
    return request.app.state.rate_limiter


def get_clock() -> Clock:
    return utc_now
