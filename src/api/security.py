"""Bearer-token security dependencies."""

import os
import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies import get_clock, get_user_repo
from api.models import UserResponse
from domain.model.errors import AuthorizationError
from port.user_repository import UserRepository
from services.auth_service import authenticate_bearer
from utils.clock import Clock

logger = logging.getLogger(__name__)

JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    raise ValueError(
        "JWT_SECRET environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )

# Missing or non-Bearer credentials arrive as None; get_current_user_id answers 401
security = HTTPBearer(auto_error=False)


def get_token_secret() -> str:
    return JWT_SECRET


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    secret: str = Depends(get_token_secret),
    clock: Clock = Depends(get_clock),
) -> str:
    """Verify the bearer token and return its subject. Raises 401 otherwise."""
    try:
        authorization = f"Bearer {credentials.credentials}" if credentials else None
        return authenticate_bearer(authorization, secret, clock=clock)
    except AuthorizationError as e:
        raise _unauthorized(str(e))


def get_current_user_required(
    user_id: str = Depends(get_current_user_id),
    user_repo: UserRepository = Depends(get_user_repo),
) -> UserResponse:
    """Get current authenticated user (required). Raises 401 if the account is gone."""
    user = user_repo.get_by_id(user_id)
    if not user:
        raise _unauthorized("User not found")
    return UserResponse.from_domain(user)
