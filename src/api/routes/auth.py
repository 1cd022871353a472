"""Authentication routes.

- POST /api/auth/signup: Create a password account
- POST /api/auth/signin: Email/password sign-in
- POST /api/auth/google: Federated sign-in with a verified identity assertion
- POST /api/auth/forgot-password: Request a reset link (generic response)
- POST /api/auth/reset-password: Set a new password with a reset token
- POST /api/auth/change-password: Change password (bearer)
- GET  /api/auth/me: Current user (bearer)

Handlers are plain ``def`` so password hashing runs in the threadpool.
"""

import logging
import os

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_clock, get_rate_limiter, get_reset_token_repo, get_user_repo
from api.models import (
    AuthResponse,
    ChangePasswordRequest,
    FederatedLoginRequest,
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    SigninRequest,
    SignupRequest,
    UserResponse,
)
from api.security import get_current_user_id, get_current_user_required, get_token_secret
from domain.model.errors import (
    AuthenticationError,
    DuplicateError,
    IncorrectPasswordError,
    InvalidResetTokenError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)
from port.reset_token_repository import ResetTokenRepository
from port.user_repository import UserRepository
from services import auth_service, password_reset_service
from services.rate_limiter import RateLimiter
from utils.clock import Clock

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:3000").rstrip("/")
RESET_URL_BASE = f"{APP_BASE_URL}/reset-password"
# Development only: echo the reset link since email delivery is external
EXPOSE_RESET_LINK = os.getenv("EXPOSE_RESET_LINK", "false").lower() == "true"


def _auth_response(result: auth_service.AuthResult) -> AuthResponse:
    return AuthResponse(token=result.token, user=UserResponse.from_domain(result.user))


def _bad_request(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    request: SignupRequest,
    repo: UserRepository = Depends(get_user_repo),
    secret: str = Depends(get_token_secret),
    clock: Clock = Depends(get_clock),
):
    """Register a new user and return a session token.

    Raises:
        HTTPException: 409 if email already exists, 400 if validation fails
    """
    try:
        result = auth_service.signup(
            repo, request.email, request.password, secret, name=request.name, clock=clock
        )
    except ValidationError as e:
        raise _bad_request(e)
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return _auth_response(result)


@router.post("/signin", response_model=AuthResponse)
def signin(
    request: SigninRequest,
    repo: UserRepository = Depends(get_user_repo),
    secret: str = Depends(get_token_secret),
    clock: Clock = Depends(get_clock),
):
    """Sign in with email and password. Any failure is a uniform 401."""
    try:
        result = auth_service.signin(repo, request.email, request.password, secret, clock=clock)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    return _auth_response(result)


@router.post("/google", response_model=AuthResponse)
def federated_login(
    request: FederatedLoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    secret: str = Depends(get_token_secret),
    clock: Clock = Depends(get_clock),
):
    """Sign in with an identity provider assertion, creating the account on first use."""
    try:
        result = auth_service.federated_login(
            repo,
            request.email,
            secret,
            name=request.name,
            photo_url=request.photo_url,
            clock=clock,
        )
    except ValidationError as e:
        raise _bad_request(e)
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return _auth_response(result)


@router.post("/forgot-password")
def forgot_password(
    request: ForgotPasswordRequest,
    user_repo: UserRepository = Depends(get_user_repo),
    token_repo: ResetTokenRepository = Depends(get_reset_token_repo),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Clock = Depends(get_clock),
):
    """Request a password reset link.

    The response is the same whether or not the email is registered.
    """
    try:
        outcome = auth_service.forgot_password(
            user_repo, token_repo, rate_limiter, request.email, RESET_URL_BASE, clock=clock
        )
    except ValidationError as e:
        raise _bad_request(e)
    except RateLimitExceededError as e:
        headers = {"Retry-After": str(e.retry_after)} if e.retry_after else None
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(e), headers=headers
        )

    response = dict(outcome.response)
    if outcome.delivery:
        logger.info("Password reset link ready for delivery", extra={"userId": outcome.delivery.user_id})
        if EXPOSE_RESET_LINK:
            response["debug_reset_url"] = outcome.delivery.reset_link
    return response


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    request: ResetPasswordRequest,
    user_repo: UserRepository = Depends(get_user_repo),
    token_repo: ResetTokenRepository = Depends(get_reset_token_repo),
    clock: Clock = Depends(get_clock),
):
    """Set a new password using a reset token from the emailed link."""
    try:
        password_reset_service.consume_reset(
            user_repo, token_repo, request.token, request.new_password, clock=clock
        )
    except (ValidationError, InvalidResetTokenError) as e:
        raise _bad_request(e)

    return MessageResponse(message="Password has been reset")


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    request: ChangePasswordRequest,
    user_id: str = Depends(get_current_user_id),
    user_repo: UserRepository = Depends(get_user_repo),
    token_repo: ResetTokenRepository = Depends(get_reset_token_repo),
):
    """Change password for the authenticated user."""
    try:
        password_reset_service.change_password(
            user_repo, token_repo, user_id, request.current_password, request.new_password
        )
    except (ValidationError, IncorrectPasswordError) as e:
        raise _bad_request(e)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return MessageResponse(message="Password updated")


@router.get("/me", response_model=UserResponse)
def get_me(current_user: UserResponse = Depends(get_current_user_required)):
    """Get current authenticated user info."""
    return current_user
