"""Auth service — signup, signin, federated login and bearer authentication.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging
from dataclasses import dataclass

from domain.model.errors import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicateError,
    SessionTokenError,
)
from domain.model.password_reset import ResetRequest
from domain.model.user import AuthProvider, User
from port.reset_token_repository import ResetTokenRepository
from port.user_repository import UserRepository
from services.password_hasher import hash_password, verify_password
from services.password_reset_service import request_reset
from services.rate_limiter import RateLimiter
from services.session_token import issue_token, verify_token
from services.validation import validate_email, validate_password
from utils.clock import Clock, utc_now

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
RESET_REQUESTED_MESSAGE = "If an account exists for that email, a password reset link has been sent."
BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthResult:
    """Authenticated user plus a freshly issued session token."""
    user: User
    token: str


@dataclass(frozen=True)
class ForgotPasswordOutcome:
    """Public response for a reset request plus the private delivery payload.

    ``response`` is identical whether or not the email is registered;
    ``delivery`` is only set when a token was issued and must be sent
    out-of-band, never returned to the requester.
    """
    response: dict
    delivery: ResetRequest | None = None


def _default_name(email: str) -> str:
    return email.split("@")[0]


def _create_user(repo: UserRepository, email: str, **fields) -> User:
    user = repo.create(email=email, **fields)
    if user:
        return user
    # A concurrent signup may have claimed the email between lookup and insert
    if repo.get_by_email(email):
        raise DuplicateError("User already exists")
    raise DomainError("Failed to create user")


def signup(
    repo: UserRepository,
    email: str,
    password: str,
    secret: str,
    name: str | None = None,
    clock: Clock = utc_now,
) -> AuthResult:
    """Register a new password user and sign them in.

    Raises:
        ValidationError: email missing or password shorter than 8 characters
        DuplicateError: email already registered
    """
    validate_email(email)
    validate_password(password)

    if repo.get_by_email(email):
        raise DuplicateError("User already exists")

    user = _create_user(
        repo,
        email,
        name=name or _default_name(email),
        password_hash=hash_password(password),
        provider=AuthProvider.PASSWORD,
    )
    token = issue_token(user.id, user.email, secret, now=clock())

    logger.info("User registered", extra={"userId": user.id})
    return AuthResult(user=user, token=token)


def signin(
    repo: UserRepository,
    email: str,
    password: str,
    secret: str,
    clock: Clock = utc_now,
) -> AuthResult:
    """Authenticate by email and password.

    Raises:
        AuthenticationError: unknown email, account without password, or
            wrong password (deliberately indistinguishable)
    """
    user = repo.get_by_email(email) if email else None
    if not user or not user.password_hash or not verify_password(password or "", user.password_hash):
        logger.info("Sign-in rejected")
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    # login succeeds even if the timestamp update fails
    repo.update_last_login(user.id)
    token = issue_token(user.id, user.email, secret, now=clock())

    logger.info("User signed in", extra={"userId": user.id})
    return AuthResult(user=user, token=token)


def federated_login(
    repo: UserRepository,
    email: str,
    secret: str,
    name: str | None = None,
    photo_url: str | None = None,
    clock: Clock = utc_now,
) -> AuthResult:
    """Sign in with an identity asserted by a trusted external provider.

    The assertion itself must already be verified by the caller. Unknown
    emails get a new federated account with no password.

    Raises:
        ValidationError: email missing
    """
    validate_email(email)

    user = repo.get_by_email(email)
    if not user:
        user = _create_user(
            repo,
            email,
            name=name or _default_name(email),
            password_hash=None,
            provider=AuthProvider.FEDERATED,
            photo_url=photo_url,
        )
        logger.info("Federated user created", extra={"userId": user.id})
    else:
        repo.update_last_login(user.id)

    token = issue_token(user.id, user.email, secret, now=clock())
    return AuthResult(user=user, token=token)


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` value."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


def authenticate_bearer(
    authorization: str | None,
    secret: str,
    clock: Clock = utc_now,
) -> str:
    """Gate for protected operations. Return the caller's user id.

    Raises:
        AuthorizationError: header absent or malformed, or token fails
            verification for any reason
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthorizationError("Unauthorized")

    try:
        claims = verify_token(token, secret, now=clock())
    except SessionTokenError as e:
        logger.debug(f"Bearer token rejected: {type(e).__name__}")
        raise AuthorizationError("Unauthorized")

    return claims.user_id


def forgot_password(
    user_repo: UserRepository,
    token_repo: ResetTokenRepository,
    rate_limiter: RateLimiter,
    email: str,
    reset_url_base: str,
    clock: Clock = utc_now,
) -> ForgotPasswordOutcome:
    """Handle a forgot-password request without revealing whether email is registered.

    Raises:
        ValidationError: email missing
        RateLimitExceededError: too many requests for a registered email
    """
    validate_email(email)
    response = {"success": True, "message": RESET_REQUESTED_MESSAGE}

    delivery = request_reset(user_repo, token_repo, rate_limiter, email, reset_url_base, clock=clock)
    if delivery is None:
        return ForgotPasswordOutcome(response=response)
    return ForgotPasswordOutcome(response=response, delivery=delivery)
