"""Password reset service: single-use, time-limited reset tokens.

Token lifecycle: created unused with a one-hour expiry, then either consumed
(marked used, siblings deleted), left to expire, or deleted because the user
reset or changed their password by other means.
"""

import logging
import uuid
from datetime import timedelta

from domain.model.errors import (
    DomainError,
    IncorrectPasswordError,
    InvalidResetTokenError,
    NotFoundError,
    RateLimitExceededError,
)
from domain.model.password_reset import PasswordResetToken, ResetRequest
from port.reset_token_repository import ResetTokenRepository
from port.user_repository import UserRepository
from services.password_hasher import hash_password, verify_password
from services.rate_limiter import RateLimiter
from services.validation import validate_password
from utils.clock import Clock, utc_now

logger = logging.getLogger(__name__)

RESET_TOKEN_TTL = timedelta(hours=1)
RESET_RATE_LIMIT = 5
RESET_RATE_WINDOW_MS = 60_000


def _generate_token() -> str:
    return uuid.uuid4().hex + uuid.uuid4().hex


def _rate_limit_key(email: str) -> str:
    return f"password-reset:{email}"


def request_reset(
    user_repo: UserRepository,
    token_repo: ResetTokenRepository,
    rate_limiter: RateLimiter,
    email: str,
    reset_url_base: str,
    clock: Clock = utc_now,
) -> ResetRequest | None:
    """Issue a reset token for the account registered under email.

    Returns None without creating anything when no such account exists, so
    callers can answer both cases identically. The rate limit is charged
    before the lookup, so registered and unknown emails are throttled alike.

    Raises:
        RateLimitExceededError: more than RESET_RATE_LIMIT requests for this
            email within RESET_RATE_WINDOW_MS
        DomainError: the token could not be stored
    """
    key = _rate_limit_key(email)
    if not rate_limiter.allow(key, RESET_RATE_LIMIT, RESET_RATE_WINDOW_MS):
        raise RateLimitExceededError(key, retry_after=rate_limiter.retry_after(key))

    user = user_repo.get_by_email(email)
    if not user:
        logger.info("Password reset requested for unknown email")
        return None

    now = clock()
    record = PasswordResetToken(
        id=uuid.uuid4().hex,
        user_id=user.id,
        token=_generate_token(),
        expires_at=now + RESET_TOKEN_TTL,
        created_at=now,
    )
    if not token_repo.insert(record):
        raise DomainError("Failed to store password reset token")

    logger.info("Password reset token issued", extra={"userId": user.id})
    return ResetRequest(
        user_id=user.id,
        email=user.email,
        token=record.token,
        reset_link=f"{reset_url_base}?token={record.token}",
        expires_at=record.expires_at,
    )


def consume_reset(
    user_repo: UserRepository,
    token_repo: ResetTokenRepository,
    token: str,
    new_password: str,
    clock: Clock = utc_now,
) -> None:
    """Set a new password using a reset token.

    The token is claimed (marked used) before the password changes, so of
    two concurrent requests with the same token only one succeeds. Every
    other reset token of the same user is then deleted.

    Raises:
        ValidationError: new password is too weak
        InvalidResetTokenError: token unknown, used, or expired
    """
    validate_password(new_password)

    record = token_repo.claim_active(token, clock()) if token else None
    if not record:
        raise InvalidResetTokenError("Invalid or expired reset token")

    if not user_repo.update_fields(record.user_id, password_hash=hash_password(new_password)):
        raise InvalidResetTokenError("Invalid or expired reset token")

    superseded = token_repo.delete_for_user(record.user_id, exclude_id=record.id)

    logger.info("Password reset completed", extra={
        "userId": record.user_id,
        "supersededTokens": superseded,
    })


def change_password(
    user_repo: UserRepository,
    token_repo: ResetTokenRepository,
    user_id: str,
    current_password: str,
    new_password: str,
) -> None:
    """Change password for an authenticated user who knows the current one.

    Deletes all outstanding reset tokens for the user.

    Raises:
        NotFoundError: user does not exist
        IncorrectPasswordError: current password is wrong or the account has none
        ValidationError: new password is too weak
    """
    user = user_repo.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")

    if not user.password_hash or not verify_password(current_password, user.password_hash):
        raise IncorrectPasswordError("Current password is incorrect")

    validate_password(new_password)

    if not user_repo.update_fields(user.id, password_hash=hash_password(new_password)):
        raise DomainError("Failed to update password")

    revoked = token_repo.delete_for_user(user.id)
    logger.info("Password changed", extra={"userId": user.id, "revokedResetTokens": revoked})
