"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class PermissionDeniedError(DomainError):
    """Caller lacks permission for the requested action."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class AuthenticationError(DomainError):
    """Credentials were rejected.

    Raised with the same message whether the account is unknown or the
    password is wrong.
    """


class AuthorizationError(DomainError):
    """Bearer token is missing, malformed, expired or forged."""


class IncorrectPasswordError(DomainError):
    """Current password did not match on an authenticated password change."""


class RateLimitExceededError(DomainError):
    """Too many requests for the same key within the current window."""

    def __init__(self, key: str, retry_after: int | None = None):
        self.key = key
        self.retry_after = retry_after
        super().__init__("Too many requests. Please try again later.")


class InvalidResetTokenError(DomainError):
    """Reset token is unknown, already used, or expired."""


# ── Session token failures ───────────────────────────────


class SessionTokenError(DomainError):
    """Base class for session token verification failures."""


class MalformedTokenError(SessionTokenError):
    """Token does not have three segments or its payload cannot be decoded."""


class InvalidSignatureError(SessionTokenError):
    """Token signature does not match its header and payload."""


class ExpiredTokenError(SessionTokenError):
    """Token lifetime has elapsed."""
