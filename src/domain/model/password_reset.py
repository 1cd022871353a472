"""Domain model for single-use password reset tokens."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class PasswordResetToken:
    """A password reset credential (Entity).

    Attributes:
        id: Record identifier.
        user_id: Owning user.
        token: Opaque lookup secret sent to the user, distinct from id.
        expires_at: Instant after which the token is no longer actionable.
        used: Set once the token has been consumed; never reset to False.
        created_at: Creation timestamp.
    """
    id: str
    user_id: str
    token: str
    expires_at: datetime
    created_at: datetime
    used: bool = False

    def is_active(self, now: datetime) -> bool:
        return not self.used and self.expires_at > now


@dataclass(frozen=True)
class ResetRequest:
    """Result of a successful reset request, handed off for out-of-band delivery."""
    user_id: str
    email: str
    token: str
    reset_link: str
    expires_at: datetime
