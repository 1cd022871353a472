"""Port definition for ResetTokenRepository."""

from datetime import datetime
from typing import Protocol

from domain.model.password_reset import PasswordResetToken


class ResetTokenRepository(Protocol):
    def insert(self, record: PasswordResetToken) -> bool: ...

    def claim_active(self, token: str, now: datetime) -> PasswordResetToken | None:
        """Atomically mark the record matching token as used and return it.

        Returns None if no record matches exactly, or it is already used or
        expired. Of several concurrent claims for one token at most one
        succeeds.
        """
        ...

    def delete_for_user(self, user_id: str, exclude_id: str | None = None) -> int:
        """Delete the user's tokens except exclude_id. Return the number deleted."""
        ...
