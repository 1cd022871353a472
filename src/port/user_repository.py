from typing import Protocol
from domain.model.user import AuthProvider, User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access."""
    def create(
        self,
        email: str,
        name: str,
        password_hash: str | None = None,
        provider: AuthProvider = AuthProvider.PASSWORD,
        photo_url: str | None = None,
    ) -> User | None:
        """Create a new user. Return User or None if the email is taken or creation failed."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def update_fields(self, user_id: str, **fields) -> bool:
        """Set the given fields and bump updated_at. Return True if the user exists."""
        ...

    def update_last_login(self, user_id: str) -> bool:
        """Update the last login timestamp for a user. Return True if successful."""
        ...
