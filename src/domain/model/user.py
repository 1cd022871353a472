from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AuthProvider(str, Enum):
    """How a user proves their identity."""
    PASSWORD = 'password'
    FEDERATED = 'federated'


@dataclass
class User:
    """Domain model representing a user.

    Password users always carry a non-empty password_hash;
    federated users may have none.
    """
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None = None
    password_hash: str | None = None
    photo_url: str | None = None
    provider: AuthProvider = AuthProvider.PASSWORD
