from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SessionClaims:
    """Identity claims carried inside a signed session token (Value Object)."""
    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime
