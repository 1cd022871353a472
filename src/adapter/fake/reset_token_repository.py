"""In-memory implementation of ResetTokenRepository for testing."""

import threading
from datetime import datetime

from domain.model.password_reset import PasswordResetToken


class FakeResetTokenRepository:
    def __init__(self):
        self.store: dict[str, PasswordResetToken] = {}
        self._lock = threading.Lock()

    # ── write operations ─────────────────────────────────────

    def insert(self, record: PasswordResetToken) -> bool:
        with self._lock:
            if record.id in self.store:
                return False
            if any(r.token == record.token for r in self.store.values()):
                return False
            self.store[record.id] = record
            return True

    def claim_active(self, token: str, now: datetime) -> PasswordResetToken | None:
        with self._lock:
            for record in self.store.values():
                if record.token == token and record.is_active(now):
                    record.used = True
                    return record
            return None

    def delete_for_user(self, user_id: str, exclude_id: str | None = None) -> int:
        with self._lock:
            doomed = [
                r.id for r in self.store.values()
                if r.user_id == user_id and r.id != exclude_id
            ]
            for token_id in doomed:
                del self.store[token_id]
            return len(doomed)

    # ── read operations ──────────────────────────────────────

    def find_by_user(self, user_id: str) -> list[PasswordResetToken]:
        with self._lock:
            return [r for r in self.store.values() if r.user_id == user_id]
