"""MongoDB implementation of ResetTokenRepository."""

from datetime import datetime
from logging import getLogger

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb.connection import RESET_TOKENS_COLLECTION_NAME
from domain.model.password_reset import PasswordResetToken

logger = getLogger(__name__)

# Expired tokens are purged by MongoDB one day after expiry
EXPIRED_TOKEN_RETENTION_SECONDS = 86400


class MongoResetTokenRepository:
    def __init__(self, db: Database):
        self.collection = db[RESET_TOKENS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('token', 1)], 'idx_reset_tokens_token', unique=True)
            create_index_safe(self.collection, [('user_id', 1)], 'idx_reset_tokens_user_id')
            create_index_safe(
                self.collection,
                [('expires_at', 1)],
                'idx_reset_tokens_expires_at',
                expireAfterSeconds=EXPIRED_TOKEN_RETENTION_SECONDS,
            )
            return True
        except Exception as e:
            logger.error("Failed to create reset token indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> PasswordResetToken:
        return PasswordResetToken(
            id=doc['_id'],
            user_id=doc['user_id'],
            token=doc['token'],
            expires_at=doc['expires_at'],
            created_at=doc['created_at'],
            used=doc.get('used', False),
        )

    # ── write operations ─────────────────────────────────────

    def insert(self, record: PasswordResetToken) -> bool:
        try:
            self.collection.insert_one({
                '_id': record.id,
                'user_id': record.user_id,
                'token': record.token,
                'expires_at': record.expires_at,
                'created_at': record.created_at,
                'used': record.used,
            })
            return True
        except PyMongoError as e:
            logger.error("Failed to insert reset token", extra={"userId": record.user_id, "error": str(e)})
            return False

    def claim_active(self, token: str, now: datetime) -> PasswordResetToken | None:
        """Flip an unused, unexpired token to used in a single update."""
        try:
            doc = self.collection.find_one_and_update(
                {'token': token, 'used': False, 'expires_at': {'$gt': now}},
                {'$set': {'used': True}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to claim reset token", extra={"error": str(e)})
            raise
        return self._to_domain(doc) if doc else None

    def delete_for_user(self, user_id: str, exclude_id: str | None = None) -> int:
        query: dict = {'user_id': user_id}
        if exclude_id is not None:
            query['_id'] = {'$ne': exclude_id}
        try:
            result = self.collection.delete_many(query)
        except PyMongoError as e:
            logger.error("Failed to delete reset tokens", extra={"userId": user_id, "error": str(e)})
            raise
        return result.deleted_count
