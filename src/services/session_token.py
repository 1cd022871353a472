"""Stateless session tokens: HS256-signed JWTs carrying user identity.

Token layout: base64url(header) "." base64url(payload) "." base64url(signature),
no padding. The payload holds ``userId``, ``email``, ``iat`` and ``exp`` as
integer epoch seconds. Signing and the constant-time HMAC comparison are
delegated to python-jose; expiry is checked here against the caller's clock so
verification stays a pure function of (token, secret, now).
"""

import binascii
import json
import logging
from datetime import datetime, timedelta, timezone

from jose import jwk, jws
from jose.utils import base64url_decode

from domain.model.errors import ExpiredTokenError, InvalidSignatureError, MalformedTokenError
from domain.model.session import SessionClaims
from utils.clock import utc_now

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(days=30)


def issue_token(user_id: str, email: str, secret: str, now: datetime | None = None) -> str:
    """Create a signed session token valid for TOKEN_LIFETIME from now."""
    issued_at = int((now or utc_now()).timestamp())
    payload = {
        "userId": user_id,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + int(TOKEN_LIFETIME.total_seconds()),
    }
    return jws.sign(payload, secret, algorithm=TOKEN_ALGORITHM)


def verify_token(token: str, secret: str, now: datetime | None = None) -> SessionClaims:
    """Verify signature and expiry, returning the embedded claims.

    The signature is checked over the raw ``header.payload`` text before
    anything is decoded, so any change to those segments is a signature
    failure rather than a parse failure.

    Raises:
        MalformedTokenError: not three segments, or a correctly signed
            payload that does not decode to the expected claims
        InvalidSignatureError: signature does not match header and payload
        ExpiredTokenError: expiry is at or before now
    """
    if not token or token.count(".") != 2:
        raise MalformedTokenError("Token must have three segments")

    signing_input, _, signature_segment = token.rpartition(".")
    if not _signature_matches(signing_input, signature_segment, secret):
        raise InvalidSignatureError("Invalid token signature")

    claims = _parse_claims(signing_input.split(".")[1])

    current = (now or utc_now()).timestamp()
    if current >= claims.expires_at.timestamp():
        raise ExpiredTokenError("Token expired")

    return claims


def _signature_matches(signing_input: str, signature_segment: str, secret: str) -> bool:
    try:
        signature = base64url_decode(signature_segment.encode("ascii"))
    except (binascii.Error, ValueError) as e:
        logger.debug(f"Token signature could not be decoded: {e}")
        return False
    key = jwk.construct(secret, algorithm=TOKEN_ALGORITHM)
    return key.verify(signing_input.encode("utf-8"), signature)


def _parse_claims(payload_segment: str) -> SessionClaims:
    try:
        payload = json.loads(base64url_decode(payload_segment.encode("ascii")))
        return SessionClaims(
            user_id=str(payload["userId"]),
            email=str(payload["email"]),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
    except (ValueError, TypeError, KeyError, binascii.Error):
        raise MalformedTokenError("Token payload is invalid")
