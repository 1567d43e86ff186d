"""
Password hashing and signed session tokens.

Tokens are compact HS256 JWTs carrying the user id as ``sub``. Validation
failures never raise; they come back as ``Err(UNAUTHENTICATED)``.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from .results import Ok, Result, unauthenticated

logger = logging.getLogger(__name__)

HASH_METHOD = "pbkdf2:sha256"


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    username: str
    issued_at: int
    expires_at: int


def _base64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _base64url_decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


class CredentialService:
    def __init__(
        self,
        secret: str,
        expires_seconds: int = 3600,
        iterations: int = 120_000,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret.encode()
        self.expires_seconds = expires_seconds
        self.iterations = iterations
        self._clock = clock or time.time

    # Passwords
    def hash_password(self, password: str) -> str:
        return generate_password_hash(password, method=f"{HASH_METHOD}:{self.iterations}")

    def verify_password(self, password: str, encoded: str) -> bool:
        try:
            return check_password_hash(encoded, password)
        except ValueError:
            # Unknown hash method in a stored value.
            return False

    # Tokens
    def issue_token(self, user_id: int, username: str) -> str:
        now = int(self._clock())
        header = {"alg": "HS256", "typ": "JWT"}
        payload = {"sub": str(user_id), "username": username, "iat": now, "exp": now + self.expires_seconds}
        header_b64 = _base64url_encode(json.dumps(header, separators=(",", ":")).encode())
        payload_b64 = _base64url_encode(json.dumps(payload, separators=(",", ":")).encode())
        signature = self._sign(f"{header_b64}.{payload_b64}".encode())
        return f"{header_b64}.{payload_b64}.{_base64url_encode(signature)}"

    def validate_token(self, token: str) -> Result[TokenClaims]:
        try:
            header_b64, payload_b64, signature_b64 = token.split(".")
        except ValueError:
            return unauthenticated("invalid token structure")

        try:
            header = json.loads(_base64url_decode(header_b64))
            payload = json.loads(_base64url_decode(payload_b64))
            provided_sig = _base64url_decode(signature_b64)
        except (json.JSONDecodeError, ValueError):
            return unauthenticated("invalid token encoding")

        if not isinstance(header, dict) or header.get("alg") != "HS256":
            return unauthenticated("unsupported token algorithm")

        expected_sig = self._sign(f"{header_b64}.{payload_b64}".encode())
        if not hmac.compare_digest(expected_sig, provided_sig):
            logger.warning("Rejected token with invalid signature")
            return unauthenticated("invalid token signature")

        if not isinstance(payload, dict):
            return unauthenticated("invalid token payload")
        try:
            exp = float(payload["exp"])
        except (KeyError, TypeError, ValueError):
            return unauthenticated("token missing expiry")
        if self._clock() > exp:
            return unauthenticated("token expired")
        subject = payload.get("sub")
        try:
            user_id = int(subject)
        except (TypeError, ValueError):
            return unauthenticated("token missing subject")
        return Ok(
            TokenClaims(
                user_id=user_id,
                username=str(payload.get("username", "")),
                issued_at=int(payload.get("iat", 0)),
                expires_at=int(exp),
            )
        )

    def _sign(self, signing_input: bytes) -> bytes:
        return hmac.new(self._secret, signing_input, hashlib.sha256).digest()
