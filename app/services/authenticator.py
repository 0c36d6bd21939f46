"""
Access token issuing/verification and credential hashing
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from app.core.config import config
from app.core.errors import Unauthenticated
from app.core.logger import logger
from app.models.user import User

HASH_SCHEME = "pbkdf2_sha256"


class Authenticator:
    """Issues and verifies signed access tokens with a fixed expiry"""

    def __init__(self, secret: str = None, algorithm: str = None,
                 expiration_seconds: int = None, hash_iterations: int = None):
        self.secret = secret or config.jwt_secret
        self.algorithm = algorithm or config.jwt_algorithm
        self.expiration_seconds = expiration_seconds or config.jwt_expiration
        self.hash_iterations = hash_iterations or config.password_hash_iterations

    def issue(self, identity: str, handle: Optional[str] = None) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": identity,
            "iat": now,
            "exp": now + timedelta(seconds=self.expiration_seconds),
        }
        if handle:
            payload["handle"] = handle
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> User:
        """
        Decode and validate a token.

        Raises:
            Unauthenticated: if the token is malformed, forged or expired
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise Unauthenticated("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}", metadata={"event": "invalid_token"})
            raise Unauthenticated("Invalid token")

        identity = payload.get("sub")
        if not identity:
            raise Unauthenticated("Invalid token: missing subject")
        return User(id=identity, handle=payload.get("handle"))

    def hash_secret(self, secret: str) -> str:
        salt = secrets.token_hex(16)
        digest = hashlib.pbkdf2_hmac(
            "sha256", secret.encode("utf-8"), salt.encode("utf-8"), self.hash_iterations
        )
        return f"{HASH_SCHEME}${self.hash_iterations}${salt}${digest.hex()}"

    def verify_secret(self, secret: str, stored: str) -> bool:
        try:
            scheme, iterations, salt, expected = stored.split("$")
        except (AttributeError, ValueError):
            return False
        if scheme != HASH_SCHEME:
            return False
        digest = hashlib.pbkdf2_hmac(
            "sha256", secret.encode("utf-8"), salt.encode("utf-8"), int(iterations)
        )
        return hmac.compare_digest(digest.hex(), expected)


authenticator = Authenticator()
