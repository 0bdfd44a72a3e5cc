# finance_copilot/core/sessions.py

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from finance_copilot.core.errors import AuthError


logger = logging.getLogger(__name__)

DEFAULT_TOKEN_LIFETIME = timedelta(hours=24)


@dataclass(frozen=True)
class SessionClaims:
    user_id: int
    username: str


class SessionIssuer:
    """Issues and verifies signed bearer tokens (JWT)."""

    def __init__(self, secret_key: str, algorithm: str = "HS256",
                 lifetime: timedelta = DEFAULT_TOKEN_LIFETIME):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, user_id: int, username: str, expires_delta: Optional[timedelta] = None) -> str:
        issued_at = datetime.now(timezone.utc)
        expire = issued_at + (expires_delta if expires_delta is not None else self.lifetime)
        claims = {
            "sub": str(user_id),
            "userId": user_id,
            "username": username,
            "iat": issued_at,
            "exp": expire,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> SessionClaims:
        if not token:
            raise AuthError(AuthError.MISSING)

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info("Token verification failed: %s", e)
            raise AuthError(AuthError.INVALID) from e

        user_id = payload.get("userId")
        username = payload.get("username")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or not username:
            logger.info("Token verification failed: missing claims")
            raise AuthError(AuthError.INVALID)

        return SessionClaims(user_id=user_id, username=username)
