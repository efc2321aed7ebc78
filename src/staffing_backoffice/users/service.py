from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_ACCESS_TOKEN_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    """What a valid access token resolves to."""

    user_id: int
    full_name: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class TokenService:
    """Issues and verifies signed access tokens (claims: sub, role, exp)."""

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        expire_minutes: int = DEFAULT_ACCESS_TOKEN_MINUTES,
    ):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = int(expire_minutes)

    @property
    def expires_in(self) -> int:
        return self._expire_minutes * 60

    def issue(self, user: AuthenticatedUser, *, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user.user_id),
            "name": user.full_name,
            "role": user.role.value,
            "exp": now + timedelta(minutes=self._expire_minutes),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> AuthenticatedUser:
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
            return AuthenticatedUser(
                user_id=int(claims["sub"]),
                full_name=claims.get("name", ""),
                role=Role(claims["role"]),
            )
        except (JWTError, KeyError, ValueError) as exc:
            raise AuthenticationError("Could not validate credentials") from exc


class AuthService:
    """Use case: authenticate user (login) and hand out an access token."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def authenticate(self, username: str, password: str) -> AuthenticatedUser:
        username = require_non_empty(username, "username")
        user = self._users.get_by_username(username)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hash
            ok = False

        if not ok:
            logger.info("Failed login for %s", username)
            raise AuthenticationError("Invalid username or password")

        return AuthenticatedUser(user_id=user.user_id, full_name=user.full_name, role=user.role)

    def login(self, username: str, password: str) -> dict:
        user = self.authenticate(username, password)
        return {
            "access_token": self._tokens.issue(user),
            "token_type": "bearer",
            "expires_in": self._tokens.expires_in,
        }

    def current_user(self, token: str) -> AuthenticatedUser:
        return self._tokens.verify(token)

    @staticmethod
    def require_admin(user: AuthenticatedUser) -> None:
        if not user.is_admin:
            raise AuthorizationError("Admin role required")
