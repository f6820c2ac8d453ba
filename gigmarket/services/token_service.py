# gigmarket/services/token_service.py
from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.orm import Session

from gigmarket.core.clock import Clock, system_clock
from gigmarket.core.config import Settings
from gigmarket.core.errors import Unauthorized
from gigmarket.core.security import generate_reset_token, sha256_hex
from gigmarket.models.user import User

ACCESS = "access"
REFRESH = "refresh"


class TokenService:
    """
    Signs and checks access/refresh JWTs and mints password-reset tokens.

    Access and refresh tokens use separate secrets, so one can never be
    replayed as the other. Expiry is checked against the injected clock
    rather than the wall clock jose would use.
    """

    def __init__(self, settings: Settings, clock: Optional[Clock] = None):
        self.algorithm = settings.jwt_algorithm
        self.access_secret = settings.jwt_secret_key
        self.refresh_secret = settings.jwt_refresh_secret_key
        self.access_ttl = timedelta(minutes=settings.jwt_access_token_minutes)
        self.refresh_ttl = timedelta(days=settings.jwt_refresh_token_days)
        self.reset_ttl = timedelta(minutes=settings.password_reset_token_minutes)
        self.clock = clock or system_clock

    # -----------------------------------------------------------------
    # signing
    # -----------------------------------------------------------------

    def _encode(self, claims: Dict[str, Any], secret: str, ttl: timedelta) -> str:
        now = self.clock.now()
        payload = {
            **claims,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode(self, token: str, secret: str, expected_type: str) -> Dict[str, Any]:
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            raise Unauthorized("Invalid or expired token")

        exp = claims.get("exp")
        if not isinstance(exp, int) or exp <= int(self.clock.now().timestamp()):
            raise Unauthorized("Invalid or expired token")
        if claims.get("type") != expected_type or not claims.get("userId"):
            raise Unauthorized("Invalid or expired token")
        return claims

    def issue_access_token(self, user_id: uuid.UUID, email: str, role: str) -> str:
        return self._encode(
            {
                "sub": str(user_id),
                "userId": str(user_id),
                "email": email,
                "role": role,
                "type": ACCESS,
            },
            self.access_secret,
            self.access_ttl,
        )

    def issue_refresh_token(self, user_id: uuid.UUID) -> str:
        # jti keeps two tokens minted in the same second distinct
        return self._encode(
            {
                "sub": str(user_id),
                "userId": str(user_id),
                "type": REFRESH,
                "jti": uuid.uuid4().hex,
            },
            self.refresh_secret,
            self.refresh_ttl,
        )

    def issue_token_pair(self, user: User) -> Tuple[str, str]:
        return (
            self.issue_access_token(user.id, user.email, user.role),
            self.issue_refresh_token(user.id),
        )

    # -----------------------------------------------------------------
    # verification
    # -----------------------------------------------------------------

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        return self._decode(token, self.access_secret, ACCESS)

    def verify_refresh_token(self, token: str, db: Session) -> uuid.UUID:
        """
        Signature + expiry, and the token must be the one currently stored
        on an active user. A rotated-out token fails here.
        """
        claims = self._decode(token, self.refresh_secret, REFRESH)
        try:
            user_id = uuid.UUID(str(claims["userId"]))
        except ValueError:
            raise Unauthorized("Invalid refresh token")

        user = db.execute(
            select(User).where(
                User.id == user_id,
                User.refresh_token == token,
                User.is_active.is_(True),
            )
        ).scalar_one_or_none()
        if user is None:
            raise Unauthorized("Invalid refresh token")
        return user.id

    # -----------------------------------------------------------------
    # password reset
    # -----------------------------------------------------------------

    def issue_reset_token(self) -> Tuple[str, str]:
        return generate_reset_token()

    @staticmethod
    def hash_reset_token(plain: str) -> str:
        return sha256_hex(plain)

    def reset_token_expiry(self):
        return self.clock.now() + self.reset_ttl
