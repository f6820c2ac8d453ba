# gigmarket/services/auth_service.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gigmarket.core.clock import Clock, system_clock
from gigmarket.core.config import Settings
from gigmarket.core.errors import BadRequest, Conflict, NotFound, Unauthorized
from gigmarket.core.redaction import mask_email
from gigmarket.core.security import PasswordHasher
from gigmarket.db.errors import is_unique_violation
from gigmarket.models.user import User
from gigmarket.schemas.auth import ProfileUpdateRequest, RegisterRequest
from gigmarket.schemas.users import UserPublic
from gigmarket.services.token_service import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

# an explicit null clears these; every other profile field ignores null
CLEARABLE_PROFILE_FIELDS = ("bio", "hourly_rate")


@dataclass(frozen=True)
class AuthSession:
    user: UserPublic
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """
    Account and session lifecycle: register, login, logout, refresh,
    password change/reset, deactivation.

    A user holds at most one valid refresh token. Every login or refresh
    overwrites it, so any older refresh token stops verifying.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        hasher: Optional[PasswordHasher] = None,
        tokens: Optional[TokenService] = None,
        clock: Optional[Clock] = None,
    ):
        self.clock = clock or system_clock
        self.hasher = hasher or PasswordHasher(rounds=settings.bcrypt_rounds)
        self.tokens = tokens or TokenService(settings, clock=self.clock)

    # ---------------------------------------------------------------------
    # helpers
    # ---------------------------------------------------------------------

    def _get_user(self, db: Session, user_id: uuid.UUID) -> User:
        user = db.get(User, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def _find_active_by_email(self, db: Session, email: str) -> User | None:
        return db.execute(
            select(User).where(
                User.email == normalize_email(email),
                User.is_active.is_(True),
            )
        ).scalar_one_or_none()

    def _email_taken(self, db: Session, email: str) -> bool:
        return db.execute(select(User.id).where(User.email == email)).first() is not None

    def _start_session(self, db: Session, user: User) -> AuthSession:
        access, refresh = self.tokens.issue_token_pair(user)
        user.refresh_token = refresh
        db.commit()
        db.refresh(user)
        return AuthSession(
            user=UserPublic.from_user(user),
            access_token=access,
            refresh_token=refresh,
        )

    # ---------------------------------------------------------------------
    # registration / login
    # ---------------------------------------------------------------------

    def register(self, db: Session, data: RegisterRequest) -> AuthSession:
        email = normalize_email(data.email)

        if self._email_taken(db, email):
            raise Conflict("User already exists with this email", details={"field": "email"})

        user = User(
            email=email,
            password_hash=self.hasher.hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=data.role.value,
            bio=data.bio,
            skills=list(data.skills),
            hourly_rate=data.hourly_rate,
            location=data.location.model_dump(exclude_none=True) if data.location else {},
        )
        db.add(user)
        try:
            db.flush()
        except IntegrityError as exc:
            db.rollback()
            # lost a race with a concurrent registration for the same email
            if is_unique_violation(exc, "ix_users_email", ("users.email",)):
                raise Conflict("User already exists with this email", details={"field": "email"})
            raise

        session = self._start_session(db, user)
        logger.info("user registered", extra={"user_id": str(user.id), "email": mask_email(email)})
        return session

    def login(self, db: Session, email: str, password: str, remember_me: bool = False) -> AuthSession:
        """
        Unknown email, inactive account and wrong password all fail with the
        same error so the response cannot be used to enumerate accounts.
        `remember_me` is only a cookie-lifetime hint for the HTTP layer.
        """
        user = self._find_active_by_email(db, email)
        if not user or not self.hasher.verify(password, user.password_hash):
            logger.info("login failed", extra={"email": mask_email(normalize_email(email))})
            raise Unauthorized(INVALID_CREDENTIALS)

        user.last_login = self.clock.now()
        session = self._start_session(db, user)
        logger.info(
            "user logged in",
            extra={"user_id": str(user.id), "remember_me": remember_me},
        )
        return session

    def logout(self, db: Session, user_id: uuid.UUID) -> None:
        db.execute(update(User).where(User.id == user_id).values(refresh_token=None))
        db.commit()
        logger.info("user logged out", extra={"user_id": str(user_id)})

    def refresh(self, db: Session, refresh_token: str) -> TokenPair:
        """
        One-time-use rotation: the presented token is replaced even though
        it was valid. The swap is conditional on the stored value so two
        concurrent refreshes with the same token cannot both win.
        """
        user_id = self.tokens.verify_refresh_token(refresh_token, db)
        user = self._get_user(db, user_id)

        access, new_refresh = self.tokens.issue_token_pair(user)
        swapped = db.execute(
            update(User)
            .where(User.id == user_id, User.refresh_token == refresh_token)
            .values(refresh_token=new_refresh)
        ).rowcount
        if swapped != 1:
            db.rollback()
            raise Unauthorized("Invalid refresh token")

        db.commit()
        return TokenPair(access_token=access, refresh_token=new_refresh)

    # ---------------------------------------------------------------------
    # passwords
    # ---------------------------------------------------------------------

    def change_password(
        self, db: Session, user_id: uuid.UUID, current_password: str, new_password: str
    ) -> None:
        user = self._get_user(db, user_id)
        if not self.hasher.verify(current_password, user.password_hash):
            raise BadRequest("Current password is incorrect")

        user.password_hash = self.hasher.hash(new_password)
        db.commit()
        logger.info("password changed", extra={"user_id": str(user.id)})

    def forgot_password(self, db: Session, email: str) -> str:
        """
        Returns the plaintext reset token for out-of-band delivery.
        Only its hash and a short expiry are stored on the user.
        """
        user = self._find_active_by_email(db, email)
        if not user:
            raise NotFound("No user found with this email address")

        plain, hashed = self.tokens.issue_reset_token()
        user.password_reset_token = hashed
        user.password_reset_expires = self.tokens.reset_token_expiry()
        db.commit()

        logger.info("password reset requested", extra={"user_id": str(user.id)})
        return plain

    def reset_password(self, db: Session, token: str, new_password: str) -> None:
        hashed = self.tokens.hash_reset_token(token)
        user = db.execute(
            select(User).where(
                User.password_reset_token == hashed,
                User.password_reset_expires > self.clock.now(),
                User.is_active.is_(True),
            )
        ).scalar_one_or_none()
        if not user:
            raise BadRequest("Invalid or expired reset token")

        user.password_hash = self.hasher.hash(new_password)
        user.clear_reset_token()
        db.commit()
        logger.info("password reset completed", extra={"user_id": str(user.id)})

    # ---------------------------------------------------------------------
    # account
    # ---------------------------------------------------------------------

    def deactivate(self, db: Session, user_id: uuid.UUID) -> None:
        """
        Access tokens already issued stay cryptographically valid until they
        expire; the auth dependency rejects them because the user is inactive.
        """
        db.execute(
            update(User)
            .where(User.id == user_id)
            .values(is_active=False, refresh_token=None)
        )
        db.commit()
        logger.info("account deactivated", extra={"user_id": str(user_id)})

    def get_profile(self, db: Session, user_id: uuid.UUID) -> UserPublic:
        return UserPublic.from_user(self._get_user(db, user_id))

    def update_profile(self, db: Session, user_id: uuid.UUID, patch: ProfileUpdateRequest) -> UserPublic:
        user = self._get_user(db, user_id)

        changes = {
            field: value
            for field, value in patch.model_dump(exclude_unset=True).items()
            if value is not None or field in CLEARABLE_PROFILE_FIELDS
        }
        if "location" in changes:
            changes["location"] = patch.location.model_dump(exclude_none=True)
        for field, value in changes.items():
            setattr(user, field, value)

        db.commit()
        db.refresh(user)
        logger.info("profile updated", extra={"user_id": str(user.id), "fields": sorted(changes)})
        return UserPublic.from_user(user)
