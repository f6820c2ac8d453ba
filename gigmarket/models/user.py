# gigmarket/models/user.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String, Text, Uuid, func, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from gigmarket.db.base import Base

JSONDoc = JSON().with_variant(JSONB(), "postgresql")


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # stored lower-cased; uniqueness is therefore case-insensitive
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)

    # 👤 PROFILE
    profile_picture: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    skills: Mapped[List[str]] = mapped_column(JSONDoc, nullable=False, default=list)
    hourly_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    location: Mapped[Dict[str, Any]] = mapped_column(JSONDoc, nullable=False, default=dict)

    rating_average: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_earnings: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    completed_projects: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # 🔐 ACCOUNT FLAGS
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # 🔐 TOKENS (never serialized)
    refresh_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    password_reset_token: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    password_reset_expires: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("ix_users_role", "role"),
        Index("ix_users_rating_average", "rating_average"),
    )

    def clear_reset_token(self) -> None:
        # the pair is always set or cleared together
        self.password_reset_token = None
        self.password_reset_expires = None
