from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from gigmarket.models.enums import UserRole
from gigmarket.models.user import User


class Location(BaseModel):
    country: Optional[str] = Field(default=None, max_length=100)
    city: Optional[str] = Field(default=None, max_length=100)


class Rating(BaseModel):
    average: float = Field(default=0.0, ge=0, le=5)
    count: int = Field(default=0, ge=0)


class UserPublic(BaseModel):
    """
    Everything a client may see about an account. Password hash, refresh
    token and reset fields are deliberately absent.
    """

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: UserRole
    profile_picture: str = ""
    bio: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    hourly_rate: Optional[float] = None
    location: Location = Field(default_factory=Location)
    rating: Rating = Field(default_factory=Rating)
    total_earnings: float = 0.0
    completed_projects: int = 0
    is_active: bool = True
    is_verified: bool = False
    is_email_verified: bool = False
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=UserRole(user.role),
            profile_picture=user.profile_picture or "",
            bio=user.bio,
            skills=list(user.skills or []),
            hourly_rate=user.hourly_rate,
            location=Location(**(user.location or {})),
            rating=Rating(average=user.rating_average or 0.0, count=user.rating_count or 0),
            total_earnings=user.total_earnings or 0.0,
            completed_projects=user.completed_projects or 0,
            is_active=user.is_active,
            is_verified=user.is_verified,
            is_email_verified=user.is_email_verified,
            last_login=user.last_login,
            created_at=user.created_at,
        )

