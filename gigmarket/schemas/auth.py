from __future__ import annotations

import re
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, EmailStr, Field, field_validator, model_validator

from gigmarket.models.enums import UserRole
from gigmarket.schemas.users import Location, UserPublic

_NAME_RE = re.compile(r"^[a-zA-Z\s]+$")


def _check_password_strength(value: str) -> str:
    if len(value) < 6:
        raise ValueError("Password must be at least 6 characters long")
    if not (re.search(r"[a-z]", value) and re.search(r"[A-Z]", value) and re.search(r"\d", value)):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, and one number"
        )
    return value


def _check_name(value: str) -> str:
    value = value.strip()
    if not 2 <= len(value) <= 50:
        raise ValueError("Name must be between 2 and 50 characters long")
    if not _NAME_RE.match(value):
        raise ValueError("Name can only contain letters and spaces")
    return value


StrongPassword = Annotated[str, AfterValidator(_check_password_strength)]
PersonName = Annotated[str, AfterValidator(_check_name)]


class RegisterRequest(BaseModel):
    email: EmailStr
    password: StrongPassword
    confirm_password: str
    first_name: PersonName
    last_name: PersonName
    role: UserRole
    bio: Optional[str] = Field(default=None, max_length=1000)
    skills: List[str] = Field(default_factory=list, max_length=20)
    hourly_rate: Optional[float] = Field(default=None, ge=5, le=1000)
    location: Optional[Location] = None

    @field_validator("skills")
    @classmethod
    def _skills(cls, v: List[str]) -> List[str]:
        skills = [s.strip() for s in v if s and s.strip()]
        if any(len(s) > 50 for s in skills):
            raise ValueError("Skill name cannot exceed 50 characters")
        return skills

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    remember_me: bool = False


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: StrongPassword
    confirm_new_password: str

    @model_validator(mode="after")
    def _passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_new_password:
            raise ValueError("New passwords do not match")
        return self


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: StrongPassword
    confirm_new_password: str

    @model_validator(mode="after")
    def _passwords_match(self) -> "ResetPasswordRequest":
        if self.new_password != self.confirm_new_password:
            raise ValueError("Passwords do not match")
        return self


class ProfileUpdateRequest(BaseModel):
    first_name: Optional[PersonName] = None
    last_name: Optional[PersonName] = None
    bio: Optional[str] = Field(default=None, max_length=1000)
    skills: Optional[List[str]] = Field(default=None, max_length=20)
    hourly_rate: Optional[float] = Field(default=None, ge=5, le=1000)
    location: Optional[Location] = None


class AuthResponse(BaseModel):
    user: UserPublic
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
