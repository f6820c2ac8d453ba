#gigmarket/api/v1/auth.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from gigmarket.core.auth_deps import get_current_principal
from gigmarket.core.config import Settings, get_settings
from gigmarket.core.deps import get_auth_service
from gigmarket.core.errors import Unauthorized
from gigmarket.db.session import get_db
from gigmarket.policies.rbac import Principal
from gigmarket.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from gigmarket.schemas.users import UserPublic
from gigmarket.services.auth_service import AuthService

router = APIRouter(prefix="/auth")

DAY_SECONDS = 24 * 60 * 60


def _set_refresh_cookie(response: Response, settings: Settings, token: str, *, remember: bool = True) -> None:
    days = settings.refresh_cookie_remember_days if remember else settings.refresh_cookie_session_days
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=token,
        max_age=days * DAY_SECONDS,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def _clear_refresh_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(settings.refresh_cookie_name)


# ─────────────────────────────────────────────────────────────
# PUBLIC
# ─────────────────────────────────────────────────────────────

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    req: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
    svc: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    session = svc.register(db, req)
    _set_refresh_cookie(response, settings, session.refresh_token)
    return AuthResponse(
        user=session.user,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
    )


@router.post("/login", response_model=AuthResponse)
def login(
    req: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    svc: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    session = svc.login(db, req.email, req.password, req.remember_me)
    _set_refresh_cookie(response, settings, session.refresh_token, remember=req.remember_me)
    return AuthResponse(
        user=session.user,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
    )


@router.post("/refresh-token", response_model=TokenResponse)
def refresh_token(
    request: Request,
    response: Response,
    req: Optional[RefreshRequest] = None,
    db: Session = Depends(get_db),
    svc: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    token = request.cookies.get(settings.refresh_cookie_name) or (req.refresh_token if req else None)
    if not token:
        raise Unauthorized("Refresh token not provided")

    pair = svc.refresh(db, token)
    _set_refresh_cookie(response, settings, pair.refresh_token)
    return TokenResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/forgot-password")
def forgot_password(
    req: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    svc: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    token = svc.forgot_password(db, req.email)
    body = {"message": "Password reset link sent to your email"}
    if settings.expose_reset_token and not settings.is_production:
        body["reset_token"] = token
    return body


@router.post("/reset-password")
def reset_password(
    req: ResetPasswordRequest,
    db: Session = Depends(get_db),
    svc: AuthService = Depends(get_auth_service),
):
    svc.reset_password(db, req.token, req.new_password)
    return {"message": "Password reset successfully"}


# ─────────────────────────────────────────────────────────────
# AUTHENTICATED
# ─────────────────────────────────────────────────────────────

@router.post("/logout")
def logout(
    response: Response,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    svc.logout(db, principal.user_id)
    _clear_refresh_cookie(response, settings)
    return {"message": "Logout successful"}


@router.get("/profile", response_model=UserPublic)
def get_profile(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: AuthService = Depends(get_auth_service),
):
    return svc.get_profile(db, principal.user_id)


@router.put("/profile", response_model=UserPublic)
def update_profile(
    req: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: AuthService = Depends(get_auth_service),
):
    return svc.update_profile(db, principal.user_id, req)


@router.put("/change-password")
def change_password(
    req: ChangePasswordRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: AuthService = Depends(get_auth_service),
):
    svc.change_password(db, principal.user_id, req.current_password, req.new_password)
    return {"message": "Password changed successfully"}


@router.delete("/deactivate")
def deactivate(
    response: Response,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    svc.deactivate(db, principal.user_id)
    _clear_refresh_cookie(response, settings)
    return {"message": "Account deactivated successfully"}
