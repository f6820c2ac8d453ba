#gigmarket/core/auth_deps.py
from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from gigmarket.core.deps import get_token_service
from gigmarket.core.errors import Unauthorized
from gigmarket.db.session import get_db
from gigmarket.models.enums import UserRole
from gigmarket.models.user import User
from gigmarket.policies.rbac import Principal
from gigmarket.services.token_service import TokenService

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def _principal_from_token(token: str, db: Session, tokens: TokenService) -> Principal:
    claims = tokens.verify_access_token(token)

    try:
        user_id = uuid.UUID(str(claims["userId"]))
        role = UserRole(claims.get("role"))
    except ValueError:
        raise Unauthorized("Invalid or expired token")

    # token may outlive the account; re-check it on every request
    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise Unauthorized("User no longer exists or is inactive")

    return Principal(user_id=user.id, email=user.email, role=role)


def get_current_principal(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> Principal:
    """
    Canonical authentication dependency.

    Guarantees:
    - bearer access token is present, signed and unexpired
    - the user it names still exists and is active
    """
    if creds is None or not creds.credentials:
        raise Unauthorized("Access token is required")

    principal = _principal_from_token(creds.credentials, db, tokens)

    # Make principal available to downstream middleware / handlers
    request.state.principal = principal
    return principal


def get_optional_principal(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[Principal]:
    """
    Public endpoints that read better with a user context. A bad token is
    logged and the request continues anonymously.
    """
    if creds is None or not creds.credentials:
        return None
    try:
        principal = _principal_from_token(creds.credentials, db, tokens)
    except Unauthorized as exc:
        logger.warning("optional auth: ignoring token", extra={"reason": exc.message})
        return None

    request.state.principal = principal
    return principal
