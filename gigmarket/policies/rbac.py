#gigmarket/policies/rbac.py
from __future__ import annotations
from dataclasses import dataclass
import uuid
from typing import Set

from gigmarket.core.errors import Forbidden
from gigmarket.models.enums import UserRole


@dataclass(frozen=True)
class Principal:
    user_id: uuid.UUID
    email: str
    role: UserRole


# --- Core action constants ---
ACTION_CREATE_GIG = "CREATE_GIG"
ACTION_PLACE_BID = "PLACE_BID"
ACTION_REVIEW_BIDS = "REVIEW_BIDS"


def allowed_actions(role: UserRole) -> Set[str]:
    """
    Pure RBAC: which actions a role may attempt.
    Ownership (whose gig, whose bid) is checked by the services.
    """

    if role == UserRole.freelancer:
        # gig owners are freelancers, so they also review bids on their gigs
        return {ACTION_CREATE_GIG, ACTION_PLACE_BID, ACTION_REVIEW_BIDS}

    if role == UserRole.client:
        return {ACTION_REVIEW_BIDS}

    return set()


def require_action(principal: Principal, action: str) -> None:
    if action not in allowed_actions(principal.role):
        raise Forbidden(
            f"Role {principal.role.value} not permitted for action {action}."
        )
