from __future__ import annotations

import uuid

from gigmarket.core.errors import BadRequest, NotFound
from gigmarket.models.bid import Bid
from gigmarket.models.enums import BidStatus
from gigmarket.models.gig import Gig


def ensure_gig_open_for_bids(gig: Gig | None) -> Gig:
    if gig is None:
        raise NotFound("Gig not found or is not active", reason="missing")
    if not gig.is_active:
        raise NotFound("Gig not found or is not active", reason="inactive")
    return gig


def ensure_not_own_gig(gig: Gig, freelancer_id: uuid.UUID) -> None:
    if gig.freelancer_id == freelancer_id:
        raise BadRequest("You cannot bid on your own gig")


def ensure_pending_bid_of(bid: Bid | None, actor_id: uuid.UUID, *, as_client: bool, message: str) -> Bid:
    """
    Bid must exist, belong to `actor_id` (as freelancer or as client) and
    still be pending. Every failure surfaces as the same NotFound.
    """
    if bid is None:
        raise NotFound(message, reason="missing")
    owner = bid.client_id if as_client else bid.freelancer_id
    if owner != actor_id:
        raise NotFound(message, reason="forbidden")
    if bid.status != BidStatus.pending.value:
        raise NotFound(message, reason="not_pending")
    return bid


def ensure_bid_visible(bid: Bid | None, user_id: uuid.UUID) -> Bid:
    if bid is None:
        raise NotFound("Bid not found", reason="missing")
    if user_id not in (bid.freelancer_id, bid.client_id):
        raise NotFound("Bid not found", reason="forbidden")
    return bid
