#gigmarket/services/bid_service.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import asc, desc, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gigmarket.core.errors import BadRequest, Conflict, NotFound
from gigmarket.core.pagination import paginate
from gigmarket.db.errors import is_unique_violation
from gigmarket.models.bid import Bid
from gigmarket.models.enums import BidStatus, UserRole
from gigmarket.models.gig import Gig
from gigmarket.policies.bid_policies import (
    ensure_bid_visible,
    ensure_gig_open_for_bids,
    ensure_not_own_gig,
    ensure_pending_bid_of,
)
from gigmarket.services.gig_service import GigService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("amount", "delivery_time", "proposal", "attachments")

SORT_COLUMNS = {
    "created_at": Bid.created_at,
    "amount": Bid.amount,
    "delivery_time": Bid.delivery_time,
}

UPDATE_DENIED = "Bid not found or cannot be updated (only pending bids can be updated)"
WITHDRAW_DENIED = "Bid not found or cannot be withdrawn (only pending bids can be withdrawn)"
DUPLICATE_BID = "You have already placed a bid on this gig"
UNIQUE_BID = "uq_bids_gig_freelancer"


class BidService:
    """
    Bid lifecycle.

        pending ──► accepted
           │──────► rejected
           └──────► withdrawn

    Only `pending` moves; the other states are terminal. Accepting a bid
    rejects every other pending bid on the same gig in the same transaction.
    """

    # -----------------------------------------------------------------
    # helpers
    # -----------------------------------------------------------------

    def _get_bid_for_update(self, db: Session, bid_id: uuid.UUID) -> Optional[Bid]:
        return db.execute(
            select(Bid).where(Bid.id == bid_id).with_for_update()
        ).scalar_one_or_none()

    def _has_bid(self, db: Session, gig_id: uuid.UUID, freelancer_id: uuid.UUID) -> bool:
        return db.execute(
            select(Bid.id).where(Bid.gig_id == gig_id, Bid.freelancer_id == freelancer_id)
        ).first() is not None

    def _transition(self, db: Session, bid: Bid, new_status: BidStatus, denied: str) -> None:
        """
        Conditional flip: only succeeds while the row is still pending.
        Guards against a sibling accept that rejected this bid concurrently.
        """
        flipped = db.execute(
            update(Bid)
            .where(Bid.id == bid.id, Bid.status == BidStatus.pending.value)
            .values(status=new_status.value)
        ).rowcount
        if flipped != 1:
            db.rollback()
            raise NotFound(denied, reason="not_pending")

    # -----------------------------------------------------------------
    # create / edit
    # -----------------------------------------------------------------

    def create(
        self,
        db: Session,
        *,
        gig_id: uuid.UUID,
        freelancer_id: uuid.UUID,
        amount: float,
        delivery_time: int,
        proposal: str,
        attachments: Optional[List[str]] = None,
    ) -> Bid:
        gig = ensure_gig_open_for_bids(db.get(Gig, gig_id))
        ensure_not_own_gig(gig, freelancer_id)

        if self._has_bid(db, gig_id, freelancer_id):
            raise Conflict(DUPLICATE_BID)

        bid = Bid(
            gig_id=gig.id,
            freelancer_id=freelancer_id,
            client_id=gig.freelancer_id,
            amount=amount,
            delivery_time=delivery_time,
            proposal=proposal,
            attachments=list(attachments or []),
            status=BidStatus.pending.value,
        )
        db.add(bid)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            # a concurrent request for the same pair got there first
            if is_unique_violation(exc, UNIQUE_BID, ("bids.gig_id", "bids.freelancer_id")):
                raise Conflict(DUPLICATE_BID)
            raise

        db.refresh(bid)
        logger.info(
            "bid created",
            extra={"bid_id": str(bid.id), "gig_id": str(gig.id), "freelancer_id": str(freelancer_id)},
        )
        return bid

    def update_content(
        self,
        db: Session,
        *,
        bid_id: uuid.UUID,
        freelancer_id: uuid.UUID,
        patch: Dict[str, Any],
    ) -> Bid:
        bid = ensure_pending_bid_of(
            self._get_bid_for_update(db, bid_id),
            freelancer_id,
            as_client=False,
            message=UPDATE_DENIED,
        )

        for field in EDITABLE_FIELDS:
            value = patch.get(field)
            if value is not None:
                setattr(bid, field, list(value) if field == "attachments" else value)

        db.commit()
        db.refresh(bid)
        return bid

    # -----------------------------------------------------------------
    # transitions
    # -----------------------------------------------------------------

    def set_status(
        self,
        db: Session,
        *,
        bid_id: uuid.UUID,
        client_id: uuid.UUID,
        new_status: BidStatus | str,
    ) -> Bid:
        """
        Client decision on a pending bid.

        accepted: reject the pending siblings on the gig, then accept this
        bid, and commit both together. The target row is locked first
        (FOR UPDATE where the backend supports it).
        rejected: no cascade.
        """
        try:
            status = BidStatus(new_status)
        except ValueError:
            raise BadRequest("Status must be either accepted or rejected")
        if status not in (BidStatus.accepted, BidStatus.rejected):
            raise BadRequest("Status must be either accepted or rejected")

        bid = ensure_pending_bid_of(
            self._get_bid_for_update(db, bid_id),
            client_id,
            as_client=True,
            message=UPDATE_DENIED,
        )

        cascaded = 0
        if status == BidStatus.accepted:
            cascaded = db.execute(
                update(Bid)
                .where(
                    Bid.gig_id == bid.gig_id,
                    Bid.status == BidStatus.pending.value,
                    Bid.id != bid.id,
                )
                .values(status=BidStatus.rejected.value)
            ).rowcount

        self._transition(db, bid, status, UPDATE_DENIED)
        db.commit()
        db.refresh(bid)

        logger.info(
            "bid status changed",
            extra={
                "bid_id": str(bid.id),
                "gig_id": str(bid.gig_id),
                "status": status.value,
                "siblings_rejected": cascaded,
            },
        )
        return bid

    def withdraw(self, db: Session, *, bid_id: uuid.UUID, freelancer_id: uuid.UUID) -> Bid:
        bid = ensure_pending_bid_of(
            self._get_bid_for_update(db, bid_id),
            freelancer_id,
            as_client=False,
            message=WITHDRAW_DENIED,
        )
        self._transition(db, bid, BidStatus.withdrawn, WITHDRAW_DENIED)
        db.commit()
        db.refresh(bid)
        logger.info("bid withdrawn", extra={"bid_id": str(bid.id)})
        return bid

    # -----------------------------------------------------------------
    # reads
    # -----------------------------------------------------------------

    def get(self, db: Session, *, bid_id: uuid.UUID, user_id: uuid.UUID) -> Bid:
        return ensure_bid_visible(db.get(Bid, bid_id), user_id)

    def list_for_user(
        self,
        db: Session,
        *,
        user_id: uuid.UUID,
        role: UserRole,
        page: int = 1,
        limit: int = 10,
        status: Optional[BidStatus] = None,
        gig_id: Optional[uuid.UUID] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Tuple[List[Bid], Dict[str, int]]:
        """
        Freelancers see the bids they placed; clients see bids addressed to them.
        """
        if role == UserRole.freelancer:
            stmt = select(Bid).where(Bid.freelancer_id == user_id)
        else:
            stmt = select(Bid).where(Bid.client_id == user_id)

        if status is not None:
            stmt = stmt.where(Bid.status == BidStatus(status).value)
        if gig_id is not None:
            stmt = stmt.where(Bid.gig_id == gig_id)

        column = SORT_COLUMNS.get(sort_by)
        if column is None:
            raise BadRequest(f"Cannot sort bids by {sort_by}")
        direction = asc if sort_order == "asc" else desc
        stmt = stmt.order_by(direction(column), direction(Bid.id))

        return paginate(db, stmt, page, limit)

    def list_for_gig(
        self,
        db: Session,
        *,
        gig_id: uuid.UUID,
        owner_id: uuid.UUID,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Bid], Dict[str, int]]:
        GigService().get_owned(db, gig_id, owner_id)
        stmt = (
            select(Bid)
            .where(Bid.gig_id == gig_id)
            .order_by(desc(Bid.created_at), desc(Bid.id))
        )
        return paginate(db, stmt, page, limit)
