#gigmarket/api/v1/bids.py
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gigmarket.core.auth_deps import get_current_principal
from gigmarket.core.deps import get_bid_service
from gigmarket.db.session import get_db
from gigmarket.policies.rbac import (
    ACTION_PLACE_BID,
    ACTION_REVIEW_BIDS,
    Principal,
    require_action,
)
from gigmarket.schemas.bids import (
    BidCreateRequest,
    BidPage,
    BidQuery,
    BidResponse,
    BidStatusRequest,
    BidUpdateRequest,
)
from gigmarket.services.bid_service import BidService

router = APIRouter(prefix="/bids")


# ─────────────────────────────────────────────────────────────
# FREELANCER
# ─────────────────────────────────────────────────────────────

@router.post("", response_model=BidResponse, status_code=status.HTTP_201_CREATED)
def place_bid(
    req: BidCreateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: BidService = Depends(get_bid_service),
):
    require_action(principal, ACTION_PLACE_BID)
    return svc.create(
        db,
        gig_id=req.gig_id,
        freelancer_id=principal.user_id,
        amount=req.amount,
        delivery_time=req.delivery_time,
        proposal=req.proposal,
        attachments=req.attachments,
    )


@router.put("/{bid_id}", response_model=BidResponse)
def update_bid(
    bid_id: uuid.UUID,
    req: BidUpdateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: BidService = Depends(get_bid_service),
):
    require_action(principal, ACTION_PLACE_BID)
    return svc.update_content(
        db,
        bid_id=bid_id,
        freelancer_id=principal.user_id,
        patch=req.model_dump(exclude_unset=True),
    )


@router.delete("/{bid_id}", response_model=BidResponse)
def withdraw_bid(
    bid_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: BidService = Depends(get_bid_service),
):
    require_action(principal, ACTION_PLACE_BID)
    return svc.withdraw(db, bid_id=bid_id, freelancer_id=principal.user_id)


# ─────────────────────────────────────────────────────────────
# GIG OWNER
# ─────────────────────────────────────────────────────────────

@router.patch("/{bid_id}/status", response_model=BidResponse)
def set_bid_status(
    bid_id: uuid.UUID,
    req: BidStatusRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: BidService = Depends(get_bid_service),
):
    require_action(principal, ACTION_REVIEW_BIDS)
    return svc.set_status(
        db,
        bid_id=bid_id,
        client_id=principal.user_id,
        new_status=req.status,
    )


# ─────────────────────────────────────────────────────────────
# READS
# ─────────────────────────────────────────────────────────────

@router.get("", response_model=BidPage)
def list_my_bids(
    query: Annotated[BidQuery, Query()],
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: BidService = Depends(get_bid_service),
):
    items, meta = svc.list_for_user(
        db,
        user_id=principal.user_id,
        role=principal.role,
        page=query.page,
        limit=query.limit,
        status=query.status,
        gig_id=query.gig_id,
        sort_by=query.sort_by,
        sort_order=query.sort_order,
    )
    return BidPage(items=[BidResponse.model_validate(b) for b in items], **meta)


@router.get("/{bid_id}", response_model=BidResponse)
def get_bid(
    bid_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: BidService = Depends(get_bid_service),
):
    return svc.get(db, bid_id=bid_id, user_id=principal.user_id)
