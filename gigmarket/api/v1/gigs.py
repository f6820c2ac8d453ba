#gigmarket/api/v1/gigs.py
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gigmarket.core.auth_deps import get_current_principal, get_optional_principal
from gigmarket.core.deps import get_bid_service, get_gig_service
from gigmarket.db.session import get_db
from gigmarket.policies.rbac import (
    ACTION_CREATE_GIG,
    ACTION_REVIEW_BIDS,
    Principal,
    require_action,
)
from gigmarket.schemas.bids import BidPage, BidResponse
from gigmarket.schemas.gigs import GigCreateRequest, GigResponse
from gigmarket.services.bid_service import BidService
from gigmarket.services.gig_service import GigService

router = APIRouter(prefix="/gigs")


@router.post("", response_model=GigResponse, status_code=status.HTTP_201_CREATED)
def create_gig(
    req: GigCreateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: GigService = Depends(get_gig_service),
):
    require_action(principal, ACTION_CREATE_GIG)
    gig = svc.create(db, owner_id=principal.user_id, data=req)
    return GigResponse.from_gig(gig)


@router.get("/{gig_id}", response_model=GigResponse)
def get_gig(
    gig_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_optional_principal),
    svc: GigService = Depends(get_gig_service),
):
    viewer_id = principal.user_id if principal else None
    return GigResponse.from_gig(svc.get(db, gig_id, viewer_id))


@router.delete("/{gig_id}", response_model=GigResponse)
def deactivate_gig(
    gig_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: GigService = Depends(get_gig_service),
):
    require_action(principal, ACTION_CREATE_GIG)
    gig = svc.deactivate(db, gig_id=gig_id, owner_id=principal.user_id)
    return GigResponse.from_gig(gig)


@router.get("/{gig_id}/bids", response_model=BidPage)
def list_gig_bids(
    gig_id: uuid.UUID,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    svc: BidService = Depends(get_bid_service),
):
    require_action(principal, ACTION_REVIEW_BIDS)
    items, meta = svc.list_for_gig(
        db, gig_id=gig_id, owner_id=principal.user_id, page=page, limit=limit
    )
    return BidPage(items=[BidResponse.model_validate(b) for b in items], **meta)
