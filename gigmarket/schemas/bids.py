from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from gigmarket.models.enums import BidStatus
from gigmarket.schemas.primitives import AttachmentUrl, DeliveryDays, Money, Proposal


class BidCreateRequest(BaseModel):
    gig_id: uuid.UUID
    amount: Money
    delivery_time: DeliveryDays
    proposal: Proposal
    attachments: List[AttachmentUrl] = Field(default_factory=list, max_length=3)


class BidUpdateRequest(BaseModel):
    """Content patch; status is never patchable here."""

    amount: Optional[Money] = None
    delivery_time: Optional[DeliveryDays] = None
    proposal: Optional[Proposal] = None
    attachments: Optional[List[AttachmentUrl]] = Field(default=None, max_length=3)


class BidStatusRequest(BaseModel):
    status: Literal["accepted", "rejected"]


class BidQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=50)
    status: Optional[BidStatus] = None
    gig_id: Optional[uuid.UUID] = None
    sort_by: Literal["created_at", "amount", "delivery_time"] = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"


class BidResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    gig_id: uuid.UUID
    freelancer_id: uuid.UUID
    client_id: uuid.UUID
    amount: float
    delivery_time: int
    proposal: str
    attachments: List[str] = Field(default_factory=list)
    status: BidStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BidPage(BaseModel):
    items: List[BidResponse]
    total: int
    page: int
    limit: int
    total_pages: int
