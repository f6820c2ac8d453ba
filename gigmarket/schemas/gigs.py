from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gigmarket.models.enums import PricingType
from gigmarket.models.gig import Gig
from gigmarket.schemas.primitives import DeliveryDays, Money


class Pricing(BaseModel):
    type: PricingType
    amount: Money


class GigCreateRequest(BaseModel):
    title: str = Field(..., min_length=10, max_length=100)
    description: str = Field(..., min_length=50, max_length=1000)
    category: str = Field(..., min_length=1, max_length=64)
    subcategory: str = Field(..., min_length=1, max_length=64)
    tags: List[str] = Field(..., min_length=1, max_length=10)
    pricing: Pricing
    delivery_time: DeliveryDays
    revisions: int = Field(..., ge=0, le=10)

    @field_validator("tags")
    @classmethod
    def _strip_tags(cls, v: List[str]) -> List[str]:
        tags = [t.strip() for t in v if t and t.strip()]
        if not tags:
            raise ValueError("At least one tag is required")
        return tags


class GigResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    freelancer_id: uuid.UUID
    title: str
    description: str
    category: str
    subcategory: str
    tags: List[str]
    pricing: Pricing
    delivery_time: int
    revisions: int
    is_active: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_gig(cls, gig: Gig) -> "GigResponse":
        return cls(
            id=gig.id,
            freelancer_id=gig.freelancer_id,
            title=gig.title,
            description=gig.description,
            category=gig.category,
            subcategory=gig.subcategory,
            tags=list(gig.tags or []),
            pricing=Pricing(type=PricingType(gig.pricing_type), amount=gig.pricing_amount),
            delivery_time=gig.delivery_time,
            revisions=gig.revisions,
            is_active=gig.is_active,
            created_at=gig.created_at,
        )
