from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from gigmarket.core.errors import NotFound
from gigmarket.models.gig import Gig
from gigmarket.schemas.gigs import GigCreateRequest

logger = logging.getLogger(__name__)


class GigService:
    def create(self, db: Session, *, owner_id: uuid.UUID, data: GigCreateRequest) -> Gig:
        gig = Gig(
            freelancer_id=owner_id,
            title=data.title.strip(),
            description=data.description,
            category=data.category.strip(),
            subcategory=data.subcategory.strip(),
            tags=list(data.tags),
            pricing_type=data.pricing.type.value,
            pricing_amount=data.pricing.amount,
            delivery_time=data.delivery_time,
            revisions=data.revisions,
        )
        db.add(gig)
        db.commit()
        db.refresh(gig)
        logger.info("gig created", extra={"gig_id": str(gig.id), "owner_id": str(owner_id)})
        return gig

    def get(self, db: Session, gig_id: uuid.UUID, viewer_id: Optional[uuid.UUID] = None) -> Gig:
        """
        Inactive gigs are only visible to their owner.
        """
        gig = db.get(Gig, gig_id)
        if not gig:
            raise NotFound("Gig not found")
        if not gig.is_active and gig.freelancer_id != viewer_id:
            raise NotFound("Gig not found", reason="inactive")
        return gig

    def get_owned(self, db: Session, gig_id: uuid.UUID, owner_id: uuid.UUID, *, for_update: bool = False) -> Gig:
        stmt = select(Gig).where(Gig.id == gig_id)
        if for_update:
            stmt = stmt.with_for_update()
        gig = db.execute(stmt).scalar_one_or_none()
        if not gig:
            raise NotFound("Gig not found or you do not have permission to access it")
        if gig.freelancer_id != owner_id:
            raise NotFound(
                "Gig not found or you do not have permission to access it",
                reason="forbidden",
            )
        return gig

    def deactivate(self, db: Session, *, gig_id: uuid.UUID, owner_id: uuid.UUID) -> Gig:
        """
        Soft delete. Bids keep their history; new bids are refused.
        """
        gig = self.get_owned(db, gig_id, owner_id, for_update=True)
        if gig.is_active:
            gig.is_active = False
            db.commit()
            db.refresh(gig)
            logger.info("gig deactivated", extra={"gig_id": str(gig.id)})
        return gig
