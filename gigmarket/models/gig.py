# gigmarket/models/gig.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gigmarket.db.base import Base
from gigmarket.models.user import JSONDoc


class Gig(Base):
    __tablename__ = "gigs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    freelancer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    subcategory: Mapped[str] = mapped_column(String(64), nullable=False)
    tags: Mapped[List[str]] = mapped_column(JSONDoc, nullable=False, default=list)

    pricing_type: Mapped[str] = mapped_column(String(16), nullable=False)
    pricing_amount: Mapped[float] = mapped_column(Float, nullable=False)
    delivery_time: Mapped[int] = mapped_column(Integer, nullable=False)
    revisions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # soft delete only; bids keep pointing at deactivated gigs
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    bids = relationship("Bid", back_populates="gig")

    __table_args__ = (
        CheckConstraint("pricing_amount >= 5", name="ck_gigs_pricing_amount_min"),
        CheckConstraint("delivery_time BETWEEN 1 AND 365", name="ck_gigs_delivery_time_range"),
        CheckConstraint("revisions BETWEEN 0 AND 10", name="ck_gigs_revisions_range"),
        Index("ix_gigs_category_subcategory", "category", "subcategory"),
    )
