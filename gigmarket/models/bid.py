# gigmarket/models/bid.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gigmarket.db.base import Base
from gigmarket.models.enums import BidStatus
from gigmarket.models.user import JSONDoc


class Bid(Base):
    __tablename__ = "bids"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    gig_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("gigs.id", ondelete="CASCADE"), nullable=False
    )
    freelancer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    # snapshot of the gig owner at creation time, never re-derived
    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    amount: Mapped[float] = mapped_column(Float, nullable=False)
    delivery_time: Mapped[int] = mapped_column(Integer, nullable=False)
    proposal: Mapped[str] = mapped_column(Text, nullable=False)
    attachments: Mapped[List[str]] = mapped_column(JSONDoc, nullable=False, default=list)

    status: Mapped[str] = mapped_column(
        String(16), nullable=False, server_default=text(f"'{BidStatus.pending.value}'")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    gig = relationship("Gig", back_populates="bids")

    __table_args__ = (
        UniqueConstraint("gig_id", "freelancer_id", name="uq_bids_gig_freelancer"),
        CheckConstraint("amount >= 5", name="ck_bids_amount_min"),
        CheckConstraint("delivery_time BETWEEN 1 AND 365", name="ck_bids_delivery_time_range"),
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected', 'withdrawn')",
            name="ck_bids_status",
        ),
        Index("ix_bids_client_status", "client_id", "status"),
        Index("ix_bids_freelancer_status", "freelancer_id", "status"),
        Index("ix_bids_gig_status", "gig_id", "status"),
        Index("ix_bids_created_at", "created_at"),
    )
