"""users, gigs and bids

Revision ID: 0001_users_gigs_bids
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_users_gigs_bids"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column("first_name", sa.String(length=50), nullable=False),
        sa.Column("last_name", sa.String(length=50), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("profile_picture", sa.String(length=512), server_default="", nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("skills", postgresql.JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("hourly_rate", sa.Float(), nullable=True),
        sa.Column("location", postgresql.JSONB, server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("rating_average", sa.Float(), server_default="0", nullable=False),
        sa.Column("rating_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_earnings", sa.Float(), server_default="0", nullable=False),
        sa.Column("completed_projects", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_email_verified", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        sa.Column("password_reset_token", sa.String(length=64), nullable=True),
        sa.Column("password_reset_expires", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_password_reset_token", "users", ["password_reset_token"])
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_rating_average", "users", ["rating_average"])

    op.create_table(
        "gigs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "freelancer_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("subcategory", sa.String(length=64), nullable=False),
        sa.Column("tags", postgresql.JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("pricing_type", sa.String(length=16), nullable=False),
        sa.Column("pricing_amount", sa.Float(), nullable=False),
        sa.Column("delivery_time", sa.Integer(), nullable=False),
        sa.Column("revisions", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("pricing_amount >= 5", name="ck_gigs_pricing_amount_min"),
        sa.CheckConstraint("delivery_time BETWEEN 1 AND 365", name="ck_gigs_delivery_time_range"),
        sa.CheckConstraint("revisions BETWEEN 0 AND 10", name="ck_gigs_revisions_range"),
    )
    op.create_index("ix_gigs_freelancer_id", "gigs", ["freelancer_id"])
    op.create_index("ix_gigs_category_subcategory", "gigs", ["category", "subcategory"])

    op.create_table(
        "bids",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "gig_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("gigs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "freelancer_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "client_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("delivery_time", sa.Integer(), nullable=False),
        sa.Column("proposal", sa.Text(), nullable=False),
        sa.Column("attachments", postgresql.JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("status", sa.String(length=16), server_default=sa.text("'pending'"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("gig_id", "freelancer_id", name="uq_bids_gig_freelancer"),
        sa.CheckConstraint("amount >= 5", name="ck_bids_amount_min"),
        sa.CheckConstraint("delivery_time BETWEEN 1 AND 365", name="ck_bids_delivery_time_range"),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected', 'withdrawn')",
            name="ck_bids_status",
        ),
    )
    op.create_index("ix_bids_client_status", "bids", ["client_id", "status"])
    op.create_index("ix_bids_freelancer_status", "bids", ["freelancer_id", "status"])
    op.create_index("ix_bids_gig_status", "bids", ["gig_id", "status"])
    op.create_index("ix_bids_created_at", "bids", ["created_at"])


def downgrade():
    op.drop_table("bids")
    op.drop_table("gigs")
    op.drop_table("users")
