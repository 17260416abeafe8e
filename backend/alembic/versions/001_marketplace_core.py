# backend/alembic/versions/001_marketplace_core.py
"""Marketplace core - profiles, bookings, reviews, invites, session feedback

Revision ID: 001_marketplace_core
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the tables the booking and reputation flows own:
coach_profiles, ensemble_profiles, bookings, review_invites, reviews and
ensemble_reviews.

Enum columns are stored as VARCHAR with application-side validation
(create_safe_enum with native_enum=False), so adding a status later needs
no type migration.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_marketplace_core"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create marketplace core tables."""
    print("Creating marketplace core tables...")

    op.create_table(
        "coach_profiles",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("photo_url", sa.String(500), nullable=True),
        sa.Column("rate_hourly", sa.Numeric(10, 2), nullable=True),
        sa.Column("rate_half_day", sa.Numeric(10, 2), nullable=True),
        sa.Column("rate_full_day", sa.Numeric(10, 2), nullable=True),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        # Cached aggregates, recomputed from reviews
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_reviews", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_bookings", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="ck_coach_profiles_rating_range"),
        sa.CheckConstraint("total_reviews >= 0", name="ck_coach_profiles_total_reviews"),
    )
    op.create_index("ix_coach_profiles_user_id", "coach_profiles", ["user_id"], unique=True)

    op.create_table(
        "ensemble_profiles",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("ensemble_name", sa.String(200), nullable=False),
        sa.Column("ensemble_type", sa.String(100), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("size", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_ensemble_profiles_user_id", "ensemble_profiles", ["user_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("ensemble_id", sa.String(26), nullable=False),
        sa.Column("coach_id", sa.String(26), nullable=False),
        sa.Column("status", sa.String(9), nullable=False, server_default="pending"),
        sa.Column("proposed_dates", sa.JSON(), nullable=False),
        sa.Column("confirmed_date", sa.Date(), nullable=True),
        sa.Column("session_type", sa.String(8), nullable=False),
        sa.Column("session_format", sa.String(9), nullable=False, server_default="in_person"),
        sa.Column("rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total_cost", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("goals", sa.Text(), nullable=True),
        sa.Column("special_requests", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["ensemble_id"], ["ensemble_profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["coach_id"], ["coach_profiles.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL)",
            name="ck_bookings_completed_at_matches_status",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_ensemble_id", "bookings", ["ensemble_id"])
    op.create_index("ix_bookings_coach_id", "bookings", ["coach_id"])
    op.create_index("idx_bookings_coach_status", "bookings", ["coach_id", "status"])
    op.create_index("idx_bookings_ensemble_status", "bookings", ["ensemble_id", "status"])
    op.create_index("idx_bookings_created_at", "bookings", ["created_at"])

    op.create_table(
        "review_invites",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("coach_profile_id", sa.String(26), nullable=False),
        sa.Column("ensemble_email", sa.String(320), nullable=False),
        sa.Column("ensemble_name", sa.String(200), nullable=True),
        sa.Column("ensemble_profile_id", sa.String(26), nullable=True),
        sa.Column("status", sa.String(8), nullable=False, server_default="pending"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["coach_profile_id"], ["coach_profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["ensemble_profile_id"], ["ensemble_profiles.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_review_invites_token", "review_invites", ["token"], unique=True)
    op.create_index("ix_review_invites_coach_profile_id", "review_invites", ["coach_profile_id"])
    op.create_index("ix_review_invites_ensemble_email", "review_invites", ["ensemble_email"])
    op.create_index("idx_review_invites_coach_created", "review_invites", ["coach_profile_id", "created_at"])
    op.create_index("idx_review_invites_email_status", "review_invites", ["ensemble_email", "status"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("coach_profile_id", sa.String(26), nullable=False),
        sa.Column("reviewer_id", sa.String(26), nullable=False),
        sa.Column("invite_id", sa.String(26), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("review_text", sa.Text(), nullable=True),
        sa.Column("session_month", sa.Integer(), nullable=True),
        sa.Column("session_year", sa.Integer(), nullable=True),
        sa.Column("session_format", sa.String(9), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["coach_profile_id"], ["coach_profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reviewer_id"], ["ensemble_profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["invite_id"], ["review_invites.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("invite_id", name="uq_reviews_invite_id"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        sa.CheckConstraint(
            "session_month IS NULL OR (session_month >= 1 AND session_month <= 12)",
            name="ck_reviews_session_month",
        ),
    )
    op.create_index("ix_reviews_coach_profile_id", "reviews", ["coach_profile_id"])
    op.create_index("ix_reviews_reviewer_id", "reviews", ["reviewer_id"])
    op.create_index("idx_reviews_coach_created", "reviews", ["coach_profile_id", "created_at"])
    op.create_index("idx_reviews_coach_reviewer", "reviews", ["coach_profile_id", "reviewer_id"])

    op.create_table(
        "ensemble_reviews",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("coach_profile_id", sa.String(26), nullable=False),
        sa.Column("ensemble_profile_id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=True),
        sa.Column("session_month", sa.Integer(), nullable=True),
        sa.Column("session_year", sa.Integer(), nullable=True),
        sa.Column("session_format", sa.String(9), nullable=True),
        sa.Column("status", sa.String(9), nullable=False, server_default="pending"),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("feedback_text", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["coach_profile_id"], ["coach_profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["ensemble_profile_id"], ["ensemble_profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("booking_id", name="uq_ensemble_reviews_booking_id"),
        sa.CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_ensemble_reviews_rating_range"
        ),
    )
    op.create_index("ix_ensemble_reviews_coach_profile_id", "ensemble_reviews", ["coach_profile_id"])
    op.create_index("ix_ensemble_reviews_ensemble_profile_id", "ensemble_reviews", ["ensemble_profile_id"])
    op.create_index("idx_ensemble_reviews_coach_status", "ensemble_reviews", ["coach_profile_id", "status"])

    print("Marketplace core tables created.")


def downgrade() -> None:
    """Drop marketplace core tables."""
    print("Dropping marketplace core tables...")
    op.drop_table("ensemble_reviews")
    op.drop_table("reviews")
    op.drop_table("review_invites")
    op.drop_table("bookings")
    op.drop_table("ensemble_profiles")
    op.drop_table("coach_profiles")
