"""Initial schema — discussions, content votes, ballots, hall of fame, profiles,
badges, notifications, articles, processed payment events.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "discussions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_premium", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("round_starts_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("round_ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "discussion_posts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("discussion_id", UUID(as_uuid=True), sa.ForeignKey("discussions.id"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("likes_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_discussion_posts_discussion_id", "discussion_posts", ["discussion_id"])

    op.create_table(
        "content_votes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("options", sa.JSON, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_content_votes_active_ends_at", "content_votes", ["is_active", "ends_at"])

    op.create_table(
        "content_vote_ballots",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("vote_id", UUID(as_uuid=True), sa.ForeignKey("content_votes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("option_index", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("vote_id", "user_id", name="uq_content_vote_ballots_vote_user"),
    )

    op.create_table(
        "hall_of_fame",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("post_id", UUID(as_uuid=True), sa.ForeignKey("discussion_posts.id"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("discussion_id", UUID(as_uuid=True), sa.ForeignKey("discussions.id"), nullable=False),
        sa.Column("rank", sa.Integer, nullable=False),
        sa.Column("likes_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("week_number", sa.Integer, nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_hall_of_fame_week", "hall_of_fame", ["year", "week_number", "rank"])
    op.create_index("ix_hall_of_fame_user_id", "hall_of_fame", ["user_id"])

    op.create_table(
        "profiles",
        sa.Column("user_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column("karma", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_premium", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("premium_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("subscription_cancelled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("banked_premium_months", sa.Integer, nullable=False, server_default="0"),
        sa.Column("selected_badge", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "user_badges",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("badge_type", sa.String(50), nullable=False),
        sa.Column("earned_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "badge_type", name="uq_user_badges_user_type"),
    )

    op.create_table(
        "notifications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("type", sa.String(30), nullable=False, server_default="system"),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("link", sa.String(500), nullable=True),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    op.create_table(
        "articles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False, unique=True),
        sa.Column("excerpt", sa.Text, nullable=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("category", sa.String(30), nullable=False, server_default="news"),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("read_time", sa.String(30), nullable=True),
        sa.Column("image_url", sa.String(2000), nullable=True),
        sa.Column("author_name", sa.String(200), nullable=True),
        sa.Column("is_published", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_featured", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "processed_payment_events",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("payment_id", sa.String(100), nullable=False),
        sa.Column("event", sa.String(50), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("payment_id", "event", name="uq_processed_payment_events_id_event"),
    )


def downgrade() -> None:
    op.drop_table("processed_payment_events")
    op.drop_table("articles")
    op.drop_index("ix_notifications_user_id", "notifications")
    op.drop_table("notifications")
    op.drop_table("user_badges")
    op.drop_table("profiles")
    op.drop_index("ix_hall_of_fame_user_id", "hall_of_fame")
    op.drop_index("ix_hall_of_fame_week", "hall_of_fame")
    op.drop_table("hall_of_fame")
    op.drop_table("content_vote_ballots")
    op.drop_index("ix_content_votes_active_ends_at", "content_votes")
    op.drop_table("content_votes")
    op.drop_index("ix_discussion_posts_discussion_id", "discussion_posts")
    op.drop_table("discussion_posts")
    op.drop_table("discussions")
