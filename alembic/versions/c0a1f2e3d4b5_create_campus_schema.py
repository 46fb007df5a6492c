"""Create campus schema

Revision ID: c0a1f2e3d4b5
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c0a1f2e3d4b5"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False)


def updated_at() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False)


def user_fk(column: str = "user_id") -> sa.Column:
    return sa.Column(column, sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("user_type", sa.String(20), nullable=False, server_default="student"),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verification_token", sa.String(64), nullable=True),
        sa.Column("verification_token_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("password_reset_token", sa.String(64), nullable=True),
        sa.Column("password_reset_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("profile_picture", sa.String(500), nullable=True),
        sa.Column("bio", sa.String(250), nullable=True),
        sa.Column("city", sa.String(50), nullable=True),
        sa.Column("websites", sa.JSON(), nullable=True),
        created_at(),
        updated_at(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_verification_token", "users", ["verification_token"])
    op.create_index("ix_users_password_reset_token", "users", ["password_reset_token"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("banner", sa.String(500), nullable=True),
        user_fk("created_by_id"),
        created_at(),
    )
    op.create_index("ix_events_id", "events", ["id"])
    op.create_index("ix_events_start_date", "events", ["start_date"])
    op.create_index("ix_events_created_by_id", "events", ["created_by_id"])

    op.create_table(
        "marketplace_listings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.String(2000), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("original_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("condition", sa.String(20), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        user_fk("seller_id"),
        created_at(),
        updated_at(),
    )
    op.create_index("ix_marketplace_listings_id", "marketplace_listings", ["id"])
    op.create_index("ix_marketplace_listings_category", "marketplace_listings", ["category"])
    op.create_index("ix_marketplace_listings_status", "marketplace_listings", ["status"])
    op.create_index("ix_marketplace_listings_seller_id", "marketplace_listings", ["seller_id"])

    op.create_table(
        "marketplace_favorites",
        sa.Column("id", sa.Integer(), primary_key=True),
        user_fk(),
        sa.Column(
            "listing_id",
            sa.Integer(),
            sa.ForeignKey("marketplace_listings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        created_at(),
        sa.UniqueConstraint("user_id", "listing_id", name="uq_favorite_user_listing"),
    )
    op.create_index("ix_marketplace_favorites_id", "marketplace_favorites", ["id"])
    op.create_index("ix_marketplace_favorites_user_id", "marketplace_favorites", ["user_id"])
    op.create_index("ix_marketplace_favorites_listing_id", "marketplace_favorites", ["listing_id"])

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), primary_key=True),
        user_fk(),
        sa.Column("content", sa.String(500), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("is_repost", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "original_post_id",
            sa.Integer(),
            sa.ForeignKey("posts.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("repost_comment", sa.String(500), nullable=True),
        created_at(),
        updated_at(),
    )
    op.create_index("ix_posts_id", "posts", ["id"])
    op.create_index("ix_posts_user_id", "posts", ["user_id"])
    op.create_index("ix_posts_original_post_id", "posts", ["original_post_id"])

    op.create_table(
        "likes",
        sa.Column("id", sa.Integer(), primary_key=True),
        user_fk(),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        created_at(),
        updated_at(),
        sa.UniqueConstraint("user_id", "post_id", name="uq_like_user_post"),
    )
    op.create_index("ix_likes_id", "likes", ["id"])
    op.create_index("ix_likes_user_id", "likes", ["user_id"])
    op.create_index("ix_likes_post_id", "likes", ["post_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        user_fk(),
        sa.Column("content", sa.String(300), nullable=False),
        created_at(),
        updated_at(),
    )
    op.create_index("ix_comments_id", "comments", ["id"])
    op.create_index("ix_comments_post_id", "comments", ["post_id"])
    op.create_index("ix_comments_user_id", "comments", ["user_id"])

    op.create_table(
        "livestreams",
        sa.Column("id", sa.Integer(), primary_key=True),
        user_fk(),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="LIVE"),
        sa.Column("viewer_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_livestreams_id", "livestreams", ["id"])
    op.create_index("ix_livestreams_user_id", "livestreams", ["user_id"])
    op.create_index("ix_livestreams_status", "livestreams", ["status"])


def downgrade() -> None:
    for table in [
        "livestreams",
        "comments",
        "likes",
        "posts",
        "marketplace_favorites",
        "marketplace_listings",
        "events",
        "users",
    ]:
        op.drop_table(table)
