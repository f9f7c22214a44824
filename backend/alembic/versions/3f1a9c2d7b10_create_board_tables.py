"""Create board tables

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-17 09:12:44.318022

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2d7b10"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "tiles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("color", sa.String(length=16), nullable=False),
        sa.Column("icon", sa.String(length=64), nullable=False),
        sa.Column("progress", sa.Integer(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("variant", sa.String(length=16), nullable=False),
        sa.Column("due_date", sa.String(length=40), nullable=True),
        sa.Column("reminder", sa.JSON(), nullable=True),
        sa.Column("depends_on", sa.JSON(), nullable=False),
        sa.Column("subtasks", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=True),
        sa.Column("priority", sa.String(length=32), nullable=True),
        sa.Column("last_updated", sa.String(length=40), nullable=True),
        _created_at(),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_tiles")),
    )
    op.create_index(op.f("ix_tiles_slug"), "tiles", ["slug"], unique=True)

    op.create_table(
        "photos",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("tile_id", sa.String(length=100), nullable=False),
        sa.Column("base64_data", sa.Text(), nullable=False),
        sa.Column("thumbnail", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.String(length=40), nullable=False),
        sa.Column("caption", sa.String(length=500), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_photos")),
    )
    op.create_index(op.f("ix_photos_tile_id"), "photos", ["tile_id"], unique=False)

    op.create_table(
        "board_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("dark_mode", sa.Boolean(), nullable=False),
        sa.Column("tile_order", sa.JSON(), nullable=False),
        sa.Column("last_backup", sa.String(length=40), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_board_settings")),
    )

    op.create_table(
        "tile_versions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tile_id", sa.Integer(), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("color", sa.String(length=16), nullable=False),
        sa.Column("icon", sa.String(length=64), nullable=False),
        sa.Column("progress", sa.Integer(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("due_date", sa.String(length=40), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=True),
        sa.Column("priority", sa.String(length=32), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(
            ["tile_id"],
            ["tiles.id"],
            name=op.f("fk_tile_versions_tile_id_tiles"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_tile_versions")),
    )
    op.create_index(op.f("ix_tile_versions_tile_id"), "tile_versions", ["tile_id"], unique=False)

    op.create_table(
        "shared_links",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tile_id", sa.Integer(), nullable=False),
        sa.Column("share_token", sa.String(length=64), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(
            ["tile_id"],
            ["tiles.id"],
            name=op.f("fk_shared_links_tile_id_tiles"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_shared_links")),
    )
    op.create_index(op.f("ix_shared_links_tile_id"), "shared_links", ["tile_id"], unique=False)
    op.create_index(
        op.f("ix_shared_links_share_token"), "shared_links", ["share_token"], unique=True
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_shared_links_share_token"), table_name="shared_links")
    op.drop_index(op.f("ix_shared_links_tile_id"), table_name="shared_links")
    op.drop_table("shared_links")
    op.drop_index(op.f("ix_tile_versions_tile_id"), table_name="tile_versions")
    op.drop_table("tile_versions")
    op.drop_table("board_settings")
    op.drop_index(op.f("ix_photos_tile_id"), table_name="photos")
    op.drop_table("photos")
    op.drop_index(op.f("ix_tiles_slug"), table_name="tiles")
    op.drop_table("tiles")
