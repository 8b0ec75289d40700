"""create audio_clips and favorites

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "audio_clips",
        sa.Column("id", sa.String(length=24), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("audio_url", sa.Text(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("download_count", sa.Integer(), nullable=False),
        sa.Column("source", sa.String(length=32), nullable=False),
        sa.Column("license_type", sa.String(length=255), nullable=False),
        sa.Column("license_url", sa.Text(), nullable=True),
        sa.Column("original_audio_url", sa.Text(), nullable=True),
        sa.Column("artist_name", sa.String(length=255), nullable=False),
        sa.Column("attribution_required", sa.Boolean(), nullable=False),
        sa.Column("is_redistribution_allowed", sa.Boolean(), nullable=False),
        sa.Column("usage_notes", sa.Text(), nullable=True),
        sa.Column("sound_flag", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_audio_clips")),
    )
    op.create_index("ix_audio_clips_category", "audio_clips", ["category"])
    op.create_index("ix_audio_clips_type", "audio_clips", ["type"])
    op.create_index("ix_audio_clips_priority", "audio_clips", [sa.text("priority DESC")])
    op.create_index("ix_audio_clips_rating", "audio_clips", [sa.text("rating DESC")])
    op.create_index("ix_audio_clips_download_count", "audio_clips", [sa.text("download_count DESC")])
    op.create_index("ix_audio_clips_created_at", "audio_clips", [sa.text("created_at DESC")])

    op.create_table(
        "favorites",
        sa.Column("id", sa.String(length=24), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("audio_id", sa.String(length=24), nullable=False),
        sa.ForeignKeyConstraint(
            ["audio_id"], ["audio_clips.id"], name=op.f("fk_favorites_audio_id_audio_clips")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_favorites")),
        sa.UniqueConstraint("user_id", "audio_id", name="uq_favorites_user_id_audio_id"),
    )
    op.create_index(op.f("ix_favorites_user_id"), "favorites", ["user_id"])
    op.create_index(op.f("ix_favorites_audio_id"), "favorites", ["audio_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_favorites_audio_id"), table_name="favorites")
    op.drop_index(op.f("ix_favorites_user_id"), table_name="favorites")
    op.drop_table("favorites")
    op.drop_index("ix_audio_clips_created_at", table_name="audio_clips")
    op.drop_index("ix_audio_clips_download_count", table_name="audio_clips")
    op.drop_index("ix_audio_clips_rating", table_name="audio_clips")
    op.drop_index("ix_audio_clips_priority", table_name="audio_clips")
    op.drop_index("ix_audio_clips_type", table_name="audio_clips")
    op.drop_index("ix_audio_clips_category", table_name="audio_clips")
    op.drop_table("audio_clips")
