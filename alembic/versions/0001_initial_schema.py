"""Initial schema: languages, translation keys, translations.

Revision ID: 0001
Revises:
Create Date: 2026-10-17

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # -- Languages --
    op.create_table(
        "languages",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(10), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    # -- Translation keys --
    op.create_table(
        "translation_keys",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("key_name", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_translation_keys_category", "translation_keys", ["category"])

    # -- Translations --
    op.create_table(
        "translations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "translation_key_id",
            sa.String(36),
            sa.ForeignKey("translation_keys.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "language_id",
            sa.String(36),
            sa.ForeignKey("languages.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("value", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "translation_key_id", "language_id", name="uq_translations_key_language"
        ),
    )
    op.create_index("ix_translations_language_id", "translations", ["language_id"])


def downgrade() -> None:
    op.drop_index("ix_translations_language_id", table_name="translations")
    op.drop_table("translations")
    op.drop_index("ix_translation_keys_category", table_name="translation_keys")
    op.drop_table("translation_keys")
    op.drop_table("languages")
