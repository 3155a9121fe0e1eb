"""create seshlock refresh and access token tables

Revision ID: 0002_create_seshlock_core_tables
Revises: 0001_create_users
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "0002_create_seshlock_core_tables"
down_revision = "0001_create_users"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "seshlock_refresh_tokens",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("principal_id", sa.Uuid(), nullable=False),
        sa.Column("token_digest", sa.String(length=71), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("device_identifier", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["principal_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(
        op.f("ix_seshlock_refresh_tokens_token_digest"),
        "seshlock_refresh_tokens",
        ["token_digest"],
        unique=True,
    )
    op.create_index(
        op.f("ix_seshlock_refresh_tokens_principal_id"),
        "seshlock_refresh_tokens",
        ["principal_id"],
        unique=False,
    )

    op.create_table(
        "seshlock_access_tokens",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("refresh_token_id", sa.Uuid(), nullable=False),
        sa.Column("token_digest", sa.String(length=71), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["refresh_token_id"], ["seshlock_refresh_tokens.id"], ondelete="CASCADE"),
    )
    op.create_index(
        op.f("ix_seshlock_access_tokens_token_digest"),
        "seshlock_access_tokens",
        ["token_digest"],
        unique=True,
    )
    op.create_index(
        op.f("ix_seshlock_access_tokens_refresh_token_id"),
        "seshlock_access_tokens",
        ["refresh_token_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_seshlock_access_tokens_refresh_token_id"), table_name="seshlock_access_tokens")
    op.drop_index(op.f("ix_seshlock_access_tokens_token_digest"), table_name="seshlock_access_tokens")
    op.drop_table("seshlock_access_tokens")
    op.drop_index(op.f("ix_seshlock_refresh_tokens_principal_id"), table_name="seshlock_refresh_tokens")
    op.drop_index(op.f("ix_seshlock_refresh_tokens_token_digest"), table_name="seshlock_refresh_tokens")
    op.drop_table("seshlock_refresh_tokens")
