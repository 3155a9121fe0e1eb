"""Install command: write the session settings file and the core token migration.

Usage examples:

    python -m seshlock.scaffold --path .
    python -m seshlock.scaffold --path . --down-revision 0007_add_users --force
"""

from __future__ import annotations

import argparse
import datetime as dt
from pathlib import Path
from string import Template

from seshlock.core.config import SETTINGS_FILENAME, Settings

MIGRATION_SUFFIX = "_create_seshlock_core_tables.py"
VERSIONS_DIR = Path("alembic") / "versions"

SETTINGS_TEMPLATE = Template(
    """# seshlock session settings, read from the working directory at startup
# Token lifetimes
SESHLOCK_ACCESS_TOKEN_EXPIRE_MINUTES=$access_minutes
SESHLOCK_REFRESH_TOKEN_EXPIRE_DAYS=$refresh_days
"""
)

MIGRATION_TEMPLATE = Template(
    '''"""create seshlock refresh and access token tables

Revision ID: $revision
Revises: $down_revision_label
Create Date: $create_date

"""
from alembic import op
import sqlalchemy as sa

revision = "$revision"
down_revision = $down_revision
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
        sa.ForeignKeyConstraint(["principal_id"], ["$principal_table.id"], ondelete="CASCADE"),
    )
    op.create_index(
        op.f("ix_seshlock_refresh_tokens_token_digest"), "seshlock_refresh_tokens", ["token_digest"], unique=True
    )
    op.create_index(
        op.f("ix_seshlock_refresh_tokens_principal_id"), "seshlock_refresh_tokens", ["principal_id"], unique=False
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
        op.f("ix_seshlock_access_tokens_token_digest"), "seshlock_access_tokens", ["token_digest"], unique=True
    )
    op.create_index(
        op.f("ix_seshlock_access_tokens_refresh_token_id"), "seshlock_access_tokens", ["refresh_token_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_seshlock_access_tokens_refresh_token_id"), table_name="seshlock_access_tokens")
    op.drop_index(op.f("ix_seshlock_access_tokens_token_digest"), table_name="seshlock_access_tokens")
    op.drop_table("seshlock_access_tokens")
    op.drop_index(op.f("ix_seshlock_refresh_tokens_principal_id"), table_name="seshlock_refresh_tokens")
    op.drop_index(op.f("ix_seshlock_refresh_tokens_token_digest"), table_name="seshlock_refresh_tokens")
    op.drop_table("seshlock_refresh_tokens")
'''
)


def render_settings() -> str:
    fields = Settings.model_fields
    return SETTINGS_TEMPLATE.substitute(
        access_minutes=fields["ACCESS_TOKEN_EXPIRE_MINUTES"].default,
        refresh_days=fields["REFRESH_TOKEN_EXPIRE_DAYS"].default,
    )


def render_migration(
    revision: str,
    *,
    down_revision: str | None = None,
    principal_table: str = "users",
    created_at: dt.datetime | None = None,
) -> str:
    created_at = created_at or dt.datetime.now(dt.timezone.utc)
    return MIGRATION_TEMPLATE.substitute(
        revision=revision,
        down_revision=repr(down_revision),
        down_revision_label=down_revision or "",
        principal_table=principal_table,
        create_date=created_at.strftime("%Y-%m-%d %H:%M:%S.%f"),
    )


def write_install_files(
    root: Path,
    *,
    down_revision: str | None = None,
    principal_table: str = "users",
    force: bool = False,
    now: dt.datetime | None = None,
) -> list[Path]:
    """Write the settings file and migration under ``root``.

    Raises ``FileExistsError`` if either already exists and ``force`` is off.
    """
    now = now or dt.datetime.now(dt.timezone.utc)
    settings_path = root / SETTINGS_FILENAME
    versions_dir = root / VERSIONS_DIR

    existing_migrations = sorted(versions_dir.glob(f"*{MIGRATION_SUFFIX}")) if versions_dir.is_dir() else []
    if not force:
        if settings_path.exists():
            raise FileExistsError(str(settings_path))
        if existing_migrations:
            raise FileExistsError(str(existing_migrations[0]))

    revision = f"{now:%Y%m%d%H%M%S}{MIGRATION_SUFFIX[:-3]}"
    migration_path = versions_dir / f"{revision}.py"
    for stale in existing_migrations:
        stale.unlink()

    versions_dir.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(render_settings(), encoding="utf-8")
    migration_path.write_text(
        render_migration(
            revision,
            down_revision=down_revision,
            principal_table=principal_table,
            created_at=now,
        ),
        encoding="utf-8",
    )
    return [settings_path, migration_path]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the seshlock settings file and core token tables migration.")
    parser.add_argument("--path", default=".", help="Project root to write into")
    parser.add_argument("--down-revision", default=None, help="Alembic revision the migration builds on")
    parser.add_argument("--principal-table", default="users", help="Table the refresh tokens belong to")
    parser.add_argument("--force", action="store_true", help="Overwrite existing files")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        written = write_install_files(
            Path(args.path),
            down_revision=args.down_revision,
            principal_table=args.principal_table,
            force=args.force,
        )
    except FileExistsError as exc:
        print(f"Refusing to overwrite {exc}; pass --force to replace it.")
        return 1

    for path in written:
        print(f"[created] {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
