"""Initial schema — profiles and profile-scoped general settings, machines, heroes, artifacts.

Revision ID: 001_initial
Revises: None
Create Date: 2026-09-02

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _profile_fk() -> sa.ForeignKey:
    return sa.ForeignKey("profiles.id", ondelete="CASCADE")


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "uq_profiles_single_active", "profiles", ["is_active"], unique=True,
        sqlite_where=sa.text("is_active = 1"),
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "general_settings",
        sa.Column("profile_id", sa.Integer, _profile_fk(), primary_key=True),
        sa.Column("engineer_level", sa.Integer, nullable=False, server_default="0"),
        sa.Column("scarab_level", sa.Integer, nullable=False, server_default="0"),
        sa.Column("rift_rank", sa.String(20), nullable=False, server_default="bronze"),
    )

    op.create_table(
        "machines",
        sa.Column("profile_id", sa.Integer, _profile_fk(), primary_key=True),
        sa.Column("key", sa.String(200), primary_key=True),
        sa.Column("catalog_id", sa.JSON, nullable=False),
        sa.Column("rarity", sa.String(40), nullable=False),
        sa.Column("level", sa.Integer, nullable=False, server_default="0"),
        sa.Column("blueprint_damage", sa.Integer, nullable=False, server_default="0"),
        sa.Column("blueprint_health", sa.Integer, nullable=False, server_default="0"),
        sa.Column("blueprint_armor", sa.Integer, nullable=False, server_default="0"),
        sa.Column("inscription_level", sa.Integer, nullable=False, server_default="0"),
        sa.Column("sacred_level", sa.Integer, nullable=False, server_default="0"),
    )

    op.create_table(
        "heroes",
        sa.Column("profile_id", sa.Integer, _profile_fk(), primary_key=True),
        sa.Column("key", sa.String(200), primary_key=True),
        sa.Column("catalog_id", sa.JSON, nullable=False),
        sa.Column("damage_pct", sa.Integer, nullable=False, server_default="0"),
        sa.Column("health_pct", sa.Integer, nullable=False, server_default="0"),
        sa.Column("armor_pct", sa.Integer, nullable=False, server_default="0"),
    )

    op.create_table(
        "artifacts",
        sa.Column("profile_id", sa.Integer, _profile_fk(), primary_key=True),
        sa.Column("stat", sa.String(20), primary_key=True),
        sa.Column("tier_counts", sa.JSON, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("artifacts")
    op.drop_table("heroes")
    op.drop_table("machines")
    op.drop_table("general_settings")
    op.drop_index("uq_profiles_single_active", table_name="profiles")
    op.drop_table("profiles")
