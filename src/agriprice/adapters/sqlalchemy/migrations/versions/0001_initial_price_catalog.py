"""Initial price catalog schema.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 09:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

CROP_CATEGORIES = (
    "farm_inputs",
    "animal_feeds",
    "processed_products",
    "cash_crops",
    "livestock",
    "poultry",
    "fisheries",
    "animal_products",
    "cereals",
    "legumes",
    "roots_tubers",
    "fruits",
    "vegetables",
    "spices_herbs",
    "general",
)
SYNC_STATUSES = ("running", "completed", "failed")


def upgrade() -> None:
    op.create_table(
        "crop",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "category",
            sa.Enum(*CROP_CATEGORIES, name="cropcategory", native_enum=False, length=32),
            nullable=False,
        ),
        sa.Column("unit", sa.String(length=20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_crop")),
    )
    op.create_index("uq_crop_lower_name", "crop", [sa.text("lower(name)")], unique=True)

    op.create_table(
        "region",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_region")),
    )
    op.create_index("uq_region_lower_name", "region", [sa.text("lower(name)")], unique=True)

    op.create_table(
        "market",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("region_id", sa.Uuid(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["region_id"], ["region.id"], name=op.f("fk_market_region_id_region")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_market")),
    )
    op.create_index(
        "uq_market_lower_name_region",
        "market",
        [sa.text("lower(name)"), "region_id"],
        unique=True,
    )

    op.create_table(
        "price_entry",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("crop_id", sa.Uuid(), nullable=False),
        sa.Column("region_id", sa.Uuid(), nullable=False),
        sa.Column("market_id", sa.Uuid(), nullable=True),
        sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("unit", sa.String(length=20), nullable=False),
        sa.Column("entry_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("source", sa.String(length=50), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["crop_id"], ["crop.id"], name=op.f("fk_price_entry_crop_id_crop")),
        sa.ForeignKeyConstraint(
            ["region_id"], ["region.id"], name=op.f("fk_price_entry_region_id_region")
        ),
        sa.ForeignKeyConstraint(
            ["market_id"], ["market.id"], name=op.f("fk_price_entry_market_id_market")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_price_entry")),
    )
    op.create_index(
        "ix_price_entry_lookup",
        "price_entry",
        ["crop_id", "region_id", "market_id", "entry_date"],
    )

    op.create_table(
        "sync_run",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("sync_date", sa.Date(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*SYNC_STATUSES, name="syncstatus", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("records_processed", sa.Integer(), nullable=False),
        sa.Column("records_inserted", sa.Integer(), nullable=False),
        sa.Column("records_updated", sa.Integer(), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_sync_run")),
    )
    op.create_index("ix_sync_run_started_at", "sync_run", ["started_at"])


def downgrade() -> None:
    op.drop_index("ix_sync_run_started_at", table_name="sync_run")
    op.drop_table("sync_run")
    op.drop_index("ix_price_entry_lookup", table_name="price_entry")
    op.drop_table("price_entry")
    op.drop_index("uq_market_lower_name_region", table_name="market")
    op.drop_table("market")
    op.drop_index("uq_region_lower_name", table_name="region")
    op.drop_table("region")
    op.drop_index("uq_crop_lower_name", table_name="crop")
    op.drop_table("crop")
