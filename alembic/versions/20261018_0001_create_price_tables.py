"""create price pipeline tables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def _money() -> sa.Numeric:
    return sa.Numeric(precision=12, scale=2)


def upgrade() -> None:
    op.create_table(
        "exchange_rates",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("usd_to_zwg", sa.Numeric(), nullable=False),
        sa.Column("source", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("date"),
    )
    op.create_index("ix_exchange_rates_date", "exchange_rates", ["date"], unique=False)

    op.create_table(
        "price_observations",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("source_id", sa.String(length=120), nullable=True),
        sa.Column("source_name", sa.String(length=255), nullable=False),
        sa.Column("material_key", sa.String(length=160), nullable=False),
        sa.Column("material_name", sa.Text(), nullable=False),
        sa.Column("unit", sa.String(length=80), nullable=True),
        sa.Column("price_original", _money(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, comment="USD or ZWG"),
        sa.Column("price_usd", _money(), nullable=True),
        sa.Column("price_zwg", _money(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("supplier_name", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column(
            "confidence",
            sa.SmallInteger(),
            nullable=False,
            comment="Source trust level, 1 (low) to 5 (high)",
        ),
        sa.Column("scraped_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "source_name",
            "material_key",
            "material_name",
            "price_original",
            "currency",
            "location",
            "supplier_name",
            "url",
            "scraped_at",
            name="uq_price_observations_dedupe",
            postgresql_nulls_not_distinct=True,
        ),
    )
    op.create_index("ix_price_observations_material_key", "price_observations", ["material_key"], unique=False)
    op.create_index("ix_price_observations_scraped_at", "price_observations", ["scraped_at"], unique=False)

    op.create_table(
        "unmatched_listings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("source_name", sa.String(length=255), nullable=False),
        sa.Column("scraped_name", sa.Text(), nullable=False),
        sa.Column("raw_price", sa.Text(), nullable=False),
        sa.Column(
            "reason",
            sa.String(length=32),
            nullable=False,
            comment="unmatched_material, unparseable_price, unknown_currency",
        ),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("scraped_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "source_name",
            "scraped_name",
            "raw_price",
            "url",
            "scraped_at",
            name="uq_unmatched_listings_dedupe",
            postgresql_nulls_not_distinct=True,
        ),
    )
    op.create_index("ix_unmatched_listings_reason", "unmatched_listings", ["reason"], unique=False)

    op.create_table(
        "price_weekly",
        sa.Column("material_key", sa.String(length=160), nullable=False),
        sa.Column("week_start", sa.Date(), nullable=False, comment="Monday of the ISO week (UTC)"),
        sa.Column("avg_price_usd", _money(), nullable=True),
        sa.Column("avg_price_zwg", _money(), nullable=True),
        sa.Column("median_price_usd", _money(), nullable=True),
        sa.Column("median_price_zwg", _money(), nullable=True),
        sa.Column("min_price_usd", _money(), nullable=True),
        sa.Column("max_price_usd", _money(), nullable=True),
        sa.Column("min_price_zwg", _money(), nullable=True),
        sa.Column("max_price_zwg", _money(), nullable=True),
        sa.Column("sample_count", sa.Integer(), nullable=False),
        sa.Column("last_scraped_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("material_key", "week_start", name="pk_price_weekly"),
    )


def downgrade() -> None:
    op.drop_table("price_weekly")
    op.drop_index("ix_unmatched_listings_reason", table_name="unmatched_listings")
    op.drop_table("unmatched_listings")
    op.drop_index("ix_price_observations_scraped_at", table_name="price_observations")
    op.drop_index("ix_price_observations_material_key", table_name="price_observations")
    op.drop_table("price_observations")
    op.drop_index("ix_exchange_rates_date", table_name="exchange_rates")
    op.drop_table("exchange_rates")
