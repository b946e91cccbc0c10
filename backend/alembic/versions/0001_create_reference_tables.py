"""create countries, regions and trade_specializations

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "countries",
        sa.Column("code", sa.String(length=2), primary_key=True, nullable=False),
        sa.Column("code_alpha3", sa.String(length=3), nullable=True),
        sa.Column("name_en", sa.String(length=200), nullable=False),
        sa.Column("name_fr", sa.String(length=200), nullable=True),
        sa.Column("region_label", sa.String(length=100), nullable=False, server_default="Province/State"),
        sa.Column("phone_code", sa.String(length=10), nullable=True),
        sa.Column("currency_code", sa.String(length=3), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_index("ix_countries_name_en", "countries", ["name_en"], unique=False)
    op.create_index("ix_countries_is_active", "countries", ["is_active"], unique=False)

    op.create_table(
        "regions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("country_code", sa.String(length=2), sa.ForeignKey("countries.code"), nullable=False),
        sa.Column("code", sa.String(length=10), nullable=False),
        sa.Column("name_en", sa.String(length=200), nullable=False),
        sa.Column("name_fr", sa.String(length=200), nullable=True),
        sa.Column("type", sa.String(length=50), nullable=False, server_default="province"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.UniqueConstraint("country_code", "code", name="uq_region_country_code"),
    )
    op.create_index("ix_regions_country_code", "regions", ["country_code"], unique=False)
    op.create_index("ix_regions_is_active", "regions", ["is_active"], unique=False)

    op.create_table(
        "trade_specializations",
        sa.Column("code", sa.String(length=50), primary_key=True, nullable=False),
        sa.Column("name_en", sa.String(length=200), nullable=False),
        sa.Column("sector", sa.String(length=100), nullable=True),
        sa.Column("description_en", sa.String(length=5000), nullable=True),
        sa.Column("noa_code", sa.String(length=20), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_index("ix_trade_specializations_name_en", "trade_specializations", ["name_en"], unique=False)
    op.create_index("ix_trade_specializations_is_active", "trade_specializations", ["is_active"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_trade_specializations_is_active", table_name="trade_specializations")
    op.drop_index("ix_trade_specializations_name_en", table_name="trade_specializations")
    op.drop_table("trade_specializations")
    op.drop_index("ix_regions_is_active", table_name="regions")
    op.drop_index("ix_regions_country_code", table_name="regions")
    op.drop_table("regions")
    op.drop_index("ix_countries_is_active", table_name="countries")
    op.drop_index("ix_countries_name_en", table_name="countries")
    op.drop_table("countries")
