"""create waitlist

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "waitlist",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=300), nullable=False),
        sa.Column("first_name", sa.String(length=150), nullable=True),
        sa.Column("last_name", sa.String(length=150), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("country", sa.String(length=200), nullable=True),
        sa.Column("province", sa.String(length=200), nullable=True),
        sa.Column("city", sa.String(length=200), nullable=True),
        sa.Column(
            "user_type",
            sa.Enum(
                "student",
                "employer",
                "immigration_consultant",
                "international_worker",
                "mentor",
                name="usertype",
            ),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("pending", "invited", "converted", name="waitliststatus"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("trade", sa.String(length=200), nullable=True),
        sa.Column("apprenticeship_year", sa.String(length=20), nullable=True),
        sa.Column("is_apprentice", sa.String(length=10), nullable=True),
        sa.Column("is_challenging", sa.String(length=10), nullable=True),
        sa.Column("challenge_date", sa.String(length=40), nullable=True),
        sa.Column("company_name", sa.String(length=300), nullable=True),
        sa.Column("industry", sa.String(length=100), nullable=True),
        sa.Column("industry_other", sa.String(length=200), nullable=True),
        sa.Column("hiring_needs", sa.String(length=2000), nullable=True),
        sa.Column("rcic_number", sa.String(length=50), nullable=True),
        sa.Column("experience_years", sa.String(length=20), nullable=True),
        sa.Column("mentor_trade", sa.String(length=200), nullable=True),
        sa.Column("years_experience", sa.String(length=20), nullable=True),
        sa.Column("certification_level", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_waitlist_email", "waitlist", ["email"], unique=True)
    op.create_index("ix_waitlist_user_type", "waitlist", ["user_type"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_waitlist_user_type", table_name="waitlist")
    op.drop_index("ix_waitlist_email", table_name="waitlist")
    op.drop_table("waitlist")
    op.execute("DROP TYPE IF EXISTS waitliststatus")
    op.execute("DROP TYPE IF EXISTS usertype")
