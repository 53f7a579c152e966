"""init
Revision ID: 0001_init
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

DEFAULT_FORMATS = [500, 750, 1000, 2000, 200, 300, 240, 250, 330, 1250]
DESCRIPTION_TYPES = ["Physique", "Chimique", "Biologique", "Process"]


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('Réclamation client', 'Retour client', 'site01', 'site02', 'performance', 'admin', 'consommateur')",
            name="ck_users_role",
        ),
    )

    op.create_table(
        "production_lines",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_production_lines_name", "production_lines", ["name"])

    op.create_table(
        "products",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("designation", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=100), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_products_designation", "products", ["designation"])

    op.create_table(
        "clients",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        *_timestamps(),
    )

    formats = op.create_table(
        "formats",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("format_index", sa.Integer(), nullable=False, unique=True),
        sa.Column("format_unit", sa.String(length=10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    nc_des = op.create_table(
        "nc_des",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=50), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "non_conformity_reports",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("report_number", sa.String(length=50), nullable=False, unique=True),
        sa.Column("report_date", sa.Date(), nullable=False),
        sa.Column(
            "line_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("production_lines.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("product_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("format_id", sa.Integer(), sa.ForeignKey("formats.id", ondelete="SET NULL"), nullable=True),
        sa.Column("production_date", sa.Date(), nullable=False),
        sa.Column("team", sa.String(length=1), nullable=False),
        sa.Column("time", sa.Time(), nullable=False),
        sa.Column("description_type", sa.String(length=50), nullable=False),
        sa.Column("description_details", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("claim_origin", sa.String(length=20), nullable=False),
        sa.Column("claim_origin_detail", sa.Text(), nullable=True),
        sa.Column(
            "claim_origin_client_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("clients.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("valuation", sa.Numeric(10, 2), nullable=False),
        sa.Column("performance", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="open"),
        sa.Column("reported_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("team IN ('A', 'B', 'C')", name="ck_ncr_team"),
        sa.CheckConstraint(
            "description_type IN ('Physique', 'Chimique', 'Biologique', 'Process')", name="ck_ncr_description_type"
        ),
        sa.CheckConstraint("quantity > 0", name="ck_ncr_quantity_positive"),
        sa.CheckConstraint(
            "claim_origin IN ('client', 'site01', 'site02', 'consommateur')", name="ck_ncr_claim_origin"
        ),
        sa.CheckConstraint("status IN ('open', 'in_progress', 'resolved', 'closed')", name="ck_ncr_status"),
    )
    op.create_index("ix_non_conformity_reports_report_number", "non_conformity_reports", ["report_number"])
    op.create_index("ix_non_conformity_reports_line_id", "non_conformity_reports", ["line_id"])
    op.create_index("ix_non_conformity_reports_product_id", "non_conformity_reports", ["product_id"])
    op.create_index("ix_non_conformity_reports_status", "non_conformity_reports", ["status"])
    op.create_index("ix_non_conformity_reports_report_date", "non_conformity_reports", ["report_date"])

    op.bulk_insert(formats, [{"format_index": idx, "format_unit": "ML"} for idx in DEFAULT_FORMATS])
    op.bulk_insert(nc_des, [{"name": name} for name in DESCRIPTION_TYPES])


def downgrade():
    op.drop_table("non_conformity_reports")
    op.drop_table("nc_des")
    op.drop_table("formats")
    op.drop_table("clients")
    op.drop_table("products")
    op.drop_table("production_lines")
    op.drop_table("users")
