"""create payout engine tables

Revision ID: a1c4e7b2d9f0
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "a1c4e7b2d9f0"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "retailers",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("converted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("onboarding_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_by_user_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_retailers_id", "retailers", ["id"])
    op.create_index("ix_retailers_email", "retailers", ["email"])
    op.create_index("ix_retailers_created_by_user_id", "retailers", ["created_by_user_id"])
    op.create_index("ix_retailers_payout_eligible", "retailers", ["converted", "onboarding_completed"])

    op.create_table(
        "vendors",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("retailer_commission_percent", sa.Integer(), nullable=True),
        sa.Column("sourcer_commission_percent", sa.Integer(), nullable=True),
        sa.Column("tapify_commission_percent", sa.Integer(), nullable=True),
        sa.Column("vendor_commission_percent", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_vendors_id", "vendors", ["id"])

    op.create_table(
        "sourcer_accounts",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_sourcer_accounts_id", "sourcer_accounts", ["id"])

    op.create_table(
        "payout_jobs",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("vendor_id", sa.Integer(), sa.ForeignKey("vendors.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("retailer_id", sa.Integer(), nullable=False),
        sa.Column(
            "sourcer_id",
            sa.Integer(),
            sa.ForeignKey("sourcer_accounts.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("retailer_cut", sa.Numeric(10, 2), nullable=False),
        sa.Column("sourcer_cut", sa.Numeric(10, 2), nullable=True),
        sa.Column("vendor_cut", sa.Numeric(10, 2), nullable=True),
        sa.Column("source_uid", sa.String(), nullable=True),
        sa.Column("order_id", sa.String(), nullable=True),
        sa.Column("date_paid", sa.DateTime(), nullable=True),
        sa.Column("transfer_ids", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_payout_jobs_id", "payout_jobs", ["id"])
    op.create_index("ix_payout_jobs_status", "payout_jobs", ["status"])
    op.create_index("ix_payout_jobs_retailer_status", "payout_jobs", ["retailer_id", "status"])

    op.create_table(
        "uids",
        sa.Column("uid", sa.String(), primary_key=True, nullable=False),
        sa.Column("retailer_id", sa.Integer(), nullable=True),
        sa.Column("is_claimed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("registered_at", sa.DateTime(), nullable=True),
        sa.Column("affiliate_url", sa.String(), nullable=True),
    )
    op.create_index("ix_uids_retailer_id", "uids", ["retailer_id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("shopify_order_id", sa.String(), nullable=True),
        sa.Column("retailer_id", sa.Integer(), nullable=True),
        sa.Column("total", sa.Numeric(10, 2), nullable=False),
        sa.Column("processed_at", sa.DateTime(), nullable=False),
        sa.Column("product_name", sa.String(), nullable=True),
        sa.Column("source_uid", sa.String(), nullable=True),
    )
    op.create_index("ix_orders_id", "orders", ["id"])
    op.create_index("ix_orders_retailer_id", "orders", ["retailer_id"])
    op.create_index("ix_orders_processed_at", "orders", ["processed_at"])


def downgrade():
    op.drop_index("ix_orders_processed_at", table_name="orders")
    op.drop_index("ix_orders_retailer_id", table_name="orders")
    op.drop_index("ix_orders_id", table_name="orders")
    op.drop_table("orders")

    op.drop_index("ix_uids_retailer_id", table_name="uids")
    op.drop_table("uids")

    op.drop_index("ix_payout_jobs_retailer_status", table_name="payout_jobs")
    op.drop_index("ix_payout_jobs_status", table_name="payout_jobs")
    op.drop_index("ix_payout_jobs_id", table_name="payout_jobs")
    op.drop_table("payout_jobs")

    op.drop_index("ix_sourcer_accounts_id", table_name="sourcer_accounts")
    op.drop_table("sourcer_accounts")

    op.drop_index("ix_vendors_id", table_name="vendors")
    op.drop_table("vendors")

    op.drop_index("ix_retailers_payout_eligible", table_name="retailers")
    op.drop_index("ix_retailers_created_by_user_id", table_name="retailers")
    op.drop_index("ix_retailers_email", table_name="retailers")
    op.drop_index("ix_retailers_id", table_name="retailers")
    op.drop_table("retailers")
