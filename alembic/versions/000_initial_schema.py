"""Initial database schema

Revision ID: 000_initial_schema
Revises:
Create Date: 2025-08-12

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = "000_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(table: str) -> bool:
    bind = op.get_bind()
    return table in inspect(bind).get_table_names()


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.Enum("owner", "operator", name="userrole"), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("operator_code", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("operator_code", name="uq_users_operator_code"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "action",
            sa.Enum(
                "login",
                "logout",
                "create_entry",
                "update_entry",
                "delete_entry",
                "refresh_commission",
                "create_operator",
                "update_operator",
                name="auditaction",
            ),
            nullable=False,
        ),
        sa.Column("target_type", sa.String(50), nullable=True),
        sa.Column("target_id", sa.Integer(), nullable=True),
        sa.Column("action_metadata", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])

    # Existing Supabase projects already have this table
    if not _table_exists("ad_data_entries"):
        op.create_table(
            "ad_data_entries",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("staff", sa.String(20), nullable=False),
            sa.Column("ad_spend", sa.Numeric(12, 2), server_default="0", nullable=True),
            sa.Column("credit_card_amount", sa.Numeric(14, 2), server_default="0", nullable=True),
            sa.Column("payment_info_count", sa.Integer(), server_default="0", nullable=True),
            sa.Column("credit_card_orders", sa.Integer(), server_default="0", nullable=True),
            sa.Column(
                "created_by_user_id",
                sa.Integer(),
                sa.ForeignKey("users.id", ondelete="SET NULL"),
                nullable=True,
            ),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
            sa.UniqueConstraint("date", "staff", name="uq_ad_data_entries_date_staff"),
        )
        op.create_index("ix_ad_data_entries_date", "ad_data_entries", ["date"])
        op.create_index("ix_ad_data_entries_staff", "ad_data_entries", ["staff"])

    if not _table_exists("commission_records"):
        op.create_table(
            "commission_records",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("advertiser", sa.String(20), nullable=False),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("order_count", sa.Integer(), server_default="0", nullable=False),
            sa.Column("roi", sa.Numeric(24, 4), server_default="0", nullable=False),
            sa.Column("commission_per_order", sa.Numeric(8, 2), server_default="0", nullable=False),
            sa.Column("total_commission", sa.Numeric(14, 2), server_default="0", nullable=False),
            sa.Column(
                "commission_status",
                sa.Enum("calculated", "no_commission", "no_data", name="commissionstatus"),
                nullable=False,
            ),
            sa.Column("calculated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
            sa.UniqueConstraint("date", "advertiser", name="uq_commission_records_date_advertiser"),
        )
        op.create_index("ix_commission_records_date", "commission_records", ["date"])
        op.create_index("ix_commission_records_advertiser", "commission_records", ["advertiser"])


def downgrade() -> None:
    op.drop_table("commission_records")
    op.drop_table("ad_data_entries")
    op.drop_table("audit_logs")
    op.drop_table("users")
    sa.Enum(name="commissionstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="auditaction").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
