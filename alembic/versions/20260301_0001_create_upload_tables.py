"""create upload batch, fact, account and audit tables

Revision ID: 20260301_0001
Revises:
Create Date: 2026-03-01 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20260301_0001"
down_revision = None
branch_labels = None
depends_on = None


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False)


def _batch_fk() -> sa.Column:
    return sa.Column(
        "batch_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("upload_batch.id", ondelete="CASCADE"),
        nullable=False,
    )


def _amount(name: str, nullable: bool = True) -> sa.Column:
    return sa.Column(name, sa.Numeric(), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "upload_batch",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("kind", sa.String(length=32), nullable=False, comment="actuals_wide, promotions, budget"),
        sa.Column("original_filename", sa.Text(), nullable=True),
        sa.Column(
            "uploaded_by_subject",
            sa.Text(),
            nullable=False,
            comment="Opaque identity of the authenticated uploader",
        ),
        sa.Column("uploaded_by_email", sa.Text(), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, comment="Pipeline state: processing → processed | failed"),
        sa.Column("row_count", sa.Integer(), nullable=False),
        sa.Column("error_count", sa.Integer(), nullable=False),
        sa.Column("finalized_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_upload_batch_uploaded_at", "upload_batch", ["uploaded_at"], unique=False)
    op.create_index("ix_upload_batch_status", "upload_batch", ["status"], unique=False)
    op.create_index("ix_upload_batch_kind", "upload_batch", ["kind"], unique=False)

    op.create_table(
        "upload_error",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        _batch_fk(),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("row_number", sa.Integer(), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "row_json",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
            comment="Snapshot of the offending row for replay/debugging",
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_upload_error_batch_id_position",
        "upload_error",
        ["batch_id", "position"],
        unique=False,
    )

    op.create_table(
        "account",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("external_key", sa.Text(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("retailer_id", postgresql.UUID(as_uuid=True), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("external_key", name="uq_account_external_key"),
    )

    op.create_table(
        "actuals_weekly_fact",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        _batch_fk(),
        sa.Column("geography", sa.Text(), nullable=False),
        sa.Column("product", sa.Text(), nullable=False),
        sa.Column("week_end_date", sa.Date(), nullable=False),
        _amount("volume", nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_actuals_weekly_fact_batch_id", "actuals_weekly_fact", ["batch_id"], unique=False)
    op.create_index(
        "ix_actuals_weekly_fact_geo_product_week",
        "actuals_weekly_fact",
        ["geography", "product", "week_end_date"],
        unique=False,
    )

    op.create_table(
        "promotions_raw",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        _batch_fk(),
        sa.Column("deal_id", sa.Text(), nullable=True),
        sa.Column("promo_status", sa.Text(), nullable=True),
        sa.Column("promo_type", sa.Text(), nullable=True),
        sa.Column("call_point", sa.Text(), nullable=True),
        sa.Column("ppg", sa.Text(), nullable=True, comment="Product group"),
        sa.Column("promo_start_date", sa.Date(), nullable=True),
        sa.Column("promo_end_date", sa.Date(), nullable=True),
        sa.Column("cost_start_date", sa.Date(), nullable=True),
        sa.Column("cost_end_date", sa.Date(), nullable=True),
        _amount("scan_back_per_case"),
        _amount("tr_share_of_discount"),
        _amount("forecasted_volume"),
        sa.Column("geography", sa.Text(), nullable=True),
        sa.Column("route_to_market", sa.Text(), nullable=True),
        sa.Column("row_json", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_promotions_raw_batch_id", "promotions_raw", ["batch_id"], unique=False)
    op.create_index("ix_promotions_raw_deal_id", "promotions_raw", ["deal_id"], unique=False)
    op.create_index("ix_promotions_raw_call_point", "promotions_raw", ["call_point"], unique=False)

    op.create_table(
        "budget_raw",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        _batch_fk(),
        sa.Column("call_point", sa.Text(), nullable=False),
        sa.Column("ppg_item", sa.Text(), nullable=False),
        sa.Column("weeks_text", sa.Text(), nullable=True),
        _amount("weekly_volume_per_store"),
        _amount("total_cases_budgeted"),
        _amount("tr_share_of_discount"),
        _amount("scan_back_per_case"),
        _amount("tr_net_revenue"),
        sa.Column("row_json", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_budget_raw_batch_id", "budget_raw", ["batch_id"], unique=False)
    op.create_index("ix_budget_raw_call_point", "budget_raw", ["call_point"], unique=False)

    op.create_table(
        "audit_log",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("actor_subject", sa.Text(), nullable=True),
        sa.Column("actor_email", sa.Text(), nullable=True),
        sa.Column("source", sa.String(length=32), nullable=False, comment="ui, upload, system"),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=True),
        sa.Column("correlation_id", sa.Text(), nullable=True),
        sa.Column("before", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("after", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_entity", "audit_log", ["entity_type", "entity_id"], unique=False)
    op.create_index("ix_audit_log_correlation_id", "audit_log", ["correlation_id"], unique=False)
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_audit_log_created_at", table_name="audit_log")
    op.drop_index("ix_audit_log_correlation_id", table_name="audit_log")
    op.drop_index("ix_audit_log_entity", table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_index("ix_budget_raw_call_point", table_name="budget_raw")
    op.drop_index("ix_budget_raw_batch_id", table_name="budget_raw")
    op.drop_table("budget_raw")
    op.drop_index("ix_promotions_raw_call_point", table_name="promotions_raw")
    op.drop_index("ix_promotions_raw_deal_id", table_name="promotions_raw")
    op.drop_index("ix_promotions_raw_batch_id", table_name="promotions_raw")
    op.drop_table("promotions_raw")
    op.drop_index("ix_actuals_weekly_fact_geo_product_week", table_name="actuals_weekly_fact")
    op.drop_index("ix_actuals_weekly_fact_batch_id", table_name="actuals_weekly_fact")
    op.drop_table("actuals_weekly_fact")
    op.drop_table("account")
    op.drop_index("ix_upload_error_batch_id_position", table_name="upload_error")
    op.drop_table("upload_error")
    op.drop_index("ix_upload_batch_kind", table_name="upload_batch")
    op.drop_index("ix_upload_batch_status", table_name="upload_batch")
    op.drop_index("ix_upload_batch_uploaded_at", table_name="upload_batch")
    op.drop_table("upload_batch")
