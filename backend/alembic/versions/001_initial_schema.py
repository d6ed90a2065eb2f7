"""Initial schema: awards, penalty rules, apprentices, host employers, placements,
charge rate calculations and quotes.

Revision ID: 001
Revises:
Create Date: 2025-03-04

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _json_col(connection):
    if connection.dialect.name == "sqlite":
        return sa.JSON()
    return postgresql.JSONB(astext_type=sa.Text())


def upgrade() -> None:
    json_type = _json_col(op.get_bind())

    op.create_table(
        "awards",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("award_fixed_id", sa.Integer(), nullable=True),
        sa.Column("published_year", sa.Integer(), nullable=True),
    )
    op.create_index("ix_awards_code", "awards", ["code"], unique=True)

    op.create_table(
        "penalty_rules",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("award_id", sa.Integer(), sa.ForeignKey("awards.id"), nullable=False),
        sa.Column("penalty_name", sa.String(), nullable=False),
        sa.Column("penalty_type", sa.String(), nullable=False),
        sa.Column("multiplier", sa.Float(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_penalty_rules_award_id", "penalty_rules", ["award_id"])

    op.create_table(
        "host_employers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("industry_sector", sa.String(), nullable=True),
        sa.Column("custom_margin_rate", sa.Float(), nullable=True),
        sa.Column("custom_admin_rate", sa.Float(), nullable=True),
    )

    op.create_table(
        "apprentices",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("apprenticeship_year", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_adult", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_completed_year12", sa.Boolean(), nullable=False, server_default=sa.false()),
    )

    op.create_table(
        "training_contracts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("apprentice_id", sa.Integer(), sa.ForeignKey("apprentices.id"), nullable=False),
        sa.Column("award_id", sa.Integer(), sa.ForeignKey("awards.id"), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("start_date", sa.Date(), nullable=True),
    )
    op.create_index("ix_training_contracts_apprentice_id", "training_contracts", ["apprentice_id"])

    op.create_table(
        "placements",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("apprentice_id", sa.Integer(), sa.ForeignKey("apprentices.id"), nullable=False),
        sa.Column("host_employer_id", sa.Integer(), sa.ForeignKey("host_employers.id"), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("award_id", sa.Integer(), sa.ForeignKey("awards.id"), nullable=True),
        sa.Column("negotiated_rate", sa.Float(), nullable=True),
        sa.Column("charge_rate", sa.Float(), nullable=True),
        sa.Column("last_charge_rate_update", sa.DateTime(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
    )
    op.create_index("ix_placements_apprentice_id", "placements", ["apprentice_id"])
    op.create_index("ix_placements_host_employer_id", "placements", ["host_employer_id"])

    op.create_table(
        "charge_rate_calculations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("apprentice_id", sa.Integer(), sa.ForeignKey("apprentices.id"), nullable=False),
        sa.Column("host_employer_id", sa.Integer(), sa.ForeignKey("host_employers.id"), nullable=False),
        sa.Column("placement_id", sa.Integer(), sa.ForeignKey("placements.id"), nullable=True),
        sa.Column("award_id", sa.Integer(), sa.ForeignKey("awards.id"), nullable=True),
        sa.Column("pay_rate", sa.Float(), nullable=False),
        sa.Column("pay_rate_source", sa.String(), nullable=False),
        sa.Column("total_hours", sa.Float(), nullable=False),
        sa.Column("billable_hours", sa.Float(), nullable=False),
        sa.Column("base_wage", sa.Float(), nullable=False),
        sa.Column("on_costs", json_type, nullable=False),
        sa.Column("total_cost", sa.Float(), nullable=False),
        sa.Column("cost_per_hour", sa.Float(), nullable=False),
        sa.Column("charge_rate", sa.Float(), nullable=False),
        sa.Column("margin_rate", sa.Float(), nullable=False),
        sa.Column("penalty_estimates", json_type, nullable=True),
        sa.Column("calculation_date", sa.DateTime(), nullable=False),
        sa.Column("approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("approved_by", sa.Integer(), nullable=True),
        sa.Column("approved_date", sa.DateTime(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
    )
    op.create_index("ix_charge_rate_calculations_apprentice_id", "charge_rate_calculations", ["apprentice_id"])
    op.create_index("ix_charge_rate_calculations_host_employer_id", "charge_rate_calculations", ["host_employer_id"])

    op.create_table(
        "quotes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("host_employer_id", sa.Integer(), sa.ForeignKey("host_employers.id"), nullable=False),
        sa.Column("quote_number", sa.String(), nullable=False),
        sa.Column("quote_title", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="draft"),
        sa.Column("quote_date", sa.DateTime(), nullable=False),
        sa.Column("valid_until", sa.Date(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_quotes_host_employer_id", "quotes", ["host_employer_id"])

    op.create_table(
        "quote_line_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("quote_id", sa.Integer(), sa.ForeignKey("quotes.id"), nullable=False),
        sa.Column("apprentice_id", sa.Integer(), sa.ForeignKey("apprentices.id"), nullable=False),
        sa.Column("calculation_id", sa.Integer(), sa.ForeignKey("charge_rate_calculations.id"), nullable=True),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(), nullable=False, server_default="week"),
        sa.Column("weekly_hours", sa.Float(), nullable=False),
        sa.Column("rate_per_hour", sa.Float(), nullable=False),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_quote_line_items_quote_id", "quote_line_items", ["quote_id"])


def downgrade() -> None:
    op.drop_table("quote_line_items")
    op.drop_table("quotes")
    op.drop_table("charge_rate_calculations")
    op.drop_table("placements")
    op.drop_table("training_contracts")
    op.drop_table("apprentices")
    op.drop_table("host_employers")
    op.drop_table("penalty_rules")
    op.drop_table("awards")
