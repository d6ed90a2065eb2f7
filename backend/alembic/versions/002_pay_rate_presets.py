"""Pay rate presets, selectable per host employer or placement.

Revision ID: 002
Revises: 001
Create Date: 2025-04-02

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PRESET_FK_TABLES = ("host_employers", "placements")


def upgrade() -> None:
    op.create_table(
        "pay_rate_presets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("year1_rate", sa.Float(), nullable=False),
        sa.Column("year2_rate", sa.Float(), nullable=False),
        sa.Column("year3_rate", sa.Float(), nullable=False),
        sa.Column("year4_rate", sa.Float(), nullable=False),
        sa.Column("industry", sa.String(), nullable=True),
        sa.Column("calendar_year", sa.Integer(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_pay_rate_presets_calendar_year", "pay_rate_presets", ["calendar_year"])

    for table in PRESET_FK_TABLES:
        with op.batch_alter_table(table) as batch:
            batch.add_column(sa.Column("pay_rate_preset_id", sa.Integer(), nullable=True))
            batch.create_foreign_key(
                f"fk_{table}_pay_rate_preset_id", "pay_rate_presets", ["pay_rate_preset_id"], ["id"],
            )


def downgrade() -> None:
    for table in PRESET_FK_TABLES:
        with op.batch_alter_table(table) as batch:
            batch.drop_constraint(f"fk_{table}_pay_rate_preset_id", type_="foreignkey")
            batch.drop_column("pay_rate_preset_id")
    op.drop_index("ix_pay_rate_presets_calendar_year", table_name="pay_rate_presets")
    op.drop_table("pay_rate_presets")
