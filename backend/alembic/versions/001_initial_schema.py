"""Initial schema — daos table with embedded team and task list.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "daos",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("numero_liste", sa.String(100), nullable=False),
        sa.Column("objet_dossier", sa.Text, nullable=False),
        sa.Column("reference", sa.String(100), nullable=False),
        sa.Column("autorite_contractante", sa.Text, nullable=False),
        sa.Column("date_depot", sa.Date, nullable=False),
        sa.Column("equipe", sa.JSON, nullable=False),
        sa.Column("tasks", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_daos"),
    )
    op.create_index("ix_daos_numero_liste", "daos", ["numero_liste"])


def downgrade() -> None:
    op.drop_index("ix_daos_numero_liste", table_name="daos")
    op.drop_table("daos")
