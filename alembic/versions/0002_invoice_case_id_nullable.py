"""Allow invoices without a case

Deleting a case keeps its invoices and clears their case_id, so the column
can no longer be NOT NULL.

Revision ID: 0002_invoice_case_id_nullable
Revises: 0001_initial_schema
Create Date: 2025-10-14 15:40:07.221904

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002_invoice_case_id_nullable'
down_revision: Union[str, None] = '0001_initial_schema'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    with op.batch_alter_table("invoices") as batch_op:
        batch_op.alter_column("case_id", existing_type=sa.Integer(), nullable=True)


def downgrade():
    # Detached invoices have nowhere to go once the column is required again
    op.execute("DELETE FROM invoices WHERE case_id IS NULL")
    with op.batch_alter_table("invoices") as batch_op:
        batch_op.alter_column("case_id", existing_type=sa.Integer(), nullable=False)
