"""recipe tag position

Revision ID: 20261017_0002
Revises: 20251017_0001
Create Date: 2026-10-17 00:00:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261017_0002"
down_revision = "20251017_0001"
branch_labels = None
depends_on = None


def upgrade():
    # bases creadas antes de la columna: los enlaces existentes quedan con posición 0
    try:
        with op.batch_alter_table("recipe_tags") as batch:
            batch.add_column(sa.Column("position", sa.Integer(), nullable=False, server_default="0"))
    except Exception:
        pass
    try:
        op.create_index("ix_recipe_tags_recipe_position", "recipe_tags", ["recipe_id", "position"], unique=False)
    except Exception:
        pass


def downgrade():
    try:
        op.drop_index("ix_recipe_tags_recipe_position", table_name="recipe_tags")
    except Exception:
        pass
    try:
        with op.batch_alter_table("recipe_tags") as batch:
            batch.drop_column("position")
    except Exception:
        pass
