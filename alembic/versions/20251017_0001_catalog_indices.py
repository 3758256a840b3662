"""catalog indices

Revision ID: 20251017_0001
Revises:
Create Date: 2025-10-17 00:00:00

"""
from alembic import op

# revision identifiers, used by Alembic.
revision = "20251017_0001"
down_revision = None
branch_labels = None
depends_on = None

# Nota: SQLModel crea las tablas (recipes, comments, tags, recipe_tags, profiles); aquí sólo índices
INDICES = [
    ("ix_recipes_status_created", "recipes", ["status", "created_at"]),
    ("ix_comments_recipe_created", "comments", ["recipe_id", "created_at"]),
    ("ix_recipe_tags_tag", "recipe_tags", ["tag_id"]),
]

def upgrade():
    for name, table, cols in INDICES:
        try:
            op.create_index(name, table, cols, unique=False)
        except Exception:
            pass

def downgrade():
    for name, table, _ in INDICES:
        try:
            op.drop_index(name, table_name=table)
        except Exception:
            pass
