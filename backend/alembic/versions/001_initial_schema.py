"""Create recipe schema with full-text search vector.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-18 08:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Apply schema migrations."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("username", sa.String(100), nullable=True),
        sa.Column("image", sa.String(1024), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "recipes",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("prep_time", sa.Integer, nullable=True),
        sa.Column("cook_time", sa.Integer, nullable=True),
        sa.Column("servings", sa.Integer, nullable=True),
        sa.Column("difficulty", sa.String(20), nullable=True),
        sa.Column("cuisine_type", sa.String(100), nullable=True),
        sa.Column("visibility", sa.String(20), nullable=False, server_default="PRIVATE"),
        sa.Column("author_id", sa.String(36), nullable=False),
        sa.Column("avg_rating", sa.Float, nullable=True),
        sa.Column("rating_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("search_vector", postgresql.TSVECTOR, nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "idx_recipes_search_vector", "recipes", ["search_vector"], unique=False, postgresql_using="gin"
    )
    op.create_index("idx_recipes_author_id", "recipes", ["author_id"], unique=False)
    op.create_index("idx_recipes_visibility", "recipes", ["visibility"], unique=False)
    op.create_index("idx_recipes_created_at", "recipes", ["created_at"], unique=False)
    op.create_index("idx_recipes_cuisine_type", "recipes", ["cuisine_type"], unique=False)

    op.create_table(
        "recipe_images",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("recipe_id", sa.String(36), nullable=False),
        sa.Column("url", sa.String(1024), nullable=False),
        sa.Column("is_primary", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("order", sa.Integer, nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_recipe_images_recipe_id", "recipe_images", ["recipe_id"], unique=False)

    op.create_table(
        "dietary_tags",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "recipe_dietary_tags",
        sa.Column("recipe_id", sa.String(36), nullable=False),
        sa.Column("dietary_tag_id", sa.String(36), nullable=False),
        sa.PrimaryKeyConstraint("recipe_id", "dietary_tag_id"),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["dietary_tag_id"], ["dietary_tags.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_recipe_dietary_tags_tag_id", "recipe_dietary_tags", ["dietary_tag_id"], unique=False)

    op.create_table(
        "saved_recipes",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("recipe_id", sa.String(36), nullable=False),
        sa.Column("saved_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "recipe_id", name="uq_saved_recipes_user_recipe"),
    )
    op.create_index("idx_saved_recipes_recipe_id", "saved_recipes", ["recipe_id"], unique=False)

    op.create_table(
        "user_recipe_tags",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("recipe_id", sa.String(36), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "recipe_id", "status", name="uq_user_recipe_tags_user_recipe_status"),
    )
    op.create_index("idx_user_recipe_tags_recipe_id", "user_recipe_tags", ["recipe_id"], unique=False)

    # Keep recipes.search_vector in sync: name (A), cuisine (B), description (C)
    op.execute(
        """
        CREATE OR REPLACE FUNCTION recipes_search_vector_update()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.search_vector :=
                setweight(to_tsvector('english', coalesce(NEW.name, '')), 'A') ||
                setweight(to_tsvector('english', coalesce(NEW.cuisine_type, '')), 'B') ||
                setweight(to_tsvector('english', coalesce(NEW.description, '')), 'C');
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """
    )

    op.execute(
        """
        CREATE TRIGGER trigger_recipes_search_vector
            BEFORE INSERT OR UPDATE OF name, cuisine_type, description ON recipes
            FOR EACH ROW
            EXECUTE FUNCTION recipes_search_vector_update();
    """
    )


def downgrade() -> None:
    """Revert schema migrations."""
    op.execute("DROP TRIGGER IF EXISTS trigger_recipes_search_vector ON recipes")
    op.execute("DROP FUNCTION IF EXISTS recipes_search_vector_update()")

    op.drop_index("idx_user_recipe_tags_recipe_id", table_name="user_recipe_tags")
    op.drop_table("user_recipe_tags")
    op.drop_index("idx_saved_recipes_recipe_id", table_name="saved_recipes")
    op.drop_table("saved_recipes")
    op.drop_index("idx_recipe_dietary_tags_tag_id", table_name="recipe_dietary_tags")
    op.drop_table("recipe_dietary_tags")
    op.drop_table("dietary_tags")
    op.drop_index("idx_recipe_images_recipe_id", table_name="recipe_images")
    op.drop_table("recipe_images")

    op.drop_index("idx_recipes_cuisine_type", table_name="recipes")
    op.drop_index("idx_recipes_created_at", table_name="recipes")
    op.drop_index("idx_recipes_visibility", table_name="recipes")
    op.drop_index("idx_recipes_author_id", table_name="recipes")
    op.drop_index("idx_recipes_search_vector", table_name="recipes")
    op.drop_table("recipes")

    op.drop_table("users")
