import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recipe_search.constants import Visibility
from recipe_search.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """Recipe author / searching user."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    username: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class Recipe(Base):
    """Recipe with visibility tier and a trigger-maintained search vector."""

    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    prep_time: Mapped[int | None] = mapped_column(Integer, nullable=True)  # minutes
    cook_time: Mapped[int | None] = mapped_column(Integer, nullable=True)  # minutes
    servings: Mapped[int | None] = mapped_column(Integer, nullable=True)
    difficulty: Mapped[str | None] = mapped_column(String(20), nullable=True)
    cuisine_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    visibility: Mapped[str] = mapped_column(String(20), default=Visibility.PRIVATE, server_default="PRIVATE")
    author_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"))
    avg_rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    rating_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Full-text search vector (maintained by the recipes_search_vector_update trigger)
    search_vector: Mapped[str | None] = mapped_column(TSVECTOR, nullable=True)

    author: Mapped[User] = relationship()
    images: Mapped[list["RecipeImage"]] = relationship(order_by="RecipeImage.order", cascade="all, delete-orphan")
    dietary_tags: Mapped[list["RecipeDietaryTag"]] = relationship(cascade="all, delete-orphan")
    saved_by: Mapped[list["SavedRecipe"]] = relationship(cascade="all, delete-orphan")
    user_tags: Mapped[list["UserRecipeTag"]] = relationship(cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_recipes_search_vector", "search_vector", postgresql_using="gin"),
        Index("idx_recipes_author_id", "author_id"),
        Index("idx_recipes_visibility", "visibility"),
        Index("idx_recipes_created_at", "created_at"),
        Index("idx_recipes_cuisine_type", "cuisine_type"),
    )


class RecipeImage(Base):
    __tablename__ = "recipe_images"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    recipe_id: Mapped[str] = mapped_column(String(36), ForeignKey("recipes.id", ondelete="CASCADE"))
    url: Mapped[str] = mapped_column(String(1024))
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)
    order: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (Index("idx_recipe_images_recipe_id", "recipe_id"),)


class DietaryTag(Base):
    __tablename__ = "dietary_tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(100), unique=True)


class RecipeDietaryTag(Base):
    """Join row between a recipe and one of its dietary tags."""

    __tablename__ = "recipe_dietary_tags"

    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True
    )
    dietary_tag_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("dietary_tags.id", ondelete="CASCADE"), primary_key=True
    )

    dietary_tag: Mapped[DietaryTag] = relationship()

    __table_args__ = (Index("idx_recipe_dietary_tags_tag_id", "dietary_tag_id"),)


class SavedRecipe(Base):
    __tablename__ = "saved_recipes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"))
    recipe_id: Mapped[str] = mapped_column(String(36), ForeignKey("recipes.id", ondelete="CASCADE"))
    saved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_saved_recipes_user_recipe"),
        Index("idx_saved_recipes_recipe_id", "recipe_id"),
    )


class UserRecipeTag(Base):
    """Personal status tag (favorite / to try / made before) on a recipe."""

    __tablename__ = "user_recipe_tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"))
    recipe_id: Mapped[str] = mapped_column(String(36), ForeignKey("recipes.id", ondelete="CASCADE"))
    status: Mapped[str] = mapped_column(String(20))

    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", "status", name="uq_user_recipe_tags_user_recipe_status"),
        Index("idx_user_recipe_tags_recipe_id", "recipe_id"),
    )
