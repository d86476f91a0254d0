"""Convert loaded ``Recipe`` rows into :class:`RecipeSummary` wire objects."""

from __future__ import annotations

from collections.abc import Iterable

from recipe_search.models import Recipe
from recipe_search.search.schemas import (
    AuthorSummary,
    DietaryTagSummary,
    ImageRef,
    RecipeSummary,
    UserTagSummary,
)
from recipe_search.utils.datetime_utils import datetime_to_iso


def transform_recipe(recipe: Recipe, include_user_state: bool = False) -> RecipeSummary:
    """Build the wire shape for one recipe.

    ``recipe.images`` is expected to hold only the primary image and
    ``recipe.saved_by`` / ``recipe.user_tags`` only the caller's own rows;
    the store loads them that way. ``saved_by`` is reduced to a boolean and
    never exposed as-is.
    """
    fields = {
        "id": recipe.id,
        "name": recipe.name,
        "description": recipe.description,
        "prep_time": recipe.prep_time,
        "cook_time": recipe.cook_time,
        "servings": recipe.servings,
        "difficulty": recipe.difficulty,
        "cuisine_type": recipe.cuisine_type,
        "visibility": recipe.visibility,
        "avg_rating": recipe.avg_rating,
        "rating_count": recipe.rating_count or 0,
        "created_at": datetime_to_iso(recipe.created_at) or "",
        "author": AuthorSummary(
            id=recipe.author.id,
            name=recipe.author.name,
            username=recipe.author.username,
            image=recipe.author.image,
        ),
        "primary_image": ImageRef(url=recipe.images[0].url) if recipe.images else None,
        "dietary_tags": [
            DietaryTagSummary(id=join.dietary_tag.id, name=join.dietary_tag.name) for join in recipe.dietary_tags
        ],
    }
    if include_user_state:
        fields["user_tags"] = [UserTagSummary(status=tag.status) for tag in recipe.user_tags]
        fields["is_saved"] = len(recipe.saved_by) > 0

    return RecipeSummary(**fields)


def transform_recipes(recipes: Iterable[Recipe], include_user_state: bool = False) -> list[RecipeSummary]:
    return [transform_recipe(recipe, include_user_state) for recipe in recipes]
