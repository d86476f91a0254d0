"""Compile search filters into SQLAlchemy predicates and orderings.

The text query itself is not handled here: it is matched by the ranked-id
query in :mod:`recipe_search.search.store`. Everything else (visibility and
the structured filters) becomes a list of boolean clauses that are AND-ed
together.
"""

from __future__ import annotations

from sqlalchemy import ColumnElement, UnaryExpression, and_, func, or_

from recipe_search.constants import SearchSort, Visibility
from recipe_search.models import Recipe, RecipeDietaryTag
from recipe_search.search.params import SearchFilters


def build_visibility_clause(user_id: str | None) -> ColumnElement[bool]:
    """Rows the caller may read: own recipes plus public ones.

    Anonymous callers only see public recipes. The same clause is used by
    the ranked full-text query and by the relational row query.
    """
    if user_id:
        return or_(Recipe.author_id == user_id, Recipe.visibility == Visibility.PUBLIC)
    return Recipe.visibility == Visibility.PUBLIC


def build_search_conditions(filters: SearchFilters, user_id: str | None = None) -> list[ColumnElement[bool]]:
    """Build the non-text search conditions for the given filters."""
    conditions: list[ColumnElement[bool]] = [build_visibility_clause(user_id)]

    if filters.cuisine:
        conditions.append(func.lower(Recipe.cuisine_type) == filters.cuisine.lower())
    if filters.difficulty:
        conditions.append(Recipe.difficulty == filters.difficulty)
    if filters.max_prep_time:
        conditions.append(Recipe.prep_time <= filters.max_prep_time)
    if filters.max_cook_time:
        conditions.append(Recipe.cook_time <= filters.max_cook_time)
    if filters.min_rating:
        conditions.append(Recipe.avg_rating >= filters.min_rating)
    if filters.dietary:
        conditions.append(Recipe.dietary_tags.any(RecipeDietaryTag.dietary_tag_id.in_(filters.dietary)))

    return conditions


def build_search_where(filters: SearchFilters, user_id: str | None = None) -> ColumnElement[bool]:
    """AND all search conditions into a single predicate."""
    return and_(*build_search_conditions(filters, user_id))


def build_search_order_by(sort: str, has_search_query: bool) -> list[UnaryExpression] | None:
    """Resolve a sort key into ORDER BY clauses.

    Returns ``None`` when results must be ordered by full-text rank
    (``relevance`` with a text query). Without a text query ``relevance``
    falls back to newest first, as does any unknown key. Recipes without
    a rating or prep time always sort after those that have one. Every
    ordering ends on ``recipes.id`` so OFFSET pages never overlap on ties.
    """
    if has_search_query and sort == SearchSort.RELEVANCE:
        return None

    if sort == SearchSort.OLDEST:
        return [Recipe.created_at.asc(), Recipe.id.asc()]
    if sort == SearchSort.RATING:
        return [Recipe.avg_rating.desc().nulls_last(), Recipe.id.asc()]
    if sort == SearchSort.PREP_TIME:
        return [Recipe.prep_time.asc().nulls_last(), Recipe.id.asc()]
    if sort == SearchSort.TITLE:
        return [Recipe.name.asc(), Recipe.id.asc()]
    return [Recipe.created_at.desc(), Recipe.id.asc()]
