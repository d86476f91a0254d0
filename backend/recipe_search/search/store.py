"""Storage access for recipe search.

:class:`RecipeStore` is the narrow interface the search engine depends on;
:class:`SqlAlchemyRecipeStore` implements it on PostgreSQL. Every method
opens its own ``AsyncSession``, so independent reads (count + page fetch)
can be awaited concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import NamedTuple, Protocol

from sqlalchemy import ColumnElement, UnaryExpression, cast, func, select
from sqlalchemy.dialects.postgresql import REGCONFIG
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from recipe_search.constants import Visibility
from recipe_search.models import DietaryTag, Recipe, RecipeDietaryTag, RecipeImage, SavedRecipe, UserRecipeTag

logger = logging.getLogger(__name__)

# PostgreSQL error codes raised by to_tsquery() for malformed expressions:
# 42601 syntax_error, 22023 invalid_parameter_value.
_TSQUERY_ERROR_SQLSTATES = frozenset({"42601", "22023"})


class TextSearchSyntaxError(Exception):
    """Raised when the database rejects a full-text query expression."""


class RankEntry(NamedTuple):
    """A full-text match and its ``ts_rank`` relevance score."""

    id: str
    rank: float


class RecipeStore(Protocol):
    async def rank_matches(self, tsquery: str, where: ColumnElement[bool]) -> list[RankEntry]:
        """Return every recipe matching ``tsquery`` and ``where``, best rank first.

        Raises:
            TextSearchSyntaxError: If the expression cannot be parsed.
        """
        ...

    async def find_recipes(
        self,
        where: ColumnElement[bool],
        order_by: Sequence[UnaryExpression] | None = None,
        skip: int = 0,
        take: int | None = None,
        user_id: str | None = None,
    ) -> list[Recipe]:
        """Load recipes with the relations needed for search results."""
        ...

    async def count_recipes(self, where: ColumnElement[bool]) -> int: ...

    async def list_cuisines(self) -> list[str]: ...

    async def list_dietary_tags(self) -> list[DietaryTag]: ...


def _sqlstate(exc: DBAPIError) -> str | None:
    """Extract the SQLSTATE code from a wrapped driver exception."""
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


class SqlAlchemyRecipeStore:
    """PostgreSQL-backed :class:`RecipeStore`.

    Args:
        session_factory: Factory producing async sessions.
        text_config: PostgreSQL text search configuration used to parse
            tsquery expressions (must match the one that built
            ``recipes.search_vector``).
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], text_config: str = "english") -> None:
        self._session_factory = session_factory
        self._text_config = text_config

    async def rank_matches(self, tsquery: str, where: ColumnElement[bool]) -> list[RankEntry]:
        query = func.to_tsquery(cast(self._text_config, REGCONFIG), tsquery)
        rank = func.ts_rank(Recipe.search_vector, query).label("rank")

        # Unbounded: the caller paginates the complete ranked id list.
        stmt = (
            select(Recipe.id, rank)
            .where(Recipe.search_vector.op("@@")(query))
            .where(where)
            .order_by(rank.desc(), Recipe.id)
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
            except DBAPIError as exc:
                if _sqlstate(exc) in _TSQUERY_ERROR_SQLSTATES:
                    raise TextSearchSyntaxError(str(exc.orig)) from exc
                raise
            rows = result.all()

        logger.debug("tsquery %r matched %d recipes", tsquery, len(rows))
        return [RankEntry(id=row.id, rank=float(row.rank)) for row in rows]

    async def find_recipes(
        self,
        where: ColumnElement[bool],
        order_by: Sequence[UnaryExpression] | None = None,
        skip: int = 0,
        take: int | None = None,
        user_id: str | None = None,
    ) -> list[Recipe]:
        stmt = select(Recipe).where(where).options(*self._load_options(user_id))
        if order_by:
            stmt = stmt.order_by(*order_by)
        if skip:
            stmt = stmt.offset(skip)
        if take is not None:
            stmt = stmt.limit(take)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count_recipes(self, where: ColumnElement[bool]) -> int:
        stmt = select(func.count()).select_from(Recipe).where(where)
        async with self._session_factory() as session:
            total = await session.scalar(stmt)
        return int(total or 0)

    async def list_cuisines(self) -> list[str]:
        """Distinct cuisine types of public recipes, alphabetically."""
        stmt = (
            select(Recipe.cuisine_type)
            .where(Recipe.visibility == Visibility.PUBLIC, Recipe.cuisine_type.is_not(None))
            .distinct()
            .order_by(Recipe.cuisine_type)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [cuisine for cuisine in result.scalars().all() if cuisine is not None]

    async def list_dietary_tags(self) -> list[DietaryTag]:
        stmt = select(DietaryTag).order_by(DietaryTag.name)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    @staticmethod
    def _load_options(user_id: str | None) -> list:
        """Relations loaded for search results.

        Only the primary image is loaded, and saved/tag rows are restricted
        to the caller so other users' saves never leave the database.
        """
        options = [
            selectinload(Recipe.author),
            selectinload(Recipe.images.and_(RecipeImage.is_primary.is_(True))),
            selectinload(Recipe.dietary_tags).selectinload(RecipeDietaryTag.dietary_tag),
        ]
        if user_id:
            options.extend(
                [
                    selectinload(Recipe.saved_by.and_(SavedRecipe.user_id == user_id)),
                    selectinload(Recipe.user_tags.and_(UserRecipeTag.user_id == user_id)),
                ]
            )
        return options
