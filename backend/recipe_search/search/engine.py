"""Recipe search engine.

Two retrieval paths, chosen by whether the request carries a text query:

**Text query** (relevance search)
    1. Compile the query into a tsquery expression; nothing searchable
       left means an empty page.
    2. Fetch the complete, rank-ordered list of matching recipe ids.
    3. Slice the page out of that list, then load full rows for just
       those ids.
    4. Re-sort the rows by rank (``WHERE id IN (...)`` does not keep the
       list order) unless an explicit sort was requested.

**Filters only**
    ``COUNT`` and a paginated ``SELECT`` run concurrently in a task group.

Malformed text queries degrade to an empty page. Any other storage
failure propagates.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from sqlalchemy import ColumnElement, UnaryExpression, and_

from recipe_search.models import Recipe
from recipe_search.search.filters import build_search_conditions, build_search_order_by
from recipe_search.search.params import SearchFilters
from recipe_search.search.query_preprocessor import build_tsquery_string
from recipe_search.search.schemas import Pagination, SearchPage
from recipe_search.search.store import RecipeStore, TextSearchSyntaxError
from recipe_search.search.transform import transform_recipes

logger = logging.getLogger(__name__)


class RecipeSearchEngine:
    """Visibility-aware recipe search over a :class:`RecipeStore`.

    Args:
        store: Storage backend used for ranking, counting and row loading.
    """

    def __init__(self, store: RecipeStore) -> None:
        self._store = store

    async def search(self, filters: SearchFilters, user_id: str | None = None) -> SearchPage:
        """Run a search and return one page of results.

        Args:
            filters: Validated search filters.
            user_id: Id of the authenticated caller, or None for guests.
        """
        has_search_query = bool(filters.q and filters.q.strip())
        conditions = build_search_conditions(filters, user_id)
        order_by = build_search_order_by(filters.sort, has_search_query)

        if has_search_query:
            return await self._search_text(filters, user_id, conditions, order_by)
        return await self._search_filters(filters, user_id, conditions, order_by)

    async def _search_text(
        self,
        filters: SearchFilters,
        user_id: str | None,
        conditions: list[ColumnElement[bool]],
        order_by: Sequence[UnaryExpression] | None,
    ) -> SearchPage:
        tsquery = build_tsquery_string(filters.q or "")
        if not tsquery:
            logger.debug("Query %r has no searchable words", filters.q)
            return SearchPage.empty(filters.page, filters.limit)

        try:
            ranked = await self._store.rank_matches(tsquery, and_(*conditions))
        except TextSearchSyntaxError:
            logger.warning("Full-text search rejected query %r (tsquery=%r)", filters.q, tsquery)
            return SearchPage.empty(filters.page, filters.limit)

        total = len(ranked)
        page_ids = [entry.id for entry in ranked[filters.skip : filters.skip + filters.limit]]
        if not page_ids:
            return SearchPage.empty(filters.page, filters.limit, total=total)

        rank_map = {entry.id: entry.rank for entry in ranked}

        recipes = await self._store.find_recipes(
            and_(*conditions, Recipe.id.in_(page_ids)),
            order_by=order_by,
            user_id=user_id,
        )

        if order_by is None:
            position = {recipe_id: index for index, recipe_id in enumerate(page_ids)}
            recipes = sorted(recipes, key=lambda r: (-rank_map.get(r.id, 0.0), position.get(r.id, len(position))))

        return SearchPage(
            data=transform_recipes(recipes, include_user_state=user_id is not None),
            pagination=Pagination.build(total, filters.page, filters.limit),
        )

    async def _search_filters(
        self,
        filters: SearchFilters,
        user_id: str | None,
        conditions: list[ColumnElement[bool]],
        order_by: Sequence[UnaryExpression] | None,
    ) -> SearchPage:
        where = and_(*conditions)
        # A failing read cancels the other; the store's own exception is re-raised.
        try:
            async with asyncio.TaskGroup() as group:
                count_task = group.create_task(self._store.count_recipes(where))
                find_task = group.create_task(
                    self._store.find_recipes(
                        where,
                        order_by=order_by or [Recipe.created_at.desc(), Recipe.id.asc()],
                        skip=filters.skip,
                        take=filters.limit,
                        user_id=user_id,
                    )
                )
        except ExceptionGroup as exc_group:
            raise exc_group.exceptions[0] from None

        total, recipes = count_task.result(), find_task.result()
        return SearchPage(
            data=transform_recipes(recipes, include_user_state=user_id is not None),
            pagination=Pagination.build(total, filters.page, filters.limit),
        )
