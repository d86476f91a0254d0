"""Search API endpoints.

Provides:
- ``GET /search`` -- Full-text + filter search over recipes visible to the caller.
- ``GET /search/cuisines`` -- Distinct cuisines of public recipes.
- ``GET /search/dietary-tags`` -- All dietary tags.

Authentication is optional. Guests only see public recipes; signed-in
users also see their own, along with their saved/tag state.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from recipe_search.config import get_settings
from recipe_search.database import async_session_factory
from recipe_search.search.engine import RecipeSearchEngine
from recipe_search.search.params import SearchFilters, parse_search_filters
from recipe_search.search.schemas import (
    CuisineListResponse,
    DietaryTagListResponse,
    DietaryTagSummary,
    SearchPage,
)
from recipe_search.search.store import RecipeStore, SqlAlchemyRecipeStore
from recipe_search.services.auth_service import get_current_user_optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


# ---------------------------------------------------------------------------
# Dependencies (overridden in tests)
# ---------------------------------------------------------------------------


def get_recipe_store() -> RecipeStore:
    """Create the PostgreSQL-backed recipe store."""
    settings = get_settings()
    return SqlAlchemyRecipeStore(async_session_factory, text_config=settings.SEARCH_TEXT_CONFIG)


def get_search_filters(request: Request) -> SearchFilters:
    """Validate the query string; failures become a 400 response."""
    return parse_search_filters(request.query_params)


def _facet_cache_control() -> str:
    max_age = get_settings().SEARCH_FACET_CACHE_SECONDS
    return f"public, max-age={max_age}, stale-while-revalidate={max_age * 2}"


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=SearchPage, response_model_exclude_unset=True)
async def search_recipes(
    filters: SearchFilters = Depends(get_search_filters),  # noqa: B008
    current_user: dict | None = Depends(get_current_user_optional),  # noqa: B008
    store: RecipeStore = Depends(get_recipe_store),  # noqa: B008
) -> SearchPage:
    """Search recipes by free text and structured filters.

    Query parameters: ``q``, ``cuisine``, ``difficulty``, ``maxPrepTime``,
    ``maxCookTime``, ``dietary`` (repeatable), ``minRating``, ``sort``,
    ``page``, ``limit``.
    """
    user_id = current_user["user_id"] if current_user else None
    logger.info(
        "Search request: user=%s, query=%r, sort=%s, page=%d, limit=%d",
        user_id or "guest",
        filters.q,
        filters.sort.value,
        filters.page,
        filters.limit,
    )

    engine = RecipeSearchEngine(store)
    return await engine.search(filters, user_id=user_id)


@router.get("/cuisines", response_model=CuisineListResponse)
async def list_cuisines(
    response: Response,
    store: RecipeStore = Depends(get_recipe_store),  # noqa: B008
) -> CuisineListResponse:
    """List the distinct cuisine types of public recipes."""
    cuisines = await store.list_cuisines()
    response.headers["Cache-Control"] = _facet_cache_control()
    return CuisineListResponse(data=cuisines)


@router.get("/dietary-tags", response_model=DietaryTagListResponse)
async def list_dietary_tags(
    response: Response,
    store: RecipeStore = Depends(get_recipe_store),  # noqa: B008
) -> DietaryTagListResponse:
    """List all dietary tags, ordered by name."""
    tags = await store.list_dietary_tags()
    response.headers["Cache-Control"] = _facet_cache_control()
    return DietaryTagListResponse(data=[DietaryTagSummary(id=tag.id, name=tag.name) for tag in tags])
