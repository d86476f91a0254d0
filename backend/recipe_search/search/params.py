"""Search filter input schema and query-string parsing.

Filters arrive as a flat query string where ``dietary`` may repeat::

    /api/search?q=chicken&cuisine=Italian&dietary=dt-1&dietary=dt-2&page=2

:func:`parse_search_filters` validates them into a :class:`SearchFilters`
instance. The search engine only ever sees validated filters.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from fastapi.datastructures import QueryParams

from recipe_search.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_QUERY_LENGTH, Difficulty, SearchSort


class InvalidSearchFilters(Exception):
    """Raised when the search query string fails validation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SearchFilters(BaseModel):
    """Validated search filters.

    Attributes:
        q: Free-text query (sanitized later, before reaching the database).
        cuisine: Cuisine type, matched case-insensitively.
        difficulty: Exact difficulty level.
        max_prep_time: Upper bound on prep time in minutes.
        max_cook_time: Upper bound on cook time in minutes.
        dietary: Dietary tag ids; a recipe matches if it has any of them.
        min_rating: Lower bound on the average rating.
        sort: Result ordering.
        page: 1-based page number.
        limit: Page size.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    q: str | None = Field(None, max_length=MAX_QUERY_LENGTH)
    cuisine: str | None = None
    difficulty: Difficulty | None = None
    max_prep_time: int | None = Field(None, gt=0)
    max_cook_time: int | None = Field(None, gt=0)
    dietary: list[str] | None = None
    min_rating: float | None = Field(None, ge=1, le=5)
    sort: SearchSort = SearchSort.RELEVANCE
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _format_error(error: dict[str, Any]) -> str:
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field}: {error['msg']}" if field else error["msg"]


def parse_search_filters(query_params: QueryParams) -> SearchFilters:
    """Validate raw query parameters into :class:`SearchFilters`.

    Empty values (``?cuisine=``) are treated as absent. ``dietary`` is
    collected from every occurrence of the parameter.

    Raises:
        InvalidSearchFilters: With the first validation message.
    """
    raw: dict[str, Any] = {key: value for key, value in query_params.items() if key != "dietary" and value != ""}
    dietary = [value for value in query_params.getlist("dietary") if value]
    if dietary:
        raw["dietary"] = dietary

    try:
        return SearchFilters.model_validate(raw)
    except ValidationError as exc:
        errors = exc.errors()
        message = _format_error(errors[0]) if errors else "Invalid filters"
        raise InvalidSearchFilters(message) from None
