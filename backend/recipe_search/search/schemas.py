"""Wire schemas for search responses.

Field names are snake_case in Python and camelCase on the wire
(``pageSize``, ``primaryImage``, ``isSaved``...).
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from recipe_search.constants import TagStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthorSummary(_CamelModel):
    id: str
    name: str | None = None
    username: str | None = None
    image: str | None = None


class ImageRef(_CamelModel):
    url: str


class DietaryTagSummary(_CamelModel):
    id: str
    name: str


class UserTagSummary(_CamelModel):
    status: TagStatus


class RecipeSummary(_CamelModel):
    """A recipe as returned in search results.

    ``is_saved`` and ``user_tags`` are only set for authenticated callers and
    only ever describe the caller's own saves and tags.
    """

    id: str
    name: str
    description: str | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    servings: int | None = None
    difficulty: str | None = None
    cuisine_type: str | None = None
    visibility: str
    avg_rating: float | None = None
    rating_count: int = 0
    created_at: str
    author: AuthorSummary
    primary_image: ImageRef | None = None
    dietary_tags: list[DietaryTagSummary] = []
    user_tags: list[UserTagSummary] | None = None
    is_saved: bool | None = None


class Pagination(_CamelModel):
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> Pagination:
        return cls(total=total, page=page, page_size=limit, total_pages=math.ceil(total / limit))


class SearchPage(_CamelModel):
    """One page of search results with pagination metadata."""

    data: list[RecipeSummary]
    pagination: Pagination

    @classmethod
    def empty(cls, page: int, limit: int, total: int = 0) -> SearchPage:
        return cls(data=[], pagination=Pagination.build(total, page, limit))


class CuisineListResponse(_CamelModel):
    data: list[str]


class DietaryTagListResponse(_CamelModel):
    data: list[DietaryTagSummary]
