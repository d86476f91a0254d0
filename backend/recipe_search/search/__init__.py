"""Recipe full-text search with visibility-aware filtering and pagination."""

from recipe_search.search.engine import RecipeSearchEngine
from recipe_search.search.params import InvalidSearchFilters, SearchFilters, parse_search_filters
from recipe_search.search.schemas import SearchPage
from recipe_search.search.store import RankEntry, RecipeStore, SqlAlchemyRecipeStore, TextSearchSyntaxError

__all__ = [
    "InvalidSearchFilters",
    "RankEntry",
    "RecipeSearchEngine",
    "RecipeStore",
    "SearchFilters",
    "SearchPage",
    "SqlAlchemyRecipeStore",
    "TextSearchSyntaxError",
    "parse_search_filters",
]
