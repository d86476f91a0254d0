from enum import StrEnum


class Visibility(StrEnum):
    PRIVATE = "PRIVATE"
    SHARED = "SHARED"
    PUBLIC = "PUBLIC"


class Difficulty(StrEnum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class TagStatus(StrEnum):
    FAVORITE = "FAVORITE"
    TO_TRY = "TO_TRY"
    MADE_BEFORE = "MADE_BEFORE"


class SearchSort(StrEnum):
    RELEVANCE = "relevance"
    NEWEST = "newest"
    OLDEST = "oldest"
    RATING = "rating"
    PREP_TIME = "prepTime"
    TITLE = "title"


MAX_QUERY_LENGTH = 200
DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 50
