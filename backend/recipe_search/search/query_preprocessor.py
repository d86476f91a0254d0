"""Query preprocessing for PostgreSQL full-text search.

Turns raw user input into a ``to_tsquery`` expression. Input is sanitized
first so that tsquery operators typed by the user (``& | ! ( ) : * <->``,
quotes) can never reach the query parser.
"""

from __future__ import annotations

import re

from recipe_search.constants import MAX_QUERY_LENGTH

# Anything that is not a word character (Unicode letters, digits, underscore)
# or whitespace is dropped, including every tsquery operator.
_UNSAFE_CHARS_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_search_query(query: str) -> str:
    """Strip tsquery metacharacters, collapse whitespace and truncate.

    Args:
        query: Raw search query string from the user.

    Returns:
        The cleaned query, at most ``MAX_QUERY_LENGTH`` characters long.
        Empty string if nothing searchable remains.
    """
    cleaned = _UNSAFE_CHARS_RE.sub("", query)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    return cleaned[:MAX_QUERY_LENGTH].rstrip()


def build_tsquery_string(query: str) -> str:
    """Build a ``to_tsquery`` expression from a user search query.

    Words are AND-joined and the last word is prefix-matched (``:*``) so
    that partially typed words still match.

    Example: ``"chicken pasta"`` -> ``"chicken & pasta:*"``

    Returns:
        The tsquery expression, or an empty string when the sanitized
        query has no words.
    """
    words = sanitize_search_query(query).split()
    if not words:
        return ""

    if len(words) == 1:
        return f"{words[0]}:*"

    return f"{' & '.join(words[:-1])} & {words[-1]}:*"
