# =============================================================================
# core/services/user_query.py - Search Filters and Pagination Helpers
# =============================================================================
# Turns the free-text `search` query parameter into a MongoDB filter and
# normalizes the page/limit parameters.
#
# The search term is always escaped before it goes into $regex, so it can
# only ever match as a literal, case-insensitive substring.
# =============================================================================

import math
import re
from typing import Any

from pymongo import DESCENDING

# Fields searched by the paginated list view
LIST_SEARCH_FIELDS = ("first_name", "last_name", "email", "phone", "city", "country")

# Fields searched by the CSV export. Narrower than the list view; kept as-is
# until product decides whether the two should match.
EXPORT_SEARCH_FIELDS = ("first_name", "last_name", "email")

# Newest first; _id breaks ties between users created in the same millisecond
NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]

DEFAULT_PAGE = 1

# Upper bound for page and limit. Keeps limit and (page - 1) * limit inside
# the signed 64-bit range BSON can encode.
MAX_PAGINATION_VALUE = 2**31 - 1

LEADING_INTEGER = re.compile(r"\s*([+-]?)(\d+)", re.ASCII)


def build_search_filter(
    search: str | None,
    fields: tuple[str, ...] = LIST_SEARCH_FIELDS,
) -> dict[str, Any]:
    """
    Build a MongoDB filter matching `search` in any of `fields`.

    Args:
        search: Free-text term; empty or None matches every user
        fields: Document keys to search

    Returns:
        {} for an empty search, otherwise an $or of case-insensitive
        substring matches

    Example:
        build_search_filter("paris")
        # {"$or": [{"first_name": {"$regex": "paris", "$options": "i"}}, ...]}
    """
    if not search:
        return {}

    pattern = re.escape(search)
    return {
        "$or": [
            {field: {"$regex": pattern, "$options": "i"}}
            for field in fields
        ]
    }


def parse_positive_int(value: Any, default: int) -> int:
    """
    Parse a pagination parameter, falling back to `default`.

    Like JavaScript's parseInt, only the leading integer is read, so "2.5"
    and "2abc" both give 2. Missing, non-numeric, zero and negative values
    give the default. Values above MAX_PAGINATION_VALUE are clamped to it.
    """
    if value is None:
        return default
    match = LEADING_INTEGER.match(str(value))
    if match is None:
        return default
    sign, digits = match.groups()
    digits = digits.lstrip("0")
    if sign == "-" or not digits:
        return default
    # Skip int() on huge strings; anything this long is over the bound anyway
    if len(digits) > len(str(MAX_PAGINATION_VALUE)):
        return MAX_PAGINATION_VALUE
    return min(int(digits), MAX_PAGINATION_VALUE)


def resolve_pagination(
    page: Any,
    limit: Any,
    default_limit: int,
    max_limit: int | None = None,
) -> tuple[int, int]:
    """
    Normalize raw page/limit values into a (page, limit) pair.

    max_limit caps the page size when configured; by default there is no cap.
    """
    resolved_page = parse_positive_int(page, DEFAULT_PAGE)
    resolved_limit = parse_positive_int(limit, default_limit)
    if max_limit is not None:
        resolved_limit = min(resolved_limit, max_limit)
    return resolved_page, resolved_limit


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show `total` users, `limit` per page."""
    return math.ceil(total / limit)
