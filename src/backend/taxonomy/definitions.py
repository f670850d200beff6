"""
Canonical category taxonomy for the news CMS.

This module is the single source of truth for category definitions.
Category ids and url paths are referenced by published posts and bookmarked
links, so they must never be renumbered or reused once published.
Changing the taxonomy is a code change, not a data operation.

Hierarchical names ("Arts and Entertainment > Theatre > Reviews") are not
authored here; they are derived from the parent chain when the taxonomy
is built.
"""
from __future__ import annotations

from typing import Dict, List, Optional, TypedDict


class CategoryDefinition(TypedDict):
    id: int
    name: str
    display_name: str
    level: int
    parent_id: Optional[int]
    url_path: str


def _category(
    id: int,
    name: str,
    url_path: str,
    parent_id: Optional[int] = None,
    level: int = 1,
) -> CategoryDefinition:
    return {
        "id": id,
        "name": name,
        "display_name": name,
        "level": level,
        "parent_id": parent_id,
        "url_path": url_path,
    }


CATEGORY_DEFINITIONS: List[CategoryDefinition] = [
    # Top-level sections
    _category(1, "News", "news"),
    _category(2, "Lifestyle", "lifestyle"),
    _category(3, "Arts and Entertainment", "artsentertainment"),
    _category(4, "Opinion", "opinion"),  # standalone, no children

    # News
    _category(11, "Local", "news/localnews", parent_id=1, level=2),
    _category(12, "National", "news/nationalnews", parent_id=1, level=2),
    _category(13, "World", "news/world", parent_id=1, level=2),
    _category(14, "Features", "news/features", parent_id=1, level=2),
    _category(15, "Environment", "news/environment", parent_id=1, level=2),
    _category(16, "Media", "news/media", parent_id=1, level=2),

    # Lifestyle
    _category(21, "Food and Wine", "lifestyle/food-and-wine", parent_id=2, level=2),
    _category(22, "Sport", "lifestyle/sport", parent_id=2, level=2),
    _category(23, "Travel", "lifestyle/travel", parent_id=2, level=2),

    # Arts and Entertainment
    _category(31, "Games", "artsentertainment/games", parent_id=3, level=2),
    _category(32, "Theatre", "artsentertainment/theatre", parent_id=3, level=2),
    _category(33, "Film", "artsentertainment/film", parent_id=3, level=2),
    _category(34, "Music", "artsentertainment/music", parent_id=3, level=2),
    _category(35, "Galleries", "artsentertainment/galleries", parent_id=3, level=2),
    _category(36, "Books", "artsentertainment/books", parent_id=3, level=2),
    _category(37, "Drawn and Quartered", "artsentertainment/drawn-and-quartered", parent_id=3, level=2),

    # Food and Wine
    _category(211, "Restaurant Reviews", "lifestyle/food-and-wine/restaurant-reviews", parent_id=21, level=3),
    _category(212, "Wine Match", "lifestyle/food-and-wine/wine-match", parent_id=21, level=3),

    # Theatre
    _category(321, "Reviews", "artsentertainment/theatre/theatrereviews", parent_id=32, level=3),

    # Galleries
    _category(351, "Exhibitions", "artsentertainment/galleries/exhibitions", parent_id=35, level=3),
    _category(352, "Eye On The Street", "artsentertainment/galleries/eye-on-the-street", parent_id=35, level=3),
]


# Legacy and shortened url fragments kept alive for old inbound links.
# Only used when resolving; new links are always built from url_path.
SPECIAL_ROUTE_ALIASES: Dict[str, int] = {
    "localnews": 11,                                  # /localnews
    "news/localnews": 11,                             # /category/news/localnews
    "news/local": 11,                                 # /category/news/local
    "opinion": 4,                                     # /opinion
    "arts/theatre/reviews": 321,                      # /category/arts/theatre/reviews
    "artsentertainment/theatre/theatrereviews": 321,  # /category/artsentertainment/theatre/theatrereviews
}


# Names that are selectable on their own without a parent section
# (the first revision stored these verbatim in posts.category).
STANDALONE_CATEGORY_NAMES: List[str] = [
    d["name"] for d in CATEGORY_DEFINITIONS
    if d["parent_id"] is None
    and not any(c["parent_id"] == d["id"] for c in CATEGORY_DEFINITIONS)
]


__all__ = [
    "CategoryDefinition",
    "CATEGORY_DEFINITIONS",
    "SPECIAL_ROUTE_ALIASES",
    "STANDALONE_CATEGORY_NAMES",
]
