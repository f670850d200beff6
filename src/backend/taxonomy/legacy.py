"""
Helpers for category strings written by earlier editor revisions.

The first revision stored "Level1 > Level2 > Level3" strings (or a bare
standalone name such as "Opinion") in posts.category, and the edit screen
converted between those and leaf display names. These helpers keep that
behaviour for screens and migrations that still read such values.
"""
from __future__ import annotations

from typing import Optional, Tuple

from taxonomy.definitions import STANDALONE_CATEGORY_NAMES
from taxonomy.resolver import CategoryResolver, get_resolver
from taxonomy.tree import HIERARCHY_SEPARATOR


def split_hierarchical_name(full_category: str) -> Tuple[str, str, str]:
    """
    Split a stored category string into (parent, middle, child).

    A two-part name has no middle segment for the child fallback:
    "News > Local" -> ("News", "Local", "Local"). A single name is its own
    parent and child: "Opinion" -> ("Opinion", "", "Opinion").
    """
    parts = full_category.split(HIERARCHY_SEPARATOR)
    parent = parts[0]
    middle = parts[1] if len(parts) > 1 else ""
    if len(parts) > 2:
        child = parts[2]
    elif len(parts) > 1:
        child = parts[1]
    else:
        child = full_category
    return parent, middle, child


def get_parent_category(full_category: str) -> str:
    return split_hierarchical_name(full_category)[0]


def get_middle_category(full_category: str) -> str:
    return split_hierarchical_name(full_category)[1]


def get_child_category(full_category: str) -> str:
    return split_hierarchical_name(full_category)[2]


def get_category_display_name(full_category: str) -> str:
    """Return the most specific segment of a stored category string."""
    if full_category in STANDALONE_CATEGORY_NAMES:
        return full_category
    return full_category.split(HIERARCHY_SEPARATOR)[-1]


def hierarchical_to_display_name(
    hierarchical_name: str,
    resolver: Optional[CategoryResolver] = None,
) -> str:
    """Map a stored hierarchical name to its display name; unknown names pass through."""
    breadcrumb = (resolver or get_resolver()).resolve_by_hierarchical_name(hierarchical_name)
    return breadcrumb.display_name if breadcrumb else hierarchical_name


def display_name_to_hierarchical(
    display_name: str,
    resolver: Optional[CategoryResolver] = None,
) -> str:
    """Map a display name picked in the editor back to its hierarchical name; unknown names pass through."""
    breadcrumb = (resolver or get_resolver()).resolve_by_display_name(display_name)
    return breadcrumb.hierarchical_name if breadcrumb else display_name
