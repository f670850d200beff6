"""
In-memory category tree built from the static definitions.

The tree is validated once when it is built and is read-only afterwards,
so it can be shared by any number of concurrent callers.
"""

from dataclasses import dataclass, asdict
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Set

from taxonomy.definitions import (
    CategoryDefinition,
    CATEGORY_DEFINITIONS,
    SPECIAL_ROUTE_ALIASES,
)
from taxonomy.errors import TaxonomyConfigurationError


HIERARCHY_SEPARATOR = " > "
MAX_LEVEL = 3
REQUIRED_KEYS = ("id", "name", "display_name", "level", "parent_id", "url_path")


@dataclass(frozen=True)
class CategoryNode:
    """One entry of the three-level taxonomy."""
    id: int
    name: str
    display_name: str
    level: int
    parent_id: Optional[int]
    url_path: str
    hierarchical_name: str

    @property
    def is_root(self) -> bool:
        return self.level == 1

    def to_dict(self) -> dict:
        return asdict(self)


class Taxonomy:
    """
    Validated, immutable category tree.

    Nodes keep their declaration order, which is the order pickers and
    listings are rendered in.
    """

    def __init__(self, nodes: Iterable[CategoryNode], aliases: Mapping[str, int]):
        self._nodes = tuple(nodes)
        self._by_id: Dict[int, CategoryNode] = {n.id: n for n in self._nodes}
        self._children: Dict[int, List[CategoryNode]] = {}
        for node in self._nodes:
            if node.parent_id is not None:
                self._children.setdefault(node.parent_id, []).append(node)
        self._aliases = MappingProxyType(dict(aliases))

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self):
        return iter(self._nodes)

    def __contains__(self, category_id) -> bool:
        return category_id in self._by_id

    @property
    def aliases(self) -> Mapping[str, int]:
        """Legacy url fragment -> category id (read-only)."""
        return self._aliases

    def get_category_by_id(self, category_id: int) -> Optional[CategoryNode]:
        """Get a category by id, or None if the id is unknown."""
        return self._by_id.get(category_id)

    def get_all_nodes(self) -> List[CategoryNode]:
        """Return all categories in declaration order."""
        return list(self._nodes)

    def get_roots(self) -> List[CategoryNode]:
        """Return the level-1 categories in declaration order."""
        return [n for n in self._nodes if n.is_root]

    def get_children(self, category_id: int) -> List[CategoryNode]:
        """Return direct children of a category (empty for leaves and unknown ids)."""
        return list(self._children.get(category_id, ()))

    def has_children(self, category_id: int) -> bool:
        return bool(self._children.get(category_id))

    def get_parent(self, node: CategoryNode) -> Optional[CategoryNode]:
        if node.parent_id is None:
            return None
        return self._by_id.get(node.parent_id)


def _valid_level(level) -> bool:
    return isinstance(level, int) and not isinstance(level, bool) and 1 <= level <= MAX_LEVEL


def _find_problems(
    definitions: List[CategoryDefinition],
    aliases: Mapping[str, int],
) -> List[str]:
    problems: List[str] = []
    by_id: Dict[int, CategoryDefinition] = {}
    seen_paths: Set[str] = set()
    complete: List[CategoryDefinition] = []

    for index, d in enumerate(definitions):
        missing = [key for key in REQUIRED_KEYS if key not in d]
        if missing:
            problems.append(f"definition {index} is missing {', '.join(missing)}")
            continue
        complete.append(d)

        cid = d["id"]
        if cid in by_id:
            problems.append(f"duplicate id {cid}")
        else:
            by_id[cid] = d

        if not d["name"]:
            problems.append(f"category {cid} has an empty name")

        path = d["url_path"]
        if not path:
            problems.append(f"category {cid} has an empty url_path")
        elif path in seen_paths:
            problems.append(f"duplicate url_path '{path}'")
        seen_paths.add(path)

        if not _valid_level(d["level"]):
            problems.append(f"category {cid} has invalid level {d['level']!r}")

    for d in complete:
        cid, parent_id, level = d["id"], d["parent_id"], d["level"]
        # Already reported above
        if not _valid_level(level):
            continue
        if parent_id is None:
            if level != 1:
                problems.append(f"category {cid} has no parent but level {level}")
            continue
        parent = by_id.get(parent_id)
        if parent is None:
            problems.append(f"category {cid} references missing parent {parent_id}")
        elif _valid_level(parent["level"]) and parent["level"] != level - 1:
            problems.append(
                f"category {cid} (level {level}) has parent {parent_id} "
                f"at level {parent['level']}"
            )

    # Every parent chain must end at a root
    for cid in by_id:
        visited: Set[int] = set()
        current = by_id.get(cid)
        while current is not None and current["parent_id"] is not None:
            if current["id"] in visited:
                problems.append(f"cycle in parent chain of category {cid}")
                break
            visited.add(current["id"])
            current = by_id.get(current["parent_id"])

    for fragment, target in aliases.items():
        if not fragment:
            problems.append("empty route alias")
        if target not in by_id:
            problems.append(f"route alias '{fragment}' points at unknown category {target}")

    return problems


def build_taxonomy(
    definitions: List[CategoryDefinition],
    aliases: Optional[Mapping[str, int]] = None,
) -> Taxonomy:
    """
    Validate category definitions and build the taxonomy tree.

    Args:
        definitions: Category definitions in declaration order
        aliases: Legacy url fragment -> category id

    Returns:
        Validated Taxonomy

    Raises:
        TaxonomyConfigurationError: If a definition is incomplete, ids or
            url paths are duplicated, a parent is missing, the parent chain
            has a cycle or levels do not line up with the parent chain
    """
    aliases = aliases or {}
    problems = _find_problems(definitions, aliases)
    if problems:
        raise TaxonomyConfigurationError(problems)

    by_id = {d["id"]: d for d in definitions}
    names: Dict[int, str] = {}

    def hierarchical_name(cid: int) -> str:
        if cid not in names:
            d = by_id[cid]
            if d["parent_id"] is None:
                names[cid] = d["name"]
            else:
                names[cid] = hierarchical_name(d["parent_id"]) + HIERARCHY_SEPARATOR + d["name"]
        return names[cid]

    nodes = [
        CategoryNode(
            id=d["id"],
            name=d["name"],
            display_name=d["display_name"],
            level=d["level"],
            parent_id=d["parent_id"],
            url_path=d["url_path"],
            hierarchical_name=hierarchical_name(d["id"]),
        )
        for d in definitions
    ]
    return Taxonomy(nodes, aliases)


@lru_cache(maxsize=None)
def get_taxonomy() -> Taxonomy:
    """Return the validated published taxonomy (built once per process)."""
    return build_taxonomy(CATEGORY_DEFINITIONS, SPECIAL_ROUTE_ALIASES)
