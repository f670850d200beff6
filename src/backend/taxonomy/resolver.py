"""
Category Resolver.

Translates between the representations of a category that clients and
stored posts use:

- numeric id (canonical storage format, e.g. 321)
- url path ("artsentertainment/theatre/theatrereviews"), including legacy aliases
- hierarchical name ("Arts and Entertainment > Theatre > Reviews")
- display name ("Reviews")
- breadcrumb (root-to-leaf sequence of nodes)

A lookup that matches nothing returns None so callers can fall back to
"Uncategorized". Passing the wrong type (e.g. a string id) is a programming
error and raises TypeError immediately.
"""

import enum
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, Optional, Tuple, Union

from taxonomy.errors import CategoryNotFoundError
from taxonomy.tree import CategoryNode, Taxonomy, HIERARCHY_SEPARATOR, get_taxonomy


class StorageFormat(str, enum.Enum):
    """Representations a category can be stored or referenced as."""
    ID = "id"
    URL_PATH = "path"
    HIERARCHICAL = "hierarchical"
    DISPLAY_NAME = "display_name"


# Formats written to posts.category by earlier editor revisions, in the
# order they are tried when upgrading a stored value.
LEGACY_STRING_FORMATS: Tuple[StorageFormat, ...] = (
    StorageFormat.HIERARCHICAL,
    StorageFormat.DISPLAY_NAME,
)


def _require_id(value) -> int:
    # bool is an int subclass but never a category id
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Category id must be an int, got {type(value).__name__}")
    return value


def _require_str(value, what: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a str, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class CategoryRef:
    """
    Tagged reference to a category.

    Each call site states which representation it holds instead of the
    resolver guessing from the value's shape.
    """
    kind: StorageFormat
    value: Union[int, str]

    def __post_init__(self):
        kind = StorageFormat(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind is StorageFormat.ID:
            _require_id(self.value)
        else:
            _require_str(self.value, f"Category {kind.value}")

    @classmethod
    def by_id(cls, category_id: int) -> "CategoryRef":
        return cls(StorageFormat.ID, category_id)

    @classmethod
    def by_path(cls, url_path: str) -> "CategoryRef":
        return cls(StorageFormat.URL_PATH, url_path)

    @classmethod
    def by_hierarchical(cls, name: str) -> "CategoryRef":
        return cls(StorageFormat.HIERARCHICAL, name)

    @classmethod
    def by_display_name(cls, name: str) -> "CategoryRef":
        return cls(StorageFormat.DISPLAY_NAME, name)


@dataclass(frozen=True)
class Breadcrumb:
    """Root-to-leaf chain of categories."""
    nodes: Tuple[CategoryNode, ...]

    @property
    def leaf(self) -> CategoryNode:
        return self.nodes[-1]

    @property
    def id(self) -> int:
        return self.leaf.id

    @property
    def level(self) -> int:
        return self.leaf.level

    @property
    def display_name(self) -> str:
        return self.leaf.display_name

    @property
    def url_path(self) -> str:
        return self.leaf.url_path

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(n.name for n in self.nodes)

    @property
    def hierarchical_name(self) -> str:
        return HIERARCHY_SEPARATOR.join(self.labels)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "hierarchical_name": self.hierarchical_name,
            "url_path": self.url_path,
            "level": self.level,
            "breadcrumb": [n.to_dict() for n in self.nodes],
        }


class CategoryResolver:
    """
    Resolves category references against a fixed taxonomy snapshot.

    Lookup tables are built once in the constructor; every method is pure
    and safe to call concurrently.
    """

    def __init__(
        self,
        taxonomy: Optional[Taxonomy] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize resolver.

        Args:
            taxonomy: Validated taxonomy (defaults to the published taxonomy)
            logger: Logger used for lookup diagnostics (defaults to module logger)
        """
        self.taxonomy = taxonomy if taxonomy is not None else get_taxonomy()
        self.logger = logger or logging.getLogger(__name__)

        self._by_path: Dict[str, int] = {}
        self._by_hierarchical: Dict[str, int] = {}
        self._by_display_name: Dict[str, int] = {}
        for node in self.taxonomy:
            self._by_path[node.url_path] = node.id
            self._by_hierarchical[node.hierarchical_name] = node.id
            # First match in declaration order wins for shared display names
            self._by_display_name.setdefault(node.display_name, node.id)

    def _miss(self, kind: str, value) -> None:
        self.logger.debug("No category for %s %r", kind, value)
        return None

    def resolve_by_id(self, category_id: int) -> Optional[Breadcrumb]:
        """Resolve a category id to its breadcrumb."""
        _require_id(category_id)
        node = self.taxonomy.get_category_by_id(category_id)
        if node is None:
            return self._miss("id", category_id)

        chain = [node]
        while node.parent_id is not None:
            node = self.taxonomy.get_category_by_id(node.parent_id)
            chain.append(node)
        return Breadcrumb(tuple(reversed(chain)))

    def resolve_by_url_path(self, url_path: str) -> Optional[Breadcrumb]:
        """
        Resolve a url path to its breadcrumb.

        Legacy aliases are checked first and take precedence over canonical
        url paths so historically bookmarked links keep their meaning.
        """
        _require_str(url_path, "Category url path")
        category_id = self.taxonomy.aliases.get(url_path)
        if category_id is None:
            category_id = self._by_path.get(url_path)
        if category_id is None:
            return self._miss("url path", url_path)
        return self.resolve_by_id(category_id)

    def resolve_by_hierarchical_name(self, name: str) -> Optional[Breadcrumb]:
        """Resolve a full "A > B > C" name to its breadcrumb."""
        _require_str(name, "Category hierarchical name")
        category_id = self._by_hierarchical.get(name)
        if category_id is None:
            return self._miss("hierarchical name", name)
        return self.resolve_by_id(category_id)

    def resolve_by_display_name(self, name: str) -> Optional[Breadcrumb]:
        """
        Resolve a leaf display name to its breadcrumb.

        Display names are not guaranteed unique; the first category in
        declaration order wins.
        """
        _require_str(name, "Category display name")
        category_id = self._by_display_name.get(name)
        if category_id is None:
            return self._miss("display name", name)
        return self.resolve_by_id(category_id)

    def build_url_from_params(
        self,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        subsubcategory: Optional[str] = None,
    ) -> Optional[int]:
        """
        Resolve router parameters (/category/:category/:sub/:subsub) to an id.

        Segments are joined with "/" in order. A subsubcategory is only used
        when a subcategory is present. Without a category segment there is
        nothing to resolve.

        Returns:
            Category id, or None if no category matches
        """
        for segment in (category, subcategory, subsubcategory):
            if segment is not None:
                _require_str(segment, "Url segment")

        if not category:
            return None

        url_path = category
        if subcategory:
            url_path += f"/{subcategory}"
            if subsubcategory:
                url_path += f"/{subsubcategory}"

        breadcrumb = self.resolve_by_url_path(url_path)
        return breadcrumb.id if breadcrumb else None

    def serialize_for_storage(
        self,
        breadcrumb: Breadcrumb,
        fmt: StorageFormat = StorageFormat.ID,
    ) -> Union[int, str]:
        """
        Convert a breadcrumb to the value written to posts.

        New writes always use the numeric id. String formats exist for
        older schema revisions and must be asked for explicitly.
        """
        if not isinstance(breadcrumb, Breadcrumb):
            raise TypeError(f"Expected Breadcrumb, got {type(breadcrumb).__name__}")
        fmt = StorageFormat(fmt)
        if fmt is StorageFormat.ID:
            return breadcrumb.id
        if fmt is StorageFormat.URL_PATH:
            return breadcrumb.url_path
        if fmt is StorageFormat.HIERARCHICAL:
            return breadcrumb.hierarchical_name
        return breadcrumb.display_name

    def resolve(self, ref: CategoryRef) -> Optional[Breadcrumb]:
        """Resolve a tagged category reference."""
        if not isinstance(ref, CategoryRef):
            raise TypeError(f"Expected CategoryRef, got {type(ref).__name__}")
        if ref.kind is StorageFormat.ID:
            return self.resolve_by_id(ref.value)
        if ref.kind is StorageFormat.URL_PATH:
            return self.resolve_by_url_path(ref.value)
        if ref.kind is StorageFormat.HIERARCHICAL:
            return self.resolve_by_hierarchical_name(ref.value)
        return self.resolve_by_display_name(ref.value)

    def require(self, ref: CategoryRef) -> Breadcrumb:
        """
        Resolve a tagged reference, raising if nothing matches.

        Raises:
            CategoryNotFoundError: If no category matches the reference
        """
        breadcrumb = self.resolve(ref)
        if breadcrumb is None:
            raise CategoryNotFoundError(f"No category for {ref.kind.value} {ref.value!r}")
        return breadcrumb

    def normalize_stored_value(
        self,
        value: Optional[str],
        formats: Iterable[StorageFormat] = LEGACY_STRING_FORMATS,
    ) -> Optional[Breadcrumb]:
        """
        Upgrade a legacy posts.category string to a breadcrumb.

        The formats the caller expects are tried in the given order.
        An empty value means the post has no category.
        """
        if value is None or value == "":
            return None
        for fmt in formats:
            breadcrumb = self.resolve(CategoryRef(fmt, value))
            if breadcrumb is not None:
                return breadcrumb
        return None

    def get_url_mappings(self) -> Dict[str, int]:
        """Return every routable url fragment -> category id (aliases win)."""
        mappings = dict(self._by_path)
        mappings.update(self.taxonomy.aliases)
        return mappings

    def log_mappings(self) -> None:
        """Write the routing table to the logger at DEBUG level."""
        for url_path, category_id in sorted(self.get_url_mappings().items()):
            self.logger.debug("category route %s -> %s", url_path, category_id)


@lru_cache(maxsize=None)
def get_resolver() -> CategoryResolver:
    """Return the resolver for the published taxonomy."""
    return CategoryResolver(get_taxonomy())
