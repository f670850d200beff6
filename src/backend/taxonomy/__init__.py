"""Three-level category taxonomy for the news CMS."""

from .errors import CategoryError, TaxonomyConfigurationError, CategoryNotFoundError
from .tree import CategoryNode, Taxonomy, build_taxonomy, get_taxonomy
from .resolver import (
    Breadcrumb,
    CategoryRef,
    CategoryResolver,
    StorageFormat,
    get_resolver,
)
from .picker import GroupHeader, SelectableOption, build_picker_options

__all__ = [
    "CategoryError",
    "TaxonomyConfigurationError",
    "CategoryNotFoundError",
    "CategoryNode",
    "Taxonomy",
    "build_taxonomy",
    "get_taxonomy",
    "Breadcrumb",
    "CategoryRef",
    "CategoryResolver",
    "StorageFormat",
    "get_resolver",
    "GroupHeader",
    "SelectableOption",
    "build_picker_options",
]
