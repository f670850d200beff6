"""
Hierarchical picker adapter.

Turns the taxonomy into a flat, ordered list of rows for a grouped
category select: section headers (never selectable) and selectable leaves.
The output is a pure function of the taxonomy, so callers may cache it.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from taxonomy.tree import Taxonomy, get_taxonomy


@dataclass(frozen=True)
class GroupHeader:
    """Non-selectable section heading."""
    label: str
    level: int
    kind: str = "group-header"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "label": self.label, "level": self.level}


@dataclass(frozen=True)
class SelectableOption:
    """A category the user can pick."""
    node_id: int
    label: str
    indent_level: int
    kind: str = "selectable"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "node_id": self.node_id,
            "label": self.label,
            "indent_level": self.indent_level,
        }


PickerEntry = Union[GroupHeader, SelectableOption]


def organize_by_hierarchy(taxonomy: Optional[Taxonomy] = None) -> List[Dict[str, Any]]:
    """
    Nest the taxonomy as level 1 -> level 2 -> level 3.

    Returns:
        List of level-1 dicts, each with a "children" list of level-2 dicts
        which carry their own "children" list of level-3 dicts
    """
    if taxonomy is None:
        taxonomy = get_taxonomy()
    tree = []
    for root in taxonomy.get_roots():
        tree.append({
            **root.to_dict(),
            "children": [
                {
                    **child.to_dict(),
                    "children": [leaf.to_dict() for leaf in taxonomy.get_children(child.id)],
                }
                for child in taxonomy.get_children(root.id)
            ],
        })
    return tree


def build_picker_options(taxonomy: Optional[Taxonomy] = None) -> List[PickerEntry]:
    """
    Build the rows of a grouped category picker.

    Each section gets a header. Second-level categories without children are
    selectable directly (indent 1); those with children become a sub-header
    followed by their third-level categories (indent 2). A section with no
    children at all (e.g. Opinion) is selectable on its own at indent 0.
    """
    if taxonomy is None:
        taxonomy = get_taxonomy()
    entries: List[PickerEntry] = []

    for root in taxonomy.get_roots():
        children = taxonomy.get_children(root.id)
        if not children:
            entries.append(SelectableOption(root.id, root.display_name, 0))
            continue

        entries.append(GroupHeader(root.display_name, 1))
        for child in children:
            grandchildren = taxonomy.get_children(child.id)
            if not grandchildren:
                entries.append(SelectableOption(child.id, child.display_name, 1))
                continue
            entries.append(GroupHeader(child.display_name, 2))
            entries.extend(
                SelectableOption(leaf.id, leaf.display_name, 2)
                for leaf in grandchildren
            )

    return entries


def selectable_hierarchical_names(taxonomy: Optional[Taxonomy] = None) -> List[str]:
    """
    Return the hierarchical names of every selectable category, in picker order.

    This is the flat list older editor revisions offered and stored verbatim.
    """
    if taxonomy is None:
        taxonomy = get_taxonomy()
    return [
        taxonomy.get_category_by_id(entry.node_id).hierarchical_name
        for entry in build_picker_options(taxonomy)
        if isinstance(entry, SelectableOption)
    ]
