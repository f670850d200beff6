"""
Unit tests for the hierarchical picker adapter.

Tests the grouped option rows built for the post editor's category select.
"""

import pytest

from taxonomy.picker import (
    GroupHeader,
    SelectableOption,
    build_picker_options,
    organize_by_hierarchy,
    selectable_hierarchical_names,
)
from taxonomy.tree import build_taxonomy, get_taxonomy


@pytest.fixture
def options():
    """Picker rows for the published taxonomy."""
    return build_picker_options()


class TestBuildPickerOptions:
    """Test build_picker_options."""

    def test_arts_and_entertainment_block(self, options):
        """Theatre gets a sub-header; Games is selectable directly under the section."""
        start = options.index(GroupHeader("Arts and Entertainment", 1))
        assert options[start + 1:start + 12] == [
            SelectableOption(31, "Games", 1),
            GroupHeader("Theatre", 2),
            SelectableOption(321, "Reviews", 2),
            SelectableOption(33, "Film", 1),
            SelectableOption(34, "Music", 1),
            GroupHeader("Galleries", 2),
            SelectableOption(351, "Exhibitions", 2),
            SelectableOption(352, "Eye On The Street", 2),
            SelectableOption(36, "Books", 1),
            SelectableOption(37, "Drawn and Quartered", 1),
            SelectableOption(4, "Opinion", 0),
        ]

    def test_lifestyle_block(self, options):
        """Food and Wine is a sub-header over its two leaves."""
        start = options.index(GroupHeader("Lifestyle", 1))
        assert options[start + 1:start + 6] == [
            GroupHeader("Food and Wine", 2),
            SelectableOption(211, "Restaurant Reviews", 2),
            SelectableOption(212, "Wine Match", 2),
            SelectableOption(22, "Sport", 1),
            SelectableOption(23, "Travel", 1),
        ]

    def test_sections_in_declaration_order(self, options):
        """Section headers follow the taxonomy's declaration order."""
        headers = [e.label for e in options if isinstance(e, GroupHeader) and e.level == 1]
        assert headers == ["News", "Lifestyle", "Arts and Entertainment"]
        assert options[0] == GroupHeader("News", 1)

    def test_standalone_section_is_selectable(self, options):
        """Opinion has no children and is selectable on its own, without a header."""
        assert SelectableOption(4, "Opinion", 0) in options
        assert GroupHeader("Opinion", 1) not in options

    def test_headers_are_never_selectable(self, options):
        """Headers carry no node id; only selectable rows do."""
        for entry in options:
            if entry.kind == "group-header":
                assert not hasattr(entry, "node_id")
            else:
                assert entry.kind == "selectable"

    def test_selectable_ids_exist_and_are_leaves(self, options):
        """Every selectable row is a category without children."""
        taxonomy = get_taxonomy()
        selectable_ids = [e.node_id for e in options if isinstance(e, SelectableOption)]
        leaves = [n.id for n in taxonomy.get_all_nodes() if not taxonomy.has_children(n.id)]
        assert sorted(selectable_ids) == sorted(leaves)
        assert all(taxonomy.get_category_by_id(i) is not None for i in selectable_ids)

    def test_repeated_calls_are_identical(self):
        """The picker is a pure function of the taxonomy."""
        assert build_picker_options() == build_picker_options()

    def test_custom_taxonomy(self):
        """A taxonomy can be passed explicitly."""
        taxonomy = build_taxonomy([
            {"id": 1, "name": "Sport", "display_name": "Sport", "level": 1, "parent_id": None, "url_path": "sport"},
            {"id": 11, "name": "Cricket", "display_name": "Cricket", "level": 2, "parent_id": 1, "url_path": "sport/cricket"},
        ])
        assert build_picker_options(taxonomy) == [
            GroupHeader("Sport", 1),
            SelectableOption(11, "Cricket", 1),
        ]

    def test_entry_to_dict(self):
        """Rows serialize with their kind tag."""
        assert GroupHeader("Theatre", 2).to_dict() == {"kind": "group-header", "label": "Theatre", "level": 2}
        assert SelectableOption(321, "Reviews", 2).to_dict() == {
            "kind": "selectable",
            "node_id": 321,
            "label": "Reviews",
            "indent_level": 2,
        }


class TestHierarchyHelpers:
    """Test organize_by_hierarchy and the flat selectable list."""

    def test_organize_by_hierarchy(self):
        """Sections nest their second and third levels."""
        tree = organize_by_hierarchy()
        assert [s["name"] for s in tree] == ["News", "Lifestyle", "Arts and Entertainment", "Opinion"]

        lifestyle = tree[1]
        assert [c["name"] for c in lifestyle["children"]] == ["Food and Wine", "Sport", "Travel"]
        assert [g["name"] for g in lifestyle["children"][0]["children"]] == ["Restaurant Reviews", "Wine Match"]
        assert tree[3]["children"] == []

    def test_selectable_hierarchical_names(self):
        """The flat list matches what older editors offered and stored."""
        assert selectable_hierarchical_names() == [
            "News > Local",
            "News > National",
            "News > World",
            "News > Features",
            "News > Environment",
            "News > Media",
            "Lifestyle > Food and Wine > Restaurant Reviews",
            "Lifestyle > Food and Wine > Wine Match",
            "Lifestyle > Sport",
            "Lifestyle > Travel",
            "Arts and Entertainment > Games",
            "Arts and Entertainment > Theatre > Reviews",
            "Arts and Entertainment > Film",
            "Arts and Entertainment > Music",
            "Arts and Entertainment > Galleries > Exhibitions",
            "Arts and Entertainment > Galleries > Eye On The Street",
            "Arts and Entertainment > Books",
            "Arts and Entertainment > Drawn and Quartered",
            "Opinion",
        ]
