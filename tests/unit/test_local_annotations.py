"""Tests for records whose annotations are postponed or declared locally."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from recordmap.catalog import FieldCatalog
from recordmap.converter import Converter
from recordmap.diagnostics import SkipReason
from recordmap.introspection import declared_fields, type_name


class TestLocalRecords:
    """Test cases for records declared inside functions."""

    def test_nested_local_record_is_flattened(self, converter):
        """Test that a locally declared nested record still flattens."""

        @dataclass
        class Inner:
            City: str = ""

        @dataclass
        class Outer:
            Name: str = ""
            Age: int = 0
            Home: Inner = field(default_factory=Inner)

        mapping, ok = converter.record_to_map(Outer(Name="a", Age=1, Home=Inner(City="x")))

        assert ok is True
        assert mapping == {"Name": "a", "Age": 1, "Home_City": "x"}

    def test_local_record_is_populated(self, converter):
        """Test that postponed str/int annotations accept matching values."""

        @dataclass
        class Inner:
            City: str = ""

        @dataclass
        class Outer:
            Name: str = ""
            Age: int = 0
            Home: Inner = field(default_factory=Inner)

        record = Outer()
        report = converter.map_to_record({"Name": "a", "Age": 1, "Home_City": "x"}, record)

        assert record == Outer(Name="a", Age=1, Home=Inner(City="x"))
        assert report.complete

    def test_local_self_reference(self, converter):
        """Test that a local self-referencing record resolves its own name."""

        @dataclass
        class Node:
            label: str = ""
            child: Optional[Node] = None

        record = Node()
        converter.map_to_record({"label": "root", "child": Node(label="leaf")}, record)

        assert record.label == "root"
        assert record.child == Node(label="leaf")

    def test_unresolvable_annotation_is_isolated(self, converter):
        """Test that one unknown annotation does not affect its siblings."""

        @dataclass
        class Partial:
            Name: str = ""
            Gadget: Widget = None  # noqa: F821
            Count: int = 0

        declared = {d.attr: d for d in declared_fields(Partial)}
        assert declared["Name"].annotation is str
        assert declared["Count"].annotation is int
        assert declared["Gadget"].annotation == "Widget"

        record = Partial()
        report = converter.map_to_record({"Name": "n", "Count": 2, "Gadget": 5}, record)

        assert record.Name == "n"
        assert record.Count == 2
        assert record.Gadget is None
        assert report.reasons() == [SkipReason.TYPE_MISMATCH]
        assert report.skipped[0].declared_type == "Widget"

    def test_unresolved_names_compare_by_bare_name(self):
        """Test naming of annotations that stayed strings."""
        assert type_name("Widget") == "Widget"
        assert type_name("gadgets.Widget") == "Widget"
        assert type_name("list[Widget]") == "Any"

    def test_descriptors_for_local_records(self):
        """Test that the catalog recognises a local nested record type."""

        @dataclass
        class Inner:
            City: str = ""

        @dataclass
        class Outer:
            Home: Inner = field(default_factory=Inner)

        home = FieldCatalog().descriptor(Outer, "Home")

        assert home.record_type is Inner
        assert home.flatten is True
        assert Converter().record_to_map(Outer())[0] == {"Home_City": ""}
