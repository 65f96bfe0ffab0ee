from __future__ import annotations

from collections import OrderedDict, namedtuple
from dataclasses import dataclass, field
from typing import List

import pytest

from phtpl.content import Data
from phtpl.errors import TypeMismatchError
from phtpl.resolve import PathResolver, fill_bount, split_spec
from phtpl.resolve.structured import (
    MappingValue,
    RecordValue,
    SequenceValue,
    ValueKind,
    adapt,
    register_adapter,
    _ADAPTERS,
)
from phtpl.template import Template


@dataclass
class Addr:
    street: str
    no: int


@dataclass
class Person:
    name: str
    addrs: List[Addr] = field(default_factory=list)


Point = namedtuple("Point", "x y")


class Plain:
    def __init__(self):
        self.title = "plain"


@pytest.fixture
def john() -> Person:
    return Person(
        name="John Doe",
        addrs=[Addr("Cansas Lane", 1), Addr("Yellow-Brick-Road", 33)],
    )


class TestAdapters:

    @pytest.mark.parametrize("value, kind", [
        ([1], ValueKind.SEQUENCE),
        ((1, 2), ValueKind.SEQUENCE),
        ({"a": 1}, ValueKind.MAPPING),
        (OrderedDict(a=1), ValueKind.MAPPING),
        (Addr("s", 1), ValueKind.RECORD),
        (Point(1, 2), ValueKind.RECORD),
        (Plain(), ValueKind.RECORD),
    ])
    def test_kinds(self, value, kind):
        assert adapt(value).kind is kind

    @pytest.mark.parametrize("value", ["text", b"bytes", 42, 1.5, None, Addr, len])
    def test_scalars(self, value):
        assert adapt(value) is None

    def test_sequence_index(self):
        seq = SequenceValue([10, 20, 30])
        assert seq.index(0) == 10
        assert seq.index(-1) == 30
        assert seq.index(3) is None
        assert seq.index(-4) is None

    def test_mapping_and_record_fields(self):
        assert MappingValue({"a": 1}).field("b") is None
        rec = RecordValue(Point(1, 2))
        assert rec.field("y") == 2
        assert rec.field("count") is None
        assert RecordValue(Plain()).field("title") == "plain"

    def test_register_adapter(self):
        class Box:
            def __init__(self, **kw):
                self.kw = kw

        class BoxValue:
            kind = ValueKind.MAPPING

            def __init__(self, box):
                self.box = box

            def index(self, idx):
                return None

            def field(self, name):
                return self.box.kw.get(name)

        saved = list(_ADAPTERS)
        try:
            register_adapter(lambda v: isinstance(v, Box), BoxValue)
            assert PathResolver().resolve("a.b", {"a": Box(b=7)}) == 7
        finally:
            _ADAPTERS[:] = saved


class TestResolve:

    def setup_method(self):
        self.r = PathResolver()

    def test_paths(self, john):
        assert self.r.resolve("name", john) == "John Doe"
        assert self.r.resolve("addrs.-1.street", john) == "Yellow-Brick-Road"
        assert self.r.resolve("addrs.0.no", john) == 1

    def test_missing_is_none(self, john):
        assert self.r.resolve("addrs.5.street", john) is None
        assert self.r.resolve("nickname", john) is None
        assert self.r.resolve("a.b.c", {"a": None}) is None

    def test_mixed_structures(self):
        data = {"items": [{"p": Point(3, 4)}]}
        assert self.r.resolve("items.0.p.y", data) == 4

    def test_int_segment_on_mapping(self):
        with pytest.raises(TypeMismatchError, match="segment 1 in path 'a.0' requires sequence") as ei:
            self.r.resolve("a.0", {"a": {"0": 1}})
        assert ei.value.segment == 1

    def test_name_segment_on_sequence(self):
        with pytest.raises(TypeMismatchError, match="requires map or record"):
            self.r.resolve("x", [1, 2])

    def test_name_segment_on_scalar(self):
        with pytest.raises(TypeMismatchError, match="got int"):
            self.r.resolve("n.x", {"n": 5})

    def test_custom_separator(self):
        assert PathResolver("/").resolve("a/-1", {"a": [1, 2]}) == 2

    def test_parse_path(self):
        assert self.r.parse_path("a.+1.-2.b") == ["a", 1, -2, "b"]


@pytest.mark.parametrize("spec, expected", [
    ("Name", ("", "Name")),
    ("%05d Addrs.-1.No", ("%05d", "Addrs.-1.No")),
    (" lead", ("", " lead")),
])
def test_split_spec(spec, expected):
    assert split_spec(spec) == expected


class TestFill:

    def test_example(self, john):
        tmpl = (
            Template("bft example")
            .add_str("Name: ").add_placeholder("$name")
            .add_str("\nLast Address: ").add_placeholder("$addrs.-1.street")
            .add_str(" ").add_placeholder("$%05d addrs.-1.no")
        )
        bt = tmpl.new_bount()
        assert bt.fill(john) == 0
        assert bt.render() == b"Name: John Doe\nLast Address: Yellow-Brick-Road 00033"

    def test_misses_are_counted(self, john):
        tmpl = Template("t").add_placeholder("$nick").add_str("/").add_placeholder("$name")
        bt = tmpl.new_bount()
        assert fill_bount(bt, john) == 1
        assert not bt.is_bound(0)
        assert bt.is_bound(1)

    def test_unmarked_placeholders_are_left_alone(self, john):
        tmpl = Template("t").add_placeholder("name").add_str("/").add_placeholder("$name")
        bt = tmpl.new_bount()
        assert bt.fill(john) == 0
        assert not bt.is_bound(0)

    def test_no_overwrite(self, john):
        tmpl = Template("t").add_placeholder("$name")
        bt = tmpl.new_bount()
        bt.bind_name("$name", Data("kept"))
        bt.fill(john, overwrite=False)
        assert bt.render() == b"kept"
        bt.fill(john)
        assert bt.render() == b"John Doe"

    def test_custom_marker(self):
        tmpl = Template("t").add_placeholder("@a").add_str("|").add_placeholder("$a")
        bt = tmpl.new_bount()
        bt.fill({"a": 1}, marker="@")
        assert bt.is_bound(0)
        assert not bt.is_bound(1)

    def test_custom_resolver(self):
        tmpl = Template("t").add_placeholder("$a/b")
        bt = tmpl.new_bount()
        assert fill_bount(bt, {"a": {"b": "x"}}, resolver=PathResolver("/")) == 0
        assert bt.render() == b"x"

    def test_type_mismatch_aborts(self):
        tmpl = Template("t").add_placeholder("$a.0")
        with pytest.raises(TypeMismatchError):
            tmpl.new_bount().fill({"a": {"b": 1}})
