from __future__ import annotations

import pytest

from phtpl.content import Data, Print
from phtpl.errors import NameExistsError, UnknownPlaceholderError
from phtpl.template import Template


class TestBuilding:

    def test_static_writes_merge_into_one_fragment(self):
        t = Template("t").add_str("foo").add_static(b"bar").add_str("").add_str("baz")
        assert t.fragment_count == 1
        assert t.fragments == (b"foobarbaz",)

    def test_empty_template(self):
        t = Template("t")
        assert t.fragment_count == 0
        assert t.slot_count == 1
        assert t.static_bytes() == b""

    def test_leading_placeholder(self):
        t = Template("t").add_placeholder("a").add_str("x")
        assert t.placeholder_at(0) == "a"
        assert t.fragments == (b"x",)

    def test_trailing_placeholder_then_static_starts_new_fragment(self):
        t = Template("t").add_str("x").add_placeholder("a").add_str("y")
        assert t.fragments == (b"x", b"y")
        assert t.placeholder_at(1) == "a"
        assert t.placeholder_at(0) is None
        assert t.placeholder_at(2) is None

    def test_adjacent_placeholders_get_empty_fragment(self):
        t = Template("t").add_placeholder("a").add_placeholder("b")
        assert t.fragments == (b"",)
        assert t.placeholder_slots("a") == [0]
        assert t.placeholder_slots("b") == [1]

    def test_trailing_placeholder_empty_static_keeps_separator(self):
        t = Template("t").add_placeholder("a").add_static(b"").add_placeholder("b")
        assert t.fragments == (b"",)
        assert t.placeholder_slots("b") == [1]

    def test_repeated_name(self, greeting):
        assert greeting.placeholder_count == 1
        assert greeting.placeholder_slots("name") == [1, 2]
        assert greeting.fragments == (b"Hello, ", b"! Bye ", b".")

    def test_fragment_at(self, greeting):
        assert greeting.fragment_at(0) == b"Hello, "
        assert greeting.fragment_at(3) is None
        assert greeting.fragment_at(-1) is None

    def test_placeholders_in_definition_order(self):
        t = Template("t").add_placeholder("z").add_str("-").add_placeholder("a").add_placeholder("z")
        assert t.placeholders() == ["z", "a"]
        assert "z" in t and "q" not in t
        assert dict(t.iter_placeholders()) == {"z": [0, 2], "a": [1]}

    def test_wrap_declaration(self):
        wrap = lambda c: c  # noqa: E731
        t = Template("t").add_placeholder("a", wrap).add_str("x").add_placeholder("b")
        assert t.wrap_at(0) is wrap
        assert t.wrap_at(1) is None
        t.set_wrap("b", wrap)
        assert t.wrap_at(1) is wrap
        t.set_wrap("a", None)
        assert t.wrap_at(0) is None

    def test_set_wrap_unknown_name(self):
        with pytest.raises(UnknownPlaceholderError, match="'nope'"):
            Template("t").set_wrap("nope", None)

    def test_empty_placeholder_name_rejected(self):
        with pytest.raises(ValueError, match="must not be empty"):
            Template("t").add_placeholder("")


class TestRename:

    def setup_method(self):
        self.t = (
            Template("t")
            .add_placeholder("a").add_str("1")
            .add_placeholder("b").add_str("2")
            .add_placeholder("a")
        )

    def test_rename(self):
        self.t.rename_placeholder("a", "c")
        assert self.t.placeholder_slots("c") == [0, 2]
        assert self.t.placeholder_slots("a") is None
        assert self.t.placeholder_at(2) == "c"

    def test_rename_to_itself_is_noop(self):
        self.t.rename_placeholder("a", "a")
        assert self.t.placeholder_slots("a") == [0, 2]

    def test_rename_unknown(self):
        with pytest.raises(UnknownPlaceholderError):
            self.t.rename_placeholder("x", "y")

    def test_rename_onto_existing_without_merge_changes_nothing(self):
        with pytest.raises(NameExistsError, match="'a'.*'b'"):
            self.t.rename_placeholder("a", "b")
        assert self.t.placeholder_slots("a") == [0, 2]
        assert self.t.placeholder_slots("b") == [1]

    def test_merge_sorts_slots(self):
        self.t.rename_placeholder("a", "b", merge=True)
        assert self.t.placeholders() == ["b"]
        assert self.t.placeholder_slots("b") == [0, 1, 2]
        assert [self.t.placeholder_at(i) for i in range(3)] == ["b", "b", "b"]

    def test_transform_names(self):
        self.t.transform_names(str.upper)
        assert sorted(self.t.placeholders()) == ["A", "B"]
        assert self.t.placeholder_slots("A") == [0, 2]

    def test_transform_names_is_atomic(self):
        with pytest.raises(NameExistsError):
            self.t.transform_names(lambda n: "b" if n == "a" else n)
        assert self.t.placeholder_slots("a") == [0, 2]
        assert self.t.placeholder_slots("b") == [1]
        assert self.t.placeholder_at(0) == "a"

    def test_transform_names_merge(self):
        self.t.transform_names(lambda n: "x", merge=True)
        assert self.t.placeholders() == ["x"]
        assert self.t.placeholder_slots("x") == [0, 1, 2]

    def test_transform_names_prefix_chain(self):
        t = Template("t").add_placeholder("x").add_str("|").add_placeholder("p.x")
        t.transform_names(lambda n: "p." + n, merge=True)
        assert t.placeholder_slots("p.x") == [0]
        assert t.placeholder_slots("p.p.x") == [1]
        assert t.placeholder_at(0) == "p.x"
        assert t.placeholder_at(1) == "p.p.x"

    def test_transform_names_swap(self):
        self.t.transform_names({"a": "b", "b": "a"}.__getitem__)
        assert self.t.placeholder_slots("b") == [0, 2]
        assert self.t.placeholder_slots("a") == [1]
        assert [self.t.placeholder_at(i) for i in range(3)] == ["b", "a", "b"]


class TestStatic:

    def test_static_bytes(self):
        t = Template("t").add_str("a").add_str("b")
        assert t.is_static
        assert t.static_bytes() == b"ab"

    def test_not_static(self, greeting):
        assert not greeting.is_static
        assert greeting.static_bytes() is None

    def test_static_with(self, greeting):
        assert greeting.static_with(Data("Bob")) == b"Hello, Bob! Bye Bob."

    def test_static_with_on_static_template(self):
        t = Template("t").add_str("plain")
        assert t.static_with(Print("x")) == b"plain"


class TestBounTFactories:

    def test_new_bount_is_unbound(self, greeting):
        bt = greeting.new_bount()
        assert bt.template is greeting
        assert not any(bt.is_bound(s) for s in range(greeting.slot_count))

    def test_new_init_bount_binds_named_slots_only(self):
        t = Template("t").add_str("a").add_placeholder("x").add_str("b")
        bt = t.new_init_bount(Data("-"))
        assert [bt.is_bound(s) for s in range(t.slot_count)] == [False, True, False]
        assert bt.render() == b"a-b"
