"""Unit tests for member parsing."""

from pathlib import Path

import pytest

from loftscope.core.models import EntityKind, MemberKind, Visibility
from loftscope.languages.lexer import tokenize
from loftscope.languages.members import parse_members, parse_parameters
from loftscope.languages.polyloft import PolyloftParser

DOG = """\
class Dog < Animal:
    var name: String
    const LEGS: Int = 4
    private let secret = 1
    static var count = 0

    def init(name: String):
        this.name = name
        var local = 2
    end

    def bark(times: Int = 1) -> String:
        var inner = 3
        return "woof"
    end

    static def create() -> Dog:
        return Dog("rex")
    end

    def ::other() -> Dog:
        return Dog("x")
    end
end
"""


def members_of(text: str, name: str) -> dict:
    source = PolyloftParser().parse_text(text, Path("/tmp/members.pf"))
    return {m.name: m for m in source.entity_index[name].members}


@pytest.fixture
def dog() -> dict:
    return members_of(DOG, "Dog")


class TestClassMembers:
    """Tests for class bodies."""

    def test_only_body_level_statements(self, dog) -> None:
        assert set(dog) == {"name", "LEGS", "secret", "count", "init", "bark", "create", "other"}

    def test_fields(self, dog) -> None:
        assert dog["name"].kind is MemberKind.FIELD
        assert dog["name"].type == "String"
        assert dog["LEGS"].is_final
        assert dog["LEGS"].type == "Int"
        assert dog["secret"].visibility is Visibility.PRIVATE
        assert dog["secret"].type is None
        assert dog["count"].is_static

    def test_constructor(self, dog) -> None:
        init = dog["init"]
        assert init.kind is MemberKind.CONSTRUCTOR
        assert init.signature == "Dog(name: String)"

    def test_method(self, dog) -> None:
        bark = dog["bark"]
        assert bark.kind is MemberKind.METHOD
        assert bark.return_type == "String"
        assert bark.signature == "def bark(times: Int = 1) -> String"
        assert (bark.line, bark.column) == (12, 9)
        assert bark.owner == "Dog"

    def test_static_methods(self, dog) -> None:
        assert dog["create"].is_static
        assert dog["create"].signature == "static def create() -> Dog"
        assert dog["other"].is_static

    def test_named_constructor(self) -> None:
        text = "class Cat:\n    Cat(name: String):\n        var n = name\n    end\nend\n"
        members = members_of(text, "Cat")
        assert list(members) == ["Cat"]
        assert members["Cat"].kind is MemberKind.CONSTRUCTOR

    def test_only_first_constructor(self) -> None:
        text = "class Cat:\n    def init():\n    end\n    def Cat(a: Int):\n    end\nend\n"
        members = members_of(text, "Cat")
        assert members["init"].kind is MemberKind.CONSTRUCTOR
        assert members["Cat"].kind is MemberKind.METHOD

    def test_redeclared_constructor_stays_constructor(self) -> None:
        text = (
            "class A:\n"
            "    def init(x: Int):\n    end\n"
            "    def init(x: Int, y: Int):\n    end\n"
            "end\n"
        )
        members = members_of(text, "A")
        assert list(members) == ["init"]
        assert members["init"].kind is MemberKind.CONSTRUCTOR
        assert [p.name for p in members["init"].parameters] == ["x", "y"]

    def test_later_declaration_replaces_earlier(self) -> None:
        text = "class A:\n    def speak() -> Int:\n    end\n    def speak() -> String:\n    end\nend\n"
        members = members_of(text, "A")
        assert len(members) == 1
        assert members["speak"].return_type == "String"
        assert members["speak"].line == 4

    def test_method_without_return_type_is_void(self) -> None:
        members = members_of("class A:\n    def run():\n    end\nend\n", "A")
        assert members["run"].return_type is None
        assert members["run"].signature == "def run() -> Void"


class TestEnumMembers:
    """Tests for enum bodies."""

    def test_values_and_builtins(self) -> None:
        members = members_of("enum Color\n    RED\n    GREEN\nend\n", "Color")
        assert members["RED"].kind is MemberKind.ENUM_VALUE
        assert members["RED"].signature == "Color.RED"
        assert members["GREEN"].type == "Color"
        for name in ("name", "ordinal", "toString", "valueOf", "values", "size", "names"):
            assert members[name].synthetic
        assert members["values"].is_static
        assert members["values"].return_type == "Array[Color]"
        assert members["valueOf"].return_type == "Color"
        assert not members["toString"].is_static

    def test_values_on_one_line_with_arguments(self) -> None:
        members = members_of("enum Planet\n    EARTH(1.0, 2.0), MARS(0.5, 1.0)\nend\n", "Planet")
        assert members["EARTH"].kind is MemberKind.ENUM_VALUE
        assert members["MARS"].kind is MemberKind.ENUM_VALUE

    def test_to_string_can_be_overridden(self) -> None:
        text = "enum Color\n    RED\n    def toString() -> String:\n    end\nend\n"
        members = members_of(text, "Color")
        assert not members["toString"].synthetic

    def test_synthesized_statics_are_kept(self) -> None:
        text = "enum Color\n    RED\n    static def values() -> Int:\n    end\nend\n"
        members = members_of(text, "Color")
        assert members["values"].synthetic
        assert members["values"].return_type == "Array[Color]"

    def test_values_stop_after_first_member(self) -> None:
        text = "enum Color\n    RED\n    var hex: String\n    BLUE\nend\n"
        members = members_of(text, "Color")
        assert "BLUE" not in members
        assert members["hex"].kind is MemberKind.FIELD


class TestRecordMembers:
    """Tests for record components."""

    def test_components_become_final_fields(self) -> None:
        members = members_of("record Point(x: Int, y: Int):\nend\n", "Point")
        assert members["x"].kind is MemberKind.FIELD
        assert members["x"].is_final
        assert members["y"].type == "Int"
        assert members["toString"].synthetic

    def test_body_methods(self) -> None:
        text = "record Point(x: Int, y: Int):\n    def length() -> Float:\n    end\nend\n"
        members = members_of(text, "Point")
        assert members["length"].kind is MemberKind.METHOD


class TestInterfaceMembers:
    """Tests for interface bodies."""

    def test_signatures_without_def(self) -> None:
        text = "interface Named:\n    getName() -> String\n    def describe(prefix: String) -> String\nend\n"
        members = members_of(text, "Named")
        assert members["getName"].kind is MemberKind.METHOD
        assert members["getName"].return_type == "String"
        assert members["describe"].parameters[0].type == "String"


class TestParseMembers:
    """Tests for parse_members() on a bare body."""

    def test_positions_are_absolute(self) -> None:
        members = parse_members(EntityKind.CLASS, "\n    var x: Int\n", entity_name="A", line=10, column=9)
        assert (members[0].line, members[0].column) == (11, 9)

    def test_garbage_body(self) -> None:
        assert parse_members(EntityKind.CLASS, ")))( def ( var : =", entity_name="A") == []


class TestParseParameters:
    """Tests for parse_parameters()."""

    def test_forms(self) -> None:
        tokens = tokenize("a: Int, b = 2, ...rest: String, m: Map[String, Int]").tokens
        params = parse_parameters(tokens)
        assert [p.render() for p in params] == [
            "a: Int",
            "b = 2",
            "...rest: String",
            "m: Map[String, Int]",
        ]
        assert params[2].variadic

    def test_empty(self) -> None:
        assert parse_parameters([]) == []
