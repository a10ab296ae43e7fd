"""Integration tests for hover and go-to-definition."""

import tempfile
from pathlib import Path

import pytest

from loftscope.core.cache import SessionCache
from loftscope.core.resolver import ImportResolver
from loftscope.features import Document, HoverInfo, Location, find_definition, hover

SOURCE = """\
// A loyal companion.
// Barks at strangers.
class Dog < Animal implements Pet:
    var name: String

    /* Makes a noise. */
    def bark(times: Int = 1) -> String:
        return "woof"
    end
end

enum Color
    RED
    GREEN
end

record Point(x: Int, y: Int):
end

def add(a: Int, b: Int) -> Int:
    return a + b
end

var rex = Dog()
var total = add(1, 2)
rex.bark()
var all = Color.values()
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td).resolve()


@pytest.fixture
def resolver(temp_dir: Path) -> ImportResolver:
    return ImportResolver(SessionCache(), temp_dir, stdlib_roots=())


@pytest.fixture
def main(temp_dir: Path) -> Path:
    return temp_dir / "main.pf"


def offset_of(text: str, marker: str, shift: int = 0) -> int:
    """Offset of ``marker`` in ``text`` plus ``shift`` characters."""
    return text.index(marker) + shift


def hover_at(resolver: ImportResolver, path: Path, text: str, offset: int) -> HoverInfo | None:
    return hover(Document(path, text), offset, cache=resolver.cache, resolver=resolver)


def definition_at(resolver: ImportResolver, path: Path, text: str, offset: int) -> Location | None:
    return find_definition(Document(path, text), offset, cache=resolver.cache, resolver=resolver)


class TestHover:
    """Tests for hover()."""

    def test_entity_with_comment(self, resolver: ImportResolver, main: Path) -> None:
        info = hover_at(resolver, main, SOURCE, offset_of(SOURCE, "Dog <", 1))
        assert info is not None
        assert info.kind == "class"
        assert info.signature == "class Dog < Animal implements Pet"
        assert info.documentation == "A loyal companion.\nBarks at strangers.\n\nDefined at line 3"

    def test_entity_from_usage(self, resolver: ImportResolver, main: Path) -> None:
        info = hover_at(resolver, main, SOURCE, offset_of(SOURCE, "Dog()"))
        assert info is not None
        assert info.signature == "class Dog < Animal implements Pet"

    def test_enum_lists_values(self, resolver: ImportResolver, main: Path) -> None:
        info = hover_at(resolver, main, SOURCE, offset_of(SOURCE, "enum Color", 6))
        assert info is not None
        assert info.kind == "enum"
        assert info.documentation == "Values: RED, GREEN\n\nDefined at line 12"

    def test_record(self, resolver: ImportResolver, main: Path) -> None:
        info = hover_at(resolver, main, SOURCE, offset_of(SOURCE, "Point"))
        assert info is not None
        assert info.signature == "record Point(x: Int, y: Int)"

    def test_member_access(self, resolver: ImportResolver, main: Path) -> None:
        info = hover_at(resolver, main, SOURCE, offset_of(SOURCE, "rex.bark", 5))
        assert info is not None
        assert info.kind == "method"
        assert info.signature == "def bark(times: Int = 1) -> String"
        assert info.documentation == "Makes a noise.\n\nDeclared in Dog\n\nDefined at line 7"

    def test_synthesized_member(self, resolver: ImportResolver, main: Path) -> None:
        info = hover_at(resolver, main, SOURCE, offset_of(SOURCE, "Color.values", 7))
        assert info is not None
        assert info.signature == "static def values() -> Array[Color]"
        assert info.documentation == "Declared in Color"

    def test_function(self, resolver: ImportResolver, main: Path) -> None:
        info = hover_at(resolver, main, SOURCE, offset_of(SOURCE, "add(1"))
        assert info is not None
        assert info.kind == "function"
        assert info.signature == "def add(a: Int, b: Int) -> Int"

    def test_variables(self, resolver: ImportResolver, main: Path) -> None:
        rex = hover_at(resolver, main, SOURCE, offset_of(SOURCE, "rex.bark"))
        assert rex is not None
        assert rex.kind == "variable"
        assert rex.signature == "rex: Dog"
        assert rex.documentation == "Defined at line 24"

        total = hover_at(resolver, main, SOURCE, offset_of(SOURCE, "total"))
        assert total is not None
        assert total.signature == "total: Any"

    def test_nothing_known(self, resolver: ImportResolver, main: Path) -> None:
        assert hover_at(resolver, main, SOURCE, offset_of(SOURCE, "class Dog")) is None
        assert hover_at(resolver, main, SOURCE, len(SOURCE)) is None

    def test_unknown_member(self, resolver: ImportResolver, main: Path) -> None:
        text = SOURCE + "rex.missing()\n"
        assert hover_at(resolver, main, text, offset_of(text, "rex.missing", 5)) is None

    def test_imported_symbols(self, resolver: ImportResolver, temp_dir: Path, main: Path) -> None:
        (temp_dir / "lib.pf").write_text(
            "// Shared base.\nclass Base:\nend\ndef helper(x: Int) -> Int:\nend\n"
        )
        text = "import lib { Base, helper, Nope }\nvar b = Base()\nhelper(1)\nNope\n"

        base = hover_at(resolver, main, text, offset_of(text, "Base()"))
        assert base is not None
        assert base.signature == "class Base"
        assert base.documentation == "Shared base.\n\nImported from lib"

        helper = hover_at(resolver, main, text, offset_of(text, "helper(1"))
        assert helper is not None
        assert helper.kind == "function"
        assert helper.documentation == "Imported from lib"

        nope = hover_at(resolver, main, text, offset_of(text, "Nope\n"))
        assert nope is not None
        assert nope.kind == "import"


class TestDefinition:
    """Tests for find_definition()."""

    def test_entity(self, resolver: ImportResolver, main: Path) -> None:
        location = definition_at(resolver, main, SOURCE, offset_of(SOURCE, "Dog()"))
        assert location == Location(main, 3, 1)

    def test_member_access(self, resolver: ImportResolver, main: Path) -> None:
        location = definition_at(resolver, main, SOURCE, offset_of(SOURCE, "rex.bark", 4))
        assert location == Location(main, 7, 9)

    def test_synthesized_member_goes_to_entity(self, resolver: ImportResolver, main: Path) -> None:
        location = definition_at(resolver, main, SOURCE, offset_of(SOURCE, "Color.values", 6))
        assert location == Location(main, 12, 1)

    def test_function(self, resolver: ImportResolver, main: Path) -> None:
        location = definition_at(resolver, main, SOURCE, offset_of(SOURCE, "add(1"))
        assert location == Location(main, 20, 5)

    def test_variable(self, resolver: ImportResolver, main: Path) -> None:
        location = definition_at(resolver, main, SOURCE, offset_of(SOURCE, "rex.bark"))
        assert location == Location(main, 24, 5)

    def test_latest_declaration_before_cursor(self, resolver: ImportResolver, main: Path) -> None:
        text = "var x = 1\nprint(x)\nvar x = 2\nprint(x)\n"
        first = definition_at(resolver, main, text, offset_of(text, "x)"))
        second = definition_at(resolver, main, text, text.rindex("x)"))
        assert first == Location(main, 1, 5)
        assert second == Location(main, 3, 5)

    def test_enclosing_member(self, resolver: ImportResolver, main: Path) -> None:
        text = "class Box:\n    def open():\n    end\n    def use():\n        open()\n    end\nend\n"
        location = definition_at(resolver, main, text, offset_of(text, "open()\n    end\nend"))
        assert location == Location(main, 2, 9)

    def test_imported(self, resolver: ImportResolver, temp_dir: Path, main: Path) -> None:
        lib = temp_dir / "lib.pf"
        lib.write_text("// Shared base.\nclass Base:\nend\ndef helper(x: Int) -> Int:\nend\n")
        text = "import lib { Base, helper, Nope }\nvar b = Base()\nhelper(1)\nNope\n"

        assert definition_at(resolver, main, text, offset_of(text, "Base()")) == Location(lib, 2, 1)
        assert definition_at(resolver, main, text, offset_of(text, "helper(1")) == Location(lib, 4, 5)
        assert definition_at(resolver, main, text, offset_of(text, "Nope\n")) == Location(lib, 1, 1)

    def test_nothing(self, resolver: ImportResolver, main: Path) -> None:
        assert definition_at(resolver, main, SOURCE, offset_of(SOURCE, "class Dog")) is None
        assert definition_at(resolver, main, "", 0) is None

    def test_location_to_dict(self, main: Path) -> None:
        assert Location(main, 2, 3).to_dict() == {"file_path": str(main), "line": 2, "column": 3}
