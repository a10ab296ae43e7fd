"""Integration tests for completion."""

import tempfile
from pathlib import Path

import pytest

from loftscope.core.cache import SessionCache
from loftscope.core.resolver import ImportResolver
from loftscope.features import CompletionItem, CompletionKind, Document, complete

SOURCE = """\
class Person:
    def greet() -> String:
    end
end

class Animal:
    var name: String
    private var secret: Int
    static var count = 0
    def speak() -> String:
    end
end

class Dog < Animal:
    var owner: Person
    def bark(times: Int, loud: Bool) -> String:
        this.
    end
end

enum Color
    RED
    GREEN
end

def helper(x: Int) -> Int:
end

var d = Dog()
var s = "text"
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td).resolve()


@pytest.fixture
def resolver(temp_dir: Path) -> ImportResolver:
    return ImportResolver(SessionCache(), temp_dir, stdlib_roots=())


def complete_at_end(resolver: ImportResolver, path: Path, text: str) -> list[CompletionItem]:
    return complete(Document(path, text), len(text), cache=resolver.cache, resolver=resolver)


def names(items: list[CompletionItem]) -> set[str]:
    return {item.name for item in items}


class TestMemberCompletion:
    """Tests for completion after a dot."""

    def test_instance_members(self, resolver: ImportResolver, temp_dir: Path) -> None:
        items = complete_at_end(resolver, temp_dir / "main.pf", SOURCE + "d.")
        assert names(items) == {"owner", "bark", "name", "secret", "speak"}

    def test_method_item(self, resolver: ImportResolver, temp_dir: Path) -> None:
        items = complete_at_end(resolver, temp_dir / "main.pf", SOURCE + "d.")
        bark = next(item for item in items if item.name == "bark")
        assert bark.kind is CompletionKind.METHOD
        assert bark.detail == "def bark(times: Int, loud: Bool) -> String"
        assert bark.insert_text == "bark(${1:times}, ${2:loud})"
        assert bark.documentation == "Declared in Dog"

    def test_inherited_field_item(self, resolver: ImportResolver, temp_dir: Path) -> None:
        items = complete_at_end(resolver, temp_dir / "main.pf", SOURCE + "d.")
        name = next(item for item in items if item.name == "name")
        assert name.kind is CompletionKind.FIELD
        assert name.documentation == "Declared in Animal"
        assert name.to_dict()["insert_text"] == "name"

    def test_partial_member_name(self, resolver: ImportResolver, temp_dir: Path) -> None:
        items = complete_at_end(resolver, temp_dir / "main.pf", SOURCE + "d.ba")
        assert "bark" in names(items)

    def test_chained_field(self, resolver: ImportResolver, temp_dir: Path) -> None:
        items = complete_at_end(resolver, temp_dir / "main.pf", SOURCE + "d.owner.")
        assert names(items) == {"greet"}

    def test_this_inside_method(self, resolver: ImportResolver, temp_dir: Path) -> None:
        offset = SOURCE.index("this.") + len("this.")
        document = Document(temp_dir / "main.pf", SOURCE)
        items = complete(document, offset, cache=resolver.cache, resolver=resolver)
        assert names(items) == {"owner", "bark", "name", "secret", "speak"}

    def test_static_side(self, resolver: ImportResolver, temp_dir: Path) -> None:
        items = complete_at_end(resolver, temp_dir / "main.pf", SOURCE + "Animal.")
        assert names(items) == {"count"}

    def test_enum_static_side(self, resolver: ImportResolver, temp_dir: Path) -> None:
        items = complete_at_end(resolver, temp_dir / "main.pf", SOURCE + "Color.")
        assert names(items) == {"RED", "GREEN", "valueOf", "values", "size", "names"}
        red = next(item for item in items if item.name == "RED")
        assert red.kind is CompletionKind.ENUM_MEMBER

    def test_enum_value(self, resolver: ImportResolver, temp_dir: Path) -> None:
        items = complete_at_end(resolver, temp_dir / "main.pf", SOURCE + "Color.RED.")
        assert names(items) == {"name", "ordinal", "toString"}

    def test_builtin_receiver(self, resolver: ImportResolver, temp_dir: Path) -> None:
        items = complete_at_end(resolver, temp_dir / "main.pf", SOURCE + "s.")
        assert {"length", "toUpperCase", "split"} <= names(items)

    def test_unknown_receiver(self, resolver: ImportResolver, temp_dir: Path) -> None:
        assert complete_at_end(resolver, temp_dir / "main.pf", SOURCE + "nothing.") == []

    def test_private_members_of_imported_entities(self, resolver: ImportResolver, temp_dir: Path) -> None:
        (temp_dir / "lib.pf").write_text(
            "class Base:\n    private var secret = 1\n    var visible = 2\nend\n"
        )
        text = "import lib { Base }\nclass Child < Base:\nend\nvar c = Child()\nc."
        items = complete_at_end(resolver, temp_dir / "main.pf", text)
        assert names(items) == {"visible"}

    def test_private_members_in_declaring_file(self, resolver: ImportResolver, temp_dir: Path) -> None:
        text = "class Base:\n    private var secret = 1\n    var visible = 2\nend\nvar b = Base()\nb."
        items = complete_at_end(resolver, temp_dir / "lib.pf", text)
        assert names(items) == {"secret", "visible"}


class TestGlobalCompletion:
    """Tests for completion outside member access."""

    @pytest.fixture
    def items(self, resolver: ImportResolver, temp_dir: Path) -> list[CompletionItem]:
        (temp_dir / "shapes.pf").write_text("class Circle:\nend\n")
        text = "import shapes { Circle, Square }\n" + SOURCE + "\n"
        return complete_at_end(resolver, temp_dir / "main.pf", text)

    def by_key(self, items: list[CompletionItem]) -> dict:
        return {(item.name, item.kind): item for item in items}

    def test_keywords_and_types(self, items: list[CompletionItem]) -> None:
        keys = self.by_key(items)
        assert ("class", CompletionKind.KEYWORD) in keys
        assert ("return", CompletionKind.KEYWORD) in keys
        assert keys[("String", CompletionKind.TYPE)].detail == "builtin type"

    def test_entities(self, items: list[CompletionItem]) -> None:
        keys = self.by_key(items)
        assert keys[("Dog", CompletionKind.CLASS)].detail == "class Dog < Animal"
        assert ("Color", CompletionKind.ENUM) in keys

    def test_imports(self, items: list[CompletionItem]) -> None:
        keys = self.by_key(items)
        assert keys[("Circle", CompletionKind.CLASS)].documentation == "Imported from shapes"
        assert keys[("Square", CompletionKind.CLASS)].documentation == "Imported from shapes"

    def test_functions_and_variables(self, items: list[CompletionItem]) -> None:
        keys = self.by_key(items)
        assert keys[("helper", CompletionKind.FUNCTION)].insert_text == "helper(${1:x})"
        assert keys[("d", CompletionKind.VARIABLE)].detail == "d: Dog"
        assert keys[("s", CompletionKind.VARIABLE)].detail == "s: String"

    def test_snippets(self, items: list[CompletionItem]) -> None:
        keys = self.by_key(items)
        snippet = keys[("class", CompletionKind.SNIPPET)]
        assert snippet.insert_text.startswith("class ${1:Name}:")

    def test_no_duplicates(self, items: list[CompletionItem]) -> None:
        keys = [(item.name, item.kind) for item in items]
        assert len(keys) == len(set(keys))

    def test_empty_document(self, resolver: ImportResolver, temp_dir: Path) -> None:
        items = complete_at_end(resolver, temp_dir / "empty.pf", "")
        assert ("var", CompletionKind.KEYWORD) in self.by_key(items)
