"""Unit tests for declaration type inference."""

from loftscope.core.models import TypeKind, TypeRef
from loftscope.languages.inference import (
    collect_declarations,
    infer_bindings,
    infer_expression,
    parse_declaration,
    resolve_annotation,
)
from loftscope.languages.lexer import split_statements, tokenize

KNOWN = {"Animal", "Cat", "Dog"}


def infer(expression: str, known=KNOWN) -> TypeRef:
    return infer_expression(tokenize(expression).tokens, known)


class TestInferExpression:
    """Tests for infer_expression()."""

    def test_literals(self) -> None:
        assert infer("42") == TypeRef.builtin("Int")
        assert infer("-3") == TypeRef.builtin("Int")
        assert infer("1.5") == TypeRef.builtin("Float")
        assert infer("1e3") == TypeRef.builtin("Float")
        assert infer('"text"') == TypeRef.builtin("String")
        assert infer("'c'") == TypeRef.builtin("String")
        assert infer("true") == TypeRef.builtin("Bool")
        assert infer("false") == TypeRef.builtin("Bool")

    def test_collections(self) -> None:
        assert infer("[1, 2, 3]") == TypeRef.builtin("Array")
        assert infer('{"a": 1}') == TypeRef.builtin("Map")

    def test_lambda(self) -> None:
        assert infer("(x) => x * 2").kind is TypeKind.FUNCTION

    def test_known_constructor_call(self) -> None:
        assert infer("Cat()") == TypeRef.entity("Cat")
        assert infer('Dog("rex", 3)') == TypeRef.entity("Dog")

    def test_unknown_call(self) -> None:
        assert not infer("Horse()").is_known
        assert not infer("make()").is_known

    def test_not_a_call(self) -> None:
        assert not infer("Cat").is_known
        assert not infer("Cat().speak()").is_known
        assert not infer("1 + 2").is_known

    def test_empty(self) -> None:
        assert not infer("").is_known

    def test_identifier_reference(self) -> None:
        bindings = {"a": TypeRef.entity("Cat")}
        tokens = tokenize("a").tokens
        assert infer_expression(tokens, KNOWN, bindings) == TypeRef.entity("Cat")


class TestInferBindings:
    """Tests for infer_bindings()."""

    def test_declarations(self) -> None:
        text = 'var a = Cat()\nlet n = 1\nconst s = "x"\nfinal f = 2.0\nvar u = thing()\n'
        bindings = infer_bindings(text, KNOWN)
        assert bindings["a"] == TypeRef.entity("Cat")
        assert bindings["n"] == TypeRef.builtin("Int")
        assert bindings["s"] == TypeRef.builtin("String")
        assert bindings["f"] == TypeRef.builtin("Float")
        assert bindings["u"].display() == "Any"

    def test_annotation_wins(self) -> None:
        bindings = infer_bindings('var x: String = 5\nvar d: Animal = Cat()\n', KNOWN)
        assert bindings["x"] == TypeRef.builtin("String")
        assert bindings["d"] == TypeRef.entity("Animal")

    def test_reference_to_earlier_binding(self) -> None:
        bindings = infer_bindings("var a = Cat()\nvar b = a\n", KNOWN)
        assert bindings["b"] == TypeRef.entity("Cat")

    def test_later_declaration_replaces(self) -> None:
        text = 'var v = 1\nif ready:\n    var v = "s"\nend\n'
        assert infer_bindings(text, KNOWN)["v"] == TypeRef.builtin("String")

    def test_non_declarations_ignored(self) -> None:
        assert infer_bindings("x = 1\nprint(x)\n", KNOWN) == {}


class TestCollectDeclarations:
    """Tests for collect_declarations()."""

    def test_positions_and_types(self) -> None:
        text = "var a = 1\n    const b: Int = a\n"
        decls = collect_declarations(split_statements(tokenize(text).tokens), KNOWN)
        assert [(d.name, d.line, d.column) for d in decls] == [("a", 1, 5), ("b", 2, 11)]
        assert decls[1].is_constant
        assert decls[1].annotation == "Int"
        assert decls[1].inferred == TypeRef.builtin("Int")

    def test_declaration_without_value(self) -> None:
        text = "var x: Int\n"
        decl = collect_declarations(split_statements(tokenize(text).tokens), KNOWN)[0]
        assert decl.type == TypeRef.builtin("Int")
        assert not decl.inferred.is_known


class TestParseDeclaration:
    """Tests for parse_declaration()."""

    def test_modifiers_and_declarators(self) -> None:
        syntax = parse_declaration(tokenize("private static var count: Int = 0").tokens)
        assert syntax is not None
        assert syntax.declarators == ("var",)
        assert syntax.name.value == "count"
        assert syntax.annotation == "Int"
        assert [t.value for t in syntax.value] == ["0"]

    def test_keyword_name_rejected(self) -> None:
        assert parse_declaration(tokenize("var class = 1").tokens) is None

    def test_not_a_declaration(self) -> None:
        assert parse_declaration(tokenize("x = 1").tokens) is None


class TestResolveAnnotation:
    """Tests for resolve_annotation()."""

    def test_builtin(self) -> None:
        ref = resolve_annotation("Array[Int]")
        assert ref.kind is TypeKind.BUILTIN
        assert ref.base == "Array"

    def test_entity(self) -> None:
        assert resolve_annotation("Dog") == TypeRef.entity("Dog")

    def test_nullable(self) -> None:
        assert resolve_annotation("String?").kind is TypeKind.BUILTIN

    def test_unknown_displays_as_any(self) -> None:
        assert TypeRef.unknown().display() == "Any"
