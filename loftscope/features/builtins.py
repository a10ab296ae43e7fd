"""Static tables: keywords, builtin types, builtin members, snippets."""

from __future__ import annotations

from loftscope.core.models import Member, MemberKind, Parameter
from loftscope.languages.inference import BUILTIN_TYPES

COMPLETION_KEYWORDS = (
    "var", "let", "const", "final", "def", "class", "enum", "record", "interface",
    "implements", "extends", "import", "return", "if", "elif", "else", "for", "in",
    "where", "loop", "break", "continue", "end", "do", "try", "catch", "finally",
    "throw", "switch", "case", "default", "this", "super", "true", "false", "nil",
    "public", "private", "protected", "static", "sealed", "abstract", "thread",
    "spawn", "join", "defer",
)

COMPLETION_TYPES = tuple(sorted(BUILTIN_TYPES))

SNIPPETS = {
    "class": ("Class declaration", "class ${1:Name}:\n\t$0\nend"),
    "enum": ("Enum declaration", "enum ${1:Name}\n\t${2:VALUE}\n\t$0\nend"),
    "record": ("Record declaration", "record ${1:Name}(${2:field}: ${3:Type})\n\t$0\nend"),
    "interface": ("Interface declaration", "interface ${1:Name}:\n\t${2:method}() -> ${3:Void}\nend"),
    "def": ("Function definition", "def ${1:name}(${2:params}):\n\t$0\nend"),
    "import": ("Import statement", "import ${1:module} { ${2:Symbol} }"),
    "for": ("For loop", "for ${1:item} in ${2:items}:\n\t$0\nend"),
    "if": ("If statement", "if ${1:condition}:\n\t$0\nend"),
}


def _method(owner: str, name: str, returns: str, *params: tuple[str, str]) -> Member:
    return Member(
        name,
        MemberKind.METHOD,
        owner=owner,
        parameters=[Parameter(p, t) for p, t in params],
        return_type=returns,
        synthetic=True,
    )


BUILTIN_MEMBERS: dict[str, list[Member]] = {
    "String": [
        _method("String", "length", "Int"),
        _method("String", "toUpperCase", "String"),
        _method("String", "toLowerCase", "String"),
        _method("String", "substring", "String", ("start", "Int"), ("end", "Int")),
        _method("String", "split", "Array[String]", ("separator", "String")),
        _method("String", "trim", "String"),
        _method("String", "contains", "Bool", ("text", "String")),
    ],
    "Array": [
        _method("Array", "length", "Int"),
        _method("Array", "push", "Void", ("item", "Any")),
        _method("Array", "pop", "Any"),
        _method("Array", "contains", "Bool", ("item", "Any")),
        _method("Array", "map", "Array", ("fn", "Function")),
        _method("Array", "filter", "Array", ("fn", "Function")),
    ],
    "Map": [
        _method("Map", "get", "Any", ("key", "Any")),
        _method("Map", "set", "Void", ("key", "Any"), ("value", "Any")),
        _method("Map", "has", "Bool", ("key", "Any")),
        _method("Map", "keys", "Array"),
        _method("Map", "values", "Array"),
        _method("Map", "size", "Int"),
    ],
}
