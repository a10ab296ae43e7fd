"""Diagnostics for one Polyloft file.

Every check reads the already-built model; none of them raise. Results are
sorted by position.
"""

from __future__ import annotations

from collections.abc import Collection, Iterator
from typing import TYPE_CHECKING

from loftscope.core.graph.analysis import find_cycles
from loftscope.core.graph.base import HierarchyGraph
from loftscope.core.models import Member, MemberKind, SymbolEntity, TypeKind, TypeRef, Visibility
from loftscope.features.context import AnalysisContext, load_source
from loftscope.features.models import Diagnostic, Document, Range, Severity
from loftscope.languages.inference import infer_expression
from loftscope.languages.members import parse_member_statement
from loftscope.languages.models import (
    Block,
    Declaration,
    SourceFile,
    Statement,
    StatementContext,
    Token,
    TokenType,
)
from loftscope.languages.syntax import (
    CONTINUATION_KEYWORDS,
    ENTITY_KEYWORDS,
    FUNCTION_BLOCKS,
    KEYWORDS,
    LOOP_KEYWORDS,
    MODIFIERS,
    read_prefix,
)

if TYPE_CHECKING:
    from loftscope.core.cache import SessionCache
    from loftscope.core.resolver import ImportResolver

ASSIGNMENT_OPS = ("=", "+=", "-=", "*=", "/=", "%=")
NUMERIC_WIDENING = {"Int": ("Float", "Double"), "Float": ("Double",)}
CLASS_LIKE = ENTITY_KEYWORDS - {"interface"}
METHOD_BLOCKS = frozenset({"def", "constructor"})
ANNOTATION_TARGETS = ENTITY_KEYWORDS | MODIFIERS | {"def"}


def check_assignment(graph: HierarchyGraph, value: TypeRef, declared: TypeRef) -> Diagnostic | None:
    """Compare an assigned type with a declared one.

    Returns a diagnostic with a placeholder range, or None when the types fit
    or either side is not known well enough to judge.
    """
    if not value.is_known or not declared.is_known:
        return None
    if TypeKind.FUNCTION in (value.kind, declared.kind):
        return None
    source, target = value.base, declared.base
    if source == target or target == "Any":
        return None

    placeholder = Range(1, 1, 1, 1)
    if value.kind is TypeKind.ENTITY and declared.kind is TypeKind.ENTITY:
        if source not in graph or target not in graph or graph.is_assignable(source, target):
            return None
        return Diagnostic(
            placeholder,
            Severity.ERROR,
            f"Type '{source}' is not compatible with declared type '{target}'",
            "incompatible-type",
        )

    for ref in (value, declared):
        if ref.kind is TypeKind.ENTITY and ref.base not in graph:
            return None
    if target in NUMERIC_WIDENING.get(source or "", ()):
        return None
    return Diagnostic(
        placeholder,
        Severity.WARNING,
        f"Type '{value.display()}' does not match declared type '{declared.display()}'",
        "type-mismatch",
    )


class Linter:
    """Runs every check over one analysis context."""

    def __init__(self, context: AnalysisContext, indent_width: int = 4) -> None:
        self.context = context
        self.source = context.source
        self.indent_width = indent_width
        self.diagnostics: list[Diagnostic] = []

    def report(self, range_: Range, severity: Severity, message: str, code: str) -> None:
        self.diagnostics.append(Diagnostic(range_, severity, message, code))

    def run(self) -> list[Diagnostic]:
        self.check_lexical()
        self.check_blocks()
        self.check_imports()
        self.check_statements()
        self.check_annotations()
        self.check_unreachable()
        self.check_types()
        self.check_entities()
        self.check_signatures()
        self.check_indentation()
        return sorted(
            self.diagnostics, key=lambda d: (d.range.start_line, d.range.start_column, d.code)
        )

    def check_lexical(self) -> None:
        for token in self.source.lex.unclosed_strings:
            self.report(
                Range.of_tokens(token), Severity.ERROR, "Unclosed string literal", "unclosed-string"
            )

        # Braces pair up within one statement; a literal spanning lines is one statement.
        for context in self.source.structure.contexts:
            opened: list[Token] = []
            for token in context.statement.tokens:
                if token.is_op("{"):
                    opened.append(token)
                elif token.is_op("}"):
                    if opened:
                        opened.pop()
                    else:
                        self.report(
                            Range.of_tokens(token), Severity.WARNING, "Unmatched '}'", "unmatched-bracket"
                        )
            for token in opened:
                self.report(Range.of_tokens(token), Severity.WARNING, "Unmatched '{'", "unmatched-bracket")

    def check_blocks(self) -> None:
        structure = self.source.structure
        for block in structure.unclosed:
            self.report(
                Range.of_tokens(block.start),
                Severity.WARNING,
                f"'{block.start.value}' block is never closed with 'end'",
                "missing-end",
            )
        for token in structure.stray_ends:
            self.report(Range.of_tokens(token), Severity.WARNING, "Unexpected 'end'", "stray-end")

    def check_imports(self) -> None:
        used = self._used_names()
        for decl in self.context.imports:
            target = None
            if decl.resolved_path is not None:
                target = self.context.resolver.cache.get(decl.resolved_path)
            if decl.resolved_path is None and not decl.symbols:
                self.report(
                    Range.of_line(decl.line, decl.column, len("import")),
                    Severity.ERROR,
                    f"Cannot resolve module '{decl.module}'",
                    "unresolved-import",
                )
            for symbol in decl.symbols:
                where = Range.of_line(symbol.line, symbol.column, len(symbol.name))
                if decl.resolved_path is None:
                    self.report(
                        where,
                        Severity.ERROR,
                        f"Cannot resolve '{symbol.name}': module '{decl.module}' not found",
                        "unresolved-import",
                    )
                    continue
                if target is not None and self._lookup(target, symbol.name) is None:
                    self.report(
                        where,
                        Severity.ERROR,
                        f"Module '{decl.module}' has no symbol '{symbol.name}'",
                        "unknown-import-symbol",
                    )
                decision = decl.decisions.get(symbol.name)
                if decision is not None and not decision.allowed:
                    found = self._lookup(target, symbol.name) if target is not None else None
                    protected = found is not None and found.visibility is Visibility.PROTECTED
                    self.report(
                        where,
                        Severity.WARNING if protected else Severity.ERROR,
                        f"Cannot import '{symbol.name}': {decision.reason}",
                        "protected-import" if protected else "private-import",
                    )
                if symbol.name not in used:
                    self.report(
                        where,
                        Severity.HINT,
                        f"'{symbol.name}' is imported but never used",
                        "unused-import",
                    )

    @staticmethod
    def _lookup(target: SourceFile, name: str) -> SymbolEntity | Member | None:
        return target.entity_index.get(name) or target.functions.get(name)

    def _used_names(self) -> set[str]:
        used: set[str] = set()
        for context in self.source.structure.contexts:
            tokens = context.statement.tokens
            if tokens[0].is_name("import"):
                continue
            used.update(t.value for t in tokens if t.type is TokenType.NAME)
        return used

    def check_statements(self) -> None:
        declarations = {id(d.statement): d for d in self.source.declarations}
        seen: dict[tuple[int, str], Declaration] = {}

        for context in self.source.structure.contexts:
            tokens = context.statement.tokens
            decl = declarations.get(id(context.statement))
            if decl is not None:
                self._check_declaration(context, decl, seen)

            i, _, _ = read_prefix(tokens)
            head = tokens[i] if i < len(tokens) else tokens[0]
            if head.is_name("def") and parse_member_statement(tokens[i:]) is None:
                self.report(
                    Range.of_tokens(context.statement.first, context.statement.last),
                    Severity.ERROR,
                    "Invalid function definition",
                    "invalid-def",
                )
            elif head.is_name("return") and not self._inside(context, FUNCTION_BLOCKS):
                self.report(
                    Range.of_tokens(head),
                    Severity.ERROR,
                    "'return' outside of a function",
                    "return-outside-function",
                )
            elif head.is_name("break", "continue") and not self._inside_loop(context):
                self.report(
                    Range.of_tokens(head),
                    Severity.ERROR,
                    f"'{head.value}' outside of a loop",
                    "break-outside-loop",
                )

            if not self._inside_method(context):
                for index, token in enumerate(tokens):
                    if token.is_name("this") and not (index and tokens[index - 1].is_op(".")):
                        self.report(
                            Range.of_tokens(token),
                            Severity.ERROR,
                            "'this' used outside of a class method or constructor",
                            "this-outside-class",
                        )
                        break

    def check_annotations(self) -> None:
        """Annotations must precede a declaration such as a class or a method."""
        contexts = self.source.structure.contexts
        for index, context in enumerate(contexts):
            tokens = context.statement.tokens
            i, annotations, modifiers = read_prefix(tokens)
            if not annotations or modifiers:
                continue
            if i < len(tokens):
                target = tokens[i]
            elif index + 1 < len(contexts):
                target = contexts[index + 1].statement.first
                if target.is_op("@"):
                    continue
            else:
                continue
            if target.is_name(*ANNOTATION_TARGETS):
                continue
            self.report(
                Range.of_tokens(context.statement.first, context.statement.last),
                Severity.WARNING,
                f"Annotation '@{annotations[-1]}' must be followed by a class, method "
                "or other declaration",
                "invalid-annotation-target",
            )

    def check_unreachable(self) -> None:
        """The statement after a ``return`` in the same block never runs."""
        contexts = self.source.structure.contexts
        for current, following in zip(contexts, contexts[1:]):
            if not current.statement.first.is_name("return") or current.opened:
                continue
            if not self._inside(current, FUNCTION_BLOCKS):
                continue
            if not _same_blocks(current.stack, following.stack):
                continue
            if following.statement.first.is_name("end", *CONTINUATION_KEYWORDS):
                continue
            self.report(
                Range.of_tokens(following.statement.first, following.statement.last),
                Severity.WARNING,
                "Unreachable code after 'return'",
                "unreachable-code",
            )

    def _check_declaration(
        self,
        context: StatementContext,
        decl: Declaration,
        seen: dict[tuple[int, str], Declaration],
    ) -> None:
        statement = context.statement
        if len(decl.declarators) > 1:
            self.report(
                Range.of_tokens(statement.first, statement.last),
                Severity.ERROR,
                f"Multiple declarators '{' '.join(decl.declarators)}' for '{decl.name}'",
                "multiple-declarators",
            )
        key = (id(context.innermost), decl.name)
        if key in seen:
            self.report(
                Range.of_line(decl.line, decl.column, len(decl.name)),
                Severity.ERROR,
                f"'{decl.name}' is already declared in this scope (line {seen[key].line})",
                "duplicate-declaration",
            )
        else:
            seen[key] = decl

    def check_types(self) -> None:
        """Declared-vs-assigned checks, with bindings built up in source order."""
        graph = self.context.graph
        known = self.context.known_entities
        known.update(name for name in self.context.imported if name[:1].isupper())
        declarations = {id(d.statement): d for d in self.source.declarations}
        bindings: dict[str, TypeRef] = {}
        annotated: dict[str, Declaration] = {}
        constants: dict[str, Declaration] = {}

        for context in self.source.structure.contexts:
            statement = context.statement
            decl = declarations.get(id(statement))
            if decl is not None:
                if decl.annotation:
                    self._report_assignment(graph, decl.inferred, decl.type, statement)
                    annotated[decl.name] = decl
                else:
                    annotated.pop(decl.name, None)
                if decl.is_constant:
                    constants[decl.name] = decl
                else:
                    constants.pop(decl.name, None)
                bindings[decl.name] = decl.type
                continue

            tokens = statement.tokens
            if len(tokens) < 2 or tokens[0].type is not TokenType.NAME or tokens[0].value in KEYWORDS:
                continue
            if not tokens[1].is_op(*ASSIGNMENT_OPS):
                continue
            name = tokens[0].value
            if name in constants:
                self.report(
                    Range.of_tokens(statement.first, statement.last),
                    Severity.ERROR,
                    f"Cannot reassign constant '{name}'",
                    "const-reassign",
                )
            if tokens[1].value == "=" and name in annotated:
                value = infer_expression(tokens[2:], known, bindings)
                self._report_assignment(graph, value, annotated[name].type, statement)

    def _report_assignment(
        self, graph: HierarchyGraph, value: TypeRef, declared: TypeRef, statement: Statement
    ) -> None:
        found = check_assignment(graph, value, declared)
        if found is not None:
            where = Range.of_tokens(statement.first, statement.last)
            self.report(where, found.severity, found.message, found.code)

    def check_entities(self) -> None:
        names = self._entity_name_ranges()
        local = {entity.name for entity in self.source.entities}
        for entity in self.source.entities:
            fallback = Range.of_line(entity.span.line, entity.span.column, len(entity.kind.value))
            where = names.get(entity.name, fallback)
            if not entity.name[:1].isupper():
                self.report(
                    where,
                    Severity.WARNING,
                    f"{entity.kind.value.capitalize()} name '{entity.name}' "
                    "should start with an uppercase letter",
                    "naming-convention",
                )

        for cycle in find_cycles(self.context.graph.parents):
            first = next((name for name in cycle if name in local), None)
            if first is None:
                continue
            chain = " -> ".join([*cycle, cycle[0]])
            self.report(
                names.get(first, Range.of_line(1)),
                Severity.WARNING,
                f"Circular inheritance: {chain}",
                "circular-inheritance",
            )

    def _entity_name_ranges(self) -> dict[str, Range]:
        ranges: dict[str, Range] = {}
        for block in self.source.structure.blocks:
            if block.keyword not in ENTITY_KEYWORDS:
                continue
            tokens = block.header.tokens
            index = tokens.index(block.start)
            if index + 1 < len(tokens):
                name = tokens[index + 1]
                ranges.setdefault(name.value, Range.of_tokens(name))
        return ranges

    def _signatures(self) -> Iterator[Member]:
        for entity in self.source.entities:
            for member in entity.members:
                if member.kind in (MemberKind.METHOD, MemberKind.CONSTRUCTOR) and not member.synthetic:
                    yield member
        yield from self.source.functions.values()

    def check_signatures(self) -> None:
        for member in self._signatures():
            where = Range.of_line(member.line, member.column, len(member.name))
            for param in member.parameters:
                if param.type is None:
                    self.report(
                        where,
                        Severity.INFO,
                        f"Parameter '{param.name}' of '{member.name}' has no type annotation",
                        "missing-param-type",
                    )
            if member.kind is MemberKind.METHOD and member.return_type is None:
                self.report(
                    where,
                    Severity.HINT,
                    f"'{member.name}' has no return type annotation",
                    "missing-return-type",
                )

    def check_indentation(self) -> None:
        lines = self.source.lines
        checked: set[int] = set()
        for context in self.source.structure.contexts:
            line = context.statement.line
            if line in checked or line > len(lines):
                continue
            checked.add(line)
            text = lines[line - 1]
            indent = text[: len(text) - len(text.lstrip(" \t"))]
            if not indent:
                continue
            if " " in indent and "\t" in indent:
                message = "Indentation mixes tabs and spaces"
            elif "\t" not in indent and len(indent) % self.indent_width:
                message = f"Indentation is not a multiple of {self.indent_width} spaces"
            else:
                continue
            where = Range.of_line(line, 1, len(indent))
            self.report(where, Severity.HINT, message, "inconsistent-indent")

    @staticmethod
    def _inside(context: StatementContext, keywords: Collection[str]) -> bool:
        return any(block.keyword in keywords for block in context.stack)

    @staticmethod
    def _inside_method(context: StatementContext) -> bool:
        """Inside a def or constructor whose nearest entity is a class, enum or record."""
        blocks = [*context.stack, *context.opened]
        entity = None
        for index, block in enumerate(blocks):
            if block.keyword in ENTITY_KEYWORDS:
                entity = index
        if entity is None or blocks[entity].keyword not in CLASS_LIKE:
            return False
        return any(block.keyword in METHOD_BLOCKS for block in blocks[entity + 1 :])

    @staticmethod
    def _inside_loop(context: StatementContext) -> bool:
        for block in reversed(context.stack):
            if block.keyword in LOOP_KEYWORDS or block.keyword == "switch":
                return True
            if block.keyword in FUNCTION_BLOCKS:
                return False
        return False


def _same_blocks(first: tuple[Block, ...], second: tuple[Block, ...]) -> bool:
    return len(first) == len(second) and all(a is b for a, b in zip(first, second))


def lint(
    document: Document,
    *,
    cache: SessionCache,
    resolver: ImportResolver,
    indent_width: int = 4,
) -> list[Diagnostic]:
    """All diagnostics for ``document``, sorted by position."""
    source = load_source(document, cache)
    if source is None:
        return []
    return Linter(AnalysisContext(source, resolver), indent_width=indent_width).run()
