"""Polyloft parser: builds the semantic model of one file."""

from __future__ import annotations

from pathlib import Path

from loftscope.core.exceptions import SourceReadError
from loftscope.core.fingerprint import compute_file_fingerprint, compute_text_fingerprint
from loftscope.core.models import Member
from loftscope.languages.blocks import walk_blocks
from loftscope.languages.entities import extract_entities
from loftscope.languages.imports import parse_imports
from loftscope.languages.inference import collect_declarations
from loftscope.languages.lexer import split_statements, tokenize
from loftscope.languages.members import parse_member_statement, parse_members
from loftscope.languages.models import BlockStructure, SourceFile
from loftscope.languages.syntax import ENTITY_KEYWORDS, read_prefix


def read_source(file: Path) -> str:
    """Read a source file as UTF-8."""
    try:
        return file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Cannot read {file}: {e}") from e


class PolyloftParser:
    """Parser for Polyloft (.pf) files.

    The pipeline runs in a fixed order: tokens, statements, blocks, entities,
    members, declarations and imports. Nothing in it raises on malformed text.
    """

    def parse(self, file: Path) -> SourceFile:
        """Parse a file on disk. Raises SourceReadError if it cannot be read."""
        text = read_source(file)
        return self.parse_text(text, file, token=compute_file_fingerprint(file))

    def parse_text(self, text: str, file: Path, token: str | None = None) -> SourceFile:
        lex = tokenize(text)
        statements = split_statements(lex.tokens)
        structure = walk_blocks(statements)

        entities = extract_entities(text, structure=structure)
        for entity in entities:
            entity.file = file
            entity.members = parse_members(
                entity.kind,
                text[entity.body_start : entity.body_end],
                entity_name=entity.name,
                components=entity.components,
                line=entity.body_line,
                column=entity.body_column,
                offset=entity.body_start,
            )

        imports = parse_imports(statements)
        # Imported names written like types count as entities for inference.
        known = {entity.name for entity in entities}
        known.update(name for decl in imports for name in decl.names if name[:1].isupper())
        declarations = collect_declarations(statements, known)

        return SourceFile(
            path=file,
            text=text,
            token=token or compute_text_fingerprint(text),
            lex=lex,
            structure=structure,
            entities=entities,
            functions=_collect_functions(structure),
            declarations=declarations,
            bindings={d.name: d.type for d in declarations},
            imports=imports,
        )


def _collect_functions(structure: BlockStructure) -> dict[str, Member]:
    """``def`` statements that are not inside any entity."""
    functions: dict[str, Member] = {}
    for context in structure.contexts:
        if any(block.keyword in ENTITY_KEYWORDS for block in context.stack):
            continue
        tokens = context.statement.tokens
        i, _, _ = read_prefix(tokens)
        if i >= len(tokens) or not tokens[i].is_name("def"):
            continue
        member = parse_member_statement(tokens)
        if member is not None:
            functions[member.name] = member
    return functions
