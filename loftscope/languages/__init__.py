"""
Polyloft front end: turn source text into a semantic model.

Every pass works on tokens, never on raw characters, so keywords inside
strings and comments are never mistaken for structure.

Components:
    - tokenize / split_statements: tokens and logical lines (lexer.py)
    - walk_blocks: pairs block openers with ``end`` (blocks.py)
    - extract_entities: class/enum/record/interface blocks (entities.py)
    - parse_members: fields, methods, constructors, enum values (members.py)
    - infer_bindings: variable name -> TypeRef (inference.py)
    - parse_imports: ``import module { A, B }`` statements (imports.py)
    - PolyloftParser: runs the passes in order and returns a SourceFile

Everything here degrades to partial results on malformed input; nothing
raises except ``read_source`` for unreadable files.
"""

from loftscope.languages.base import LanguageParser
from loftscope.languages.entities import extract_entities
from loftscope.languages.inference import BUILTIN_TYPES, infer_bindings, infer_expression
from loftscope.languages.lexer import split_statements, tokenize
from loftscope.languages.members import parse_members
from loftscope.languages.models import SourceFile
from loftscope.languages.polyloft import PolyloftParser, read_source

__all__ = [
    "BUILTIN_TYPES",
    "LanguageParser",
    "PolyloftParser",
    "SourceFile",
    "extract_entities",
    "infer_bindings",
    "infer_expression",
    "parse_members",
    "read_source",
    "split_statements",
    "tokenize",
]
