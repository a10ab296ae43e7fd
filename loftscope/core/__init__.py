"""
Core module: data models, exceptions, and session state.

Models (models.py):
    - SymbolEntity: a class, enum, record, or interface declaration
    - Member: a field, method, constructor, or enum value
    - TypeRef: builtin, entity, function, or Unknown type
    - ImportDeclaration / VisibilityDecision: cross-file import facts

Exceptions (exceptions.py):
    - LoftscopeError: Base exception for all loftscope errors
    - SourceReadError: Source file could not be read
    - SymbolNotFoundError: Requested entity doesn't exist
    - ConfigError: Configuration could not be loaded

Session state and cross-file logic live in their own modules so that this
package stays importable from the front end:
    - cache.SessionCache: parsed models keyed by path and modification token
    - resolver.ImportResolver: ordered import resolution strategies
    - visibility: import visibility rules
    - graph/: inheritance hierarchy queries
"""

from loftscope.core.exceptions import (
    ConfigError,
    LoftscopeError,
    SourceReadError,
    SymbolNotFoundError,
)
from loftscope.core.fingerprint import compute_file_fingerprint, compute_text_fingerprint
from loftscope.core.models import (
    CacheStats,
    EntityKind,
    ImportDeclaration,
    Member,
    MemberKind,
    Parameter,
    SymbolEntity,
    TypeKind,
    TypeRef,
    Visibility,
    VisibilityDecision,
)

__all__ = [
    # Models
    "SymbolEntity",
    "Member",
    "Parameter",
    "TypeRef",
    "ImportDeclaration",
    "VisibilityDecision",
    "CacheStats",
    "EntityKind",
    "MemberKind",
    "TypeKind",
    "Visibility",
    # Exceptions
    "LoftscopeError",
    "SourceReadError",
    "SymbolNotFoundError",
    "ConfigError",
    # Fingerprints
    "compute_file_fingerprint",
    "compute_text_fingerprint",
]
