"""
Schema module: resolution and emission engine.

Leaves first:
- inflector: pluralization for foreign-key table names
- patterns: ordered regex rules (first match wins)
- defaults: wildcard -> table -> explicit override chain
- columns: definition string grammar
- emitter: HCL block rendering and structure checks
- loader: YAML -> SchemaDocument
"""

from .columns import ColumnDefinitionParser
from .defaults import DefaultResolver
from .emitter import SchemaEmitter, check_structure
from .inflector import pluralize
from .loader import SchemaLoader
from .models import (
    ForeignKeyRef,
    IndexSpec,
    OnDelete,
    PatternRule,
    ResolvedColumn,
    ResolvedTable,
    SchemaDocument,
    TableDefinition,
)
from .patterns import PatternMatcher

__all__ = [
    "ColumnDefinitionParser",
    "DefaultResolver",
    "ForeignKeyRef",
    "IndexSpec",
    "OnDelete",
    "PatternMatcher",
    "PatternRule",
    "ResolvedColumn",
    "ResolvedTable",
    "SchemaDocument",
    "SchemaEmitter",
    "SchemaLoader",
    "TableDefinition",
    "check_structure",
    "pluralize",
]
