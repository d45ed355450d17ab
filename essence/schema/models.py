"""Schema model classes - Foundation for resolution and emission."""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

PRIMARY_KEY = "primary_key"
WILDCARD = "*"
TABLE_PLACEHOLDER = "{table}"


class OnDelete(Enum):
    """Referential actions understood by the HCL output."""

    CASCADE = "CASCADE"
    SET_NULL = "SET_NULL"
    RESTRICT = "RESTRICT"

    @classmethod
    def parse(cls, raw: str | None) -> "OnDelete | None":
        """Normalize an ``on_delete=`` value, returning None when unrecognized.

        ``set_null``, ``SET_NULL`` and a quoted ``"set null"`` all map to
        SET_NULL. An unquoted ``on_delete=set null`` only carries ``set`` and
        is dropped.
        """
        if not raw:
            return None
        normalized = re.sub(r"[\s_]+", "_", raw.strip().upper())
        try:
            return cls[normalized]
        except KeyError:
            return None


class ResolutionKind(Enum):
    TEMPLATE = "template"
    LITERAL = "literal"


@dataclass(frozen=True)
class Resolution:
    """What a pattern rule resolves to: a ``{table}`` template or literal attributes."""

    kind: ResolutionKind
    text: str

    @classmethod
    def template(cls, text: str) -> "Resolution":
        return cls(ResolutionKind.TEMPLATE, text)

    @classmethod
    def literal(cls, text: str) -> "Resolution":
        return cls(ResolutionKind.LITERAL, text)

    @classmethod
    def infer(cls, text: str) -> "Resolution":
        """Pick the kind from the text itself: templates carry ``{table}``."""
        if TABLE_PLACEHOLDER in text:
            return cls.template(text)
        return cls.literal(text)

    @property
    def is_template(self) -> bool:
        return self.kind is ResolutionKind.TEMPLATE


@dataclass(frozen=True)
class PatternRule:
    """Ordered regex-to-resolution mapping used to infer a column definition."""

    regex: re.Pattern
    resolution: Resolution
    description: str | None = None

    def matches(self, column_name: str) -> bool:
        return self.regex.search(column_name) is not None


@dataclass(frozen=True)
class IndexSpec:
    """An index over one or more columns, in declaration order."""

    table: str
    columns: tuple[str, ...]
    unique: bool = False

    @property
    def name(self) -> str:
        """Derived name: ``index_<table>_on_<c1>_and_<c2>[_unique]``."""
        name = f"index_{self.table}_on_{'_and_'.join(self.columns)}"
        if self.unique:
            name += "_unique"
        return name


@dataclass(frozen=True)
class TableDefinition:
    """A table as written in the YAML document, before defaults and patterns."""

    name: str
    columns: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    indexes: tuple[IndexSpec, ...] = ()


@dataclass(frozen=True)
class SchemaDocument:
    """Represents a complete, normalized schema document."""

    schema_name: str
    defaults: Mapping[str, Mapping[str, Any]] = field(default_factory=lambda: MappingProxyType({}))
    patterns: tuple[PatternRule, ...] = ()
    tables: Mapping[str, TableDefinition] = field(default_factory=lambda: MappingProxyType({}))
    rails_version: str | None = None

    def table_names(self) -> list[str]:
        """Get list of table names in declaration order."""
        return list(self.tables)


@dataclass(frozen=True)
class DefaultValue:
    """A column default as a typed literal."""

    kind: str  # "boolean" | "number" | "string"
    value: str

    def to_hcl(self) -> str:
        if self.kind == "string":
            return f'"{self.value}"'
        return self.value


@dataclass(frozen=True)
class ForeignKeyRef:
    """Foreign key from one column to ``table.column`` in another table."""

    column: str
    ref_table: str
    ref_column: str = "id"
    on_delete: OnDelete | None = None

    def constraint_name(self, table: str) -> str:
        return f"fk_{table}_{self.column}"


@dataclass(frozen=True)
class ResolvedColumn:
    """Represents a database column with type and constraints."""

    name: str
    base_type: str
    hcl_type: str
    size: str | None = None
    not_null: bool = False
    unique: bool = False
    auto_increment: bool = False
    primary_key: bool = False
    default: DefaultValue | None = None
    foreign_key: ForeignKeyRef | None = None


@dataclass
class ResolvedTable:
    """A table ready for emission."""

    name: str
    columns: list[ResolvedColumn]
    primary_key: str | None = None
    indexes: list[IndexSpec] = field(default_factory=list)

    def column_names(self) -> list[str]:
        """Get list of column names in definition order."""
        return [col.name for col in self.columns]

    @property
    def foreign_keys(self) -> list[ForeignKeyRef]:
        return [col.foreign_key for col in self.columns if col.foreign_key is not None]

    def validate(self, all_tables: dict[str, "ResolvedTable"]) -> list[str]:
        """Check foreign keys and indexes against the resolved schema.

        Returns a list of problems; an empty list means the table is consistent.
        Targets outside ``all_tables`` are reported, not rejected, since the
        referenced table may live in another schema file.
        """
        errors = []
        names = set(self.column_names())

        for fk in self.foreign_keys:
            target = all_tables.get(fk.ref_table)
            if target is None:
                errors.append(f"Foreign table '{fk.ref_table}' does not exist (from {self.name}.{fk.column})")
            elif fk.ref_column not in target.column_names():
                errors.append(f"Foreign column '{fk.ref_table}.{fk.ref_column}' not found")

        for index in self.indexes:
            for col in index.columns:
                if col not in names:
                    errors.append(f"Index '{index.name}' references unknown column '{col}'")

        return errors
