"""YAML schema loading and normalization.

Reads the YAML source and turns it into an immutable SchemaDocument: pattern
entries become PatternRules, index entries become IndexSpecs, and every
mapping is frozen so later stages cannot modify the document.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from essence.config import CompilerConfig
from essence.exceptions import SchemaNotFoundError, SchemaParseError, UnsupportedVersionError
from essence.schema.models import WILDCARD, IndexSpec, SchemaDocument, TableDefinition
from essence.schema.patterns import build_rules
from essence.utils.logging import logger

UNIQUE_MARKER = "unique"


class SchemaLoader:
    """Loads schema documents from YAML files or text."""

    def __init__(self, config: CompilerConfig | None = None):
        self.config = config or CompilerConfig()

    def load_file(self, path: Path | str) -> SchemaDocument:
        """Load and normalize a YAML schema file.

        Raises:
            SchemaNotFoundError: The file does not exist or cannot be read
            SchemaParseError: The YAML is malformed
            UnsupportedVersionError: ``rails_version`` is not supported
        """
        path = Path(path)
        if not path.is_file():
            raise SchemaNotFoundError(
                f"YAML file {path} not found! Run 'essence template' to create a new schema file",
                details={"path": str(path)},
            )

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaNotFoundError(f"Cannot read {path}: {e}", details={"path": str(path)}) from e

        return self.load_text(text, source=str(path))

    def load_text(self, text: str, source: str = "<string>") -> SchemaDocument:
        """Parse YAML text into a SchemaDocument."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SchemaParseError(str(e), details={"source": source}) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SchemaParseError(
                f"Schema root must be a mapping, got {type(data).__name__}",
                details={"source": source},
            )

        document = self.from_mapping(data)
        logger.info(
            "Loaded YAML schema with {count} tables from {source}",
            count=len(document.tables),
            source=source,
        )
        return document

    def from_mapping(self, data: dict[str, Any]) -> SchemaDocument:
        """Normalize an already-parsed YAML mapping."""
        rails_version = data.get("rails_version")
        if rails_version is not None:
            rails_version = str(rails_version)
            self._validate_rails_version(rails_version)

        raw_patterns = data.get("column_patterns")
        if raw_patterns is None:
            logger.info("Using default column patterns")
            raw_patterns = self.config.default_patterns()
        elif not isinstance(raw_patterns, list):
            raise SchemaParseError("'column_patterns' must be a list")
        patterns = build_rules(raw_patterns)

        defaults = _normalize_defaults(data.get("defaults"))
        if defaults:
            logger.debug("Loaded default columns for {count} selectors", count=len(defaults))

        tables = _normalize_tables(data.get("tables"))

        return SchemaDocument(
            schema_name=str(data.get("schema_name") or self.config.schema_name),
            defaults=defaults,
            patterns=patterns,
            tables=tables,
            rails_version=rails_version,
        )

    def _validate_rails_version(self, rails_version: str) -> None:
        supported = self.config.supported_rails_versions
        if supported is None or rails_version in supported:
            return
        supported_list = ", ".join(f"ActiveRecord::Schema[{v}]" for v in supported)
        raise UnsupportedVersionError(
            f"Unsupported rails_version '{rails_version}'. Currently supported versions: "
            f"{supported_list}. Please remove rails_version from your schema.yaml or use a "
            "supported version.",
            details={"rails_version": rails_version},
        )


def _freeze_columns(raw: Any, where: str) -> MappingProxyType:
    if raw is None:
        return MappingProxyType({})
    if not isinstance(raw, dict):
        raise SchemaParseError(f"'columns' of {where} must be a mapping, got {type(raw).__name__}")
    return MappingProxyType({str(name): spec for name, spec in raw.items()})


def _normalize_defaults(raw: Any) -> MappingProxyType:
    if raw is None:
        return MappingProxyType({})
    if not isinstance(raw, dict):
        raise SchemaParseError("'defaults' must be a mapping of table selectors")

    defaults = {}
    for selector, body in raw.items():
        selector = str(selector)
        where = "all tables" if selector == WILDCARD else f"defaults for '{selector}'"
        columns = body.get("columns") if isinstance(body, dict) else None
        defaults[selector] = _freeze_columns(columns, where)
    return MappingProxyType(defaults)


def _normalize_tables(raw: Any) -> MappingProxyType:
    if raw is None:
        return MappingProxyType({})
    if not isinstance(raw, dict):
        raise SchemaParseError("'tables' must be a mapping of table names")

    tables = {}
    for name, body in raw.items():
        name = str(name)
        body = body or {}
        if not isinstance(body, dict):
            raise SchemaParseError(f"Table '{name}' must be a mapping")
        tables[name] = TableDefinition(
            name=name,
            columns=_freeze_columns(body.get("columns"), f"table '{name}'"),
            indexes=parse_indexes(name, body.get("indexes") or []),
        )
    return MappingProxyType(tables)


def parse_indexes(table_name: str, entries: Any) -> tuple[IndexSpec, ...]:
    """Normalize a table's ``indexes`` list.

    Accepted entries:
        - email                           # single column
        - columns: [user_id, created_at]  # mapping form
          unique: true
        - [user_id, created_at, unique]   # legacy list form
    """
    if not isinstance(entries, list):
        logger.warning("Ignoring non-list 'indexes' on table '{table}'", table=table_name)
        return ()

    indexes = []
    for entry in entries:
        spec = _parse_index(table_name, entry)
        if spec is None:
            logger.warning("Skipping invalid index on '{table}': {entry!r}", table=table_name, entry=entry)
            continue
        indexes.append(spec)
    return tuple(indexes)


def _parse_index(table_name: str, entry: Any) -> IndexSpec | None:
    if isinstance(entry, str):
        return IndexSpec(table=table_name, columns=(entry,))

    if isinstance(entry, dict):
        columns = entry.get("columns") or []
        if isinstance(columns, str):
            columns = [columns]
        if not isinstance(columns, list) or not columns:
            return None
        return IndexSpec(
            table=table_name,
            columns=tuple(str(col) for col in columns),
            unique=bool(entry.get("unique", False)),
        )

    if isinstance(entry, list):
        columns = [str(item) for item in entry if item != UNIQUE_MARKER]
        if not columns:
            return None
        return IndexSpec(table=table_name, columns=tuple(columns), unique=UNIQUE_MARKER in entry)

    return None
