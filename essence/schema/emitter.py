"""HCL emission for resolved schemas.

Output layout (two spaces per level):

    schema "public" {}

    table "users" {
      schema = schema.public
      column "id" {
        null = false
        type = integer
        auto_increment = true
      }
      primary_key {
        columns = [column.id]
      }
      foreign_key "fk_users_league_id" {
        columns = [column.league_id]
        ref_columns = [table.leagues.column.id]
        on_delete = CASCADE
      }
      index "index_users_on_email" {
        columns = [column.email]
      }
    }
"""

import re
from collections.abc import Iterable

from essence.exceptions import EmissionError
from essence.schema.models import (
    ForeignKeyRef,
    IndexSpec,
    ResolvedColumn,
    ResolvedTable,
    SchemaDocument,
)

INDENT = "  "

HEADER_LINES = (
    "# Auto-generated HCL schema from {source}",
    "# Edit the YAML file and re-run the converter to update this file",
)

TOP_LEVEL_BLOCKS = ("schema", "table")
NESTED_BLOCKS = ("column", "primary_key", "foreign_key", "index")

_BLOCK_KEYWORD_RE = re.compile(r"^(\w+)\b")


class BlockWriter:
    """Accumulates lines while tracking open blocks."""

    def __init__(self):
        self.lines: list[str] = []
        self.depth = 0

    def line(self, text: str = "") -> None:
        self.lines.append(f"{INDENT * self.depth}{text}" if text else "")

    def open(self, header: str) -> None:
        self.line(f"{header} {{")
        self.depth += 1

    def close(self) -> None:
        if self.depth == 0:
            raise EmissionError("Attempted to close a block that was never opened")
        self.depth -= 1
        self.line("}")

    def text(self) -> str:
        if self.depth:
            raise EmissionError(f"{self.depth} block(s) left open at end of output")
        return "\n".join(self.lines) + "\n"


def column_refs(columns: Iterable[str]) -> str:
    return "[" + ", ".join(f"column.{col}" for col in columns) + "]"


class SchemaEmitter:
    """Renders resolved tables as Atlas-style HCL."""

    def __init__(self, include_header: bool = True, source_name: str = "schema.yaml"):
        self.include_header = include_header
        self.source_name = source_name

    def emit(self, document: SchemaDocument, tables: Iterable[ResolvedTable]) -> str:
        """Render the whole schema.

        Args:
            document: Normalized document (supplies the schema name)
            tables: Resolved tables in declaration order

        Returns:
            HCL text ending in a single newline.

        Raises:
            EmissionError: If the rendered text breaks the block structure
        """
        writer = BlockWriter()

        if self.include_header:
            for template in HEADER_LINES:
                writer.line(template.format(source=self.source_name))
            writer.line()

        writer.line(f'schema "{document.schema_name}" {{}}')

        for table in tables:
            writer.line()
            self._emit_table(writer, document.schema_name, table)

        text = writer.text()
        problems = check_structure(text)
        if problems:
            raise EmissionError(
                "Generated HCL failed structure validation", details={"problems": problems}
            )
        return text

    def _emit_table(self, writer: BlockWriter, schema_name: str, table: ResolvedTable) -> None:
        writer.open(f'table "{table.name}"')
        writer.line(f"schema = schema.{schema_name}")

        for column in table.columns:
            self._emit_column(writer, column)

        if table.primary_key:
            writer.open("primary_key")
            writer.line(f"columns = {column_refs([table.primary_key])}")
            writer.close()

        for fk in table.foreign_keys:
            self._emit_foreign_key(writer, table.name, fk)

        for index in table.indexes:
            self._emit_index(writer, index)

        writer.close()

    @staticmethod
    def _emit_column(writer: BlockWriter, column: ResolvedColumn) -> None:
        writer.open(f'column "{column.name}"')
        writer.line(f"null = {'false' if column.not_null else 'true'}")
        writer.line(f"type = {column.hcl_type}")
        if column.auto_increment:
            writer.line("auto_increment = true")
        if column.default is not None:
            writer.line(f"default = {column.default.to_hcl()}")
        writer.close()

    @staticmethod
    def _emit_foreign_key(writer: BlockWriter, table_name: str, fk: ForeignKeyRef) -> None:
        writer.open(f'foreign_key "{fk.constraint_name(table_name)}"')
        writer.line(f"columns = {column_refs([fk.column])}")
        writer.line(f"ref_columns = [table.{fk.ref_table}.column.{fk.ref_column}]")
        if fk.on_delete is not None:
            writer.line(f"on_delete = {fk.on_delete.value}")
        writer.close()

    @staticmethod
    def _emit_index(writer: BlockWriter, index: IndexSpec) -> None:
        writer.open(f'index "{index.name}"')
        writer.line(f"columns = {column_refs(index.columns)}")
        if index.unique:
            writer.line("unique = true")
        writer.close()


def check_structure(text: str) -> list[str]:
    """Validate indentation and brace balance of emitted HCL.

    Returns a list of problems; an empty list means the text is well formed.
    """
    errors = []
    # (keyword, indent) of every open block
    stack: list[tuple[str, int]] = []

    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        indent = len(line) - len(line.lstrip(" "))
        if indent % len(INDENT):
            errors.append(f"line {lineno}: indentation {indent} is not a multiple of {len(INDENT)}")

        if stripped == "}":
            if not stack:
                errors.append(f"line {lineno}: unmatched closing brace")
                continue
            keyword, opened_at = stack.pop()
            if indent != opened_at:
                errors.append(
                    f"line {lineno}: closing brace for '{keyword}' at {indent}, opened at {opened_at}"
                )
            continue

        expected = len(INDENT) * len(stack)
        if indent != expected:
            errors.append(f"line {lineno}: expected indentation {expected}, got {indent}")

        match = _BLOCK_KEYWORD_RE.match(stripped)
        keyword = match.group(1) if match else stripped

        if stripped.endswith("{}"):
            if keyword not in TOP_LEVEL_BLOCKS or stack:
                errors.append(f"line {lineno}: empty block '{keyword}' must be top-level")
        elif stripped.endswith("{"):
            if keyword in TOP_LEVEL_BLOCKS and stack:
                errors.append(f"line {lineno}: '{keyword}' block must sit at indentation 0")
            elif keyword in NESTED_BLOCKS and len(stack) != 1:
                errors.append(f"line {lineno}: '{keyword}' block must sit at indentation 2")
            elif keyword not in TOP_LEVEL_BLOCKS + NESTED_BLOCKS:
                errors.append(f"line {lineno}: unknown block '{keyword}'")
            stack.append((keyword, indent))
        elif "=" in stripped:
            if not stack:
                errors.append(f"line {lineno}: assignment outside of a block")
            elif stack[-1][0] in NESTED_BLOCKS and indent != 2 * len(INDENT):
                errors.append(f"line {lineno}: property of '{stack[-1][0]}' must sit at indentation 4")
        else:
            errors.append(f"line {lineno}: unrecognized line '{stripped}'")

    for keyword, opened_at in stack:
        errors.append(f"block '{keyword}' opened at indentation {opened_at} is never closed")

    return errors


def emit(document: SchemaDocument, tables: Iterable[ResolvedTable], **options) -> str:
    """Functional form of :meth:`SchemaEmitter.emit`."""
    return SchemaEmitter(**options).emit(document, tables)
