"""Column definition parsing.

Grammar of a definition string:

    definition := "primary_key" | simple_def ("->" fk_ref)?
    simple_def := base_type ("(" size ")")? modifiers*
    modifiers  := "not_null" | "unique" | "default=" value
    fk_ref     := table "." column (" on_delete=" action)?

Examples:
    "string(255) not_null unique"
    "boolean default=false not_null"
    "integer -> leagues.id on_delete=cascade not_null"
"""

import re
from collections.abc import Iterable

from essence.schema.models import (
    PRIMARY_KEY,
    DefaultValue,
    ForeignKeyRef,
    OnDelete,
    ResolvedColumn,
)

FK_ARROW = "->"

_TYPE_RE = re.compile(r"^([^\s(]+)(?:\(([^)]*)\))?")
_DEFAULT_RE = re.compile(r"""(?:^|\s)default=("[^"]*"|'[^']*'|\S+)""")
_ON_DELETE_RE = re.compile(r"""(?:^|\s)on_delete=("[^"]*"|'[^']*'|\S+)""")
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")

# Essence types whose size is carried into the HCL type
SIZED_TYPES = {
    "string": "varchar",
    "decimal": "decimal",
    "binary": "binary",
}

NATIVE_TYPES = {"integer", "text", "boolean", "datetime", "date"}

RAILS_TYPE_MAPPING = {
    "bigint": "bigint",
    "float": "float",
    "timestamp": "datetime",
    "time": "time",
}


def convert_type_to_hcl(base_type: str, size: str | None) -> str:
    """Map an Essence/Rails type token to its HCL type.

    Unknown tokens pass through verbatim, keeping any size suffix.
    """
    suffix = f"({size})" if size else ""
    if base_type in SIZED_TYPES:
        return SIZED_TYPES[base_type] + suffix
    if base_type in NATIVE_TYPES:
        return base_type
    if base_type in RAILS_TYPE_MAPPING:
        return RAILS_TYPE_MAPPING[base_type]
    return base_type + suffix


def format_default_value(raw: str) -> DefaultValue:
    """Type a ``default=`` literal.

    ``true``/``false`` and bare numbers stay unquoted; anything else loses
    its surrounding quotes and is emitted as a double-quoted string.
    """
    lowered = raw.lower()
    if lowered in ("true", "false"):
        return DefaultValue("boolean", lowered)
    if _NUMBER_RE.fullmatch(raw):
        return DefaultValue("number", raw)
    return DefaultValue("string", _unquote(raw).replace('"', '\\"'))


def _unquote(value: str) -> str:
    if value[:1] in ("'", '"'):
        value = value[1:]
    if value[-1:] in ("'", '"'):
        value = value[:-1]
    return value


def parse_foreign_key_reference(column_name: str, reference: str) -> ForeignKeyRef | None:
    """Parse ``leagues.id on_delete=cascade`` into a ForeignKeyRef.

    A reference without ``.column`` targets ``id``. Unknown ``on_delete``
    actions are dropped.
    """
    tokens = reference.split()
    if not tokens:
        return None

    table, _, ref_column = tokens[0].partition(".")
    on_delete = None
    match = _ON_DELETE_RE.search(reference)
    if match:
        on_delete = OnDelete.parse(_unquote(match.group(1)))

    return ForeignKeyRef(
        column=column_name,
        ref_table=table,
        ref_column=ref_column or "id",
        on_delete=on_delete,
    )


class ColumnDefinitionParser:
    """Turns definition strings into ResolvedColumn records."""

    def parse(self, name: str, definition: str) -> ResolvedColumn:
        """Parse one column definition.

        Args:
            name: Column name
            definition: Explicit or pattern-resolved definition string

        Returns:
            The structured column. Unrecognized type tokens degrade to a
            verbatim pass-through instead of failing.
        """
        definition = definition.strip()
        if definition == PRIMARY_KEY:
            return ResolvedColumn(
                name=name,
                base_type="integer",
                hcl_type="integer",
                not_null=True,
                auto_increment=True,
                primary_key=True,
            )

        base_part, arrow, reference = definition.partition(FK_ARROW)
        base_type, size = self._split_type(base_part.strip())
        # Modifiers may follow the reference: "integer -> users.id not_null"
        tokens = set(_ON_DELETE_RE.sub(" ", _DEFAULT_RE.sub(" ", definition)).split())

        default = None
        match = _DEFAULT_RE.search(definition)
        if match:
            default = format_default_value(match.group(1))

        foreign_key = None
        if arrow:
            foreign_key = parse_foreign_key_reference(name, reference)

        return ResolvedColumn(
            name=name,
            base_type=base_type,
            hcl_type=convert_type_to_hcl(base_type, size),
            size=size,
            not_null="not_null" in tokens,
            unique="unique" in tokens,
            auto_increment=base_type == "integer" and name == "id",
            default=default,
            foreign_key=foreign_key,
        )

    @staticmethod
    def _split_type(base: str) -> tuple[str, str | None]:
        match = _TYPE_RE.match(base)
        if match:
            size = match.group(2)
            return match.group(1), re.sub(r"\s+", "", size) if size else None
        tokens = base.split()
        return (tokens[0] if tokens else "string"), None


def find_primary_key_column(columns: Iterable[ResolvedColumn]) -> str | None:
    """Pick the table's primary-key column.

    The first column flagged ``primary_key`` wins; otherwise a column named
    ``id`` is assumed to be the key.
    """
    columns = list(columns)
    for column in columns:
        if column.primary_key:
            return column.name
    if any(column.name == "id" for column in columns):
        return "id"
    return None
