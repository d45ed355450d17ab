"""Default-column merging.

A table's effective column map is built from an ordered override chain:

    1. wildcard defaults   (``defaults["*"]``)
    2. table defaults      (``defaults[<table>]``)
    3. explicit columns    (``tables[<table>].columns``)

Later tiers replace earlier ones by column name. A column keeps the position
of its first appearance, so default columns such as ``id`` lead the table.
Columns whose value is the inference sentinel are resolved through the
PatternMatcher at whichever tier they appear.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from essence.schema.models import PRIMARY_KEY, WILDCARD, TableDefinition
from essence.schema.patterns import PatternMatcher


def is_inference_sentinel(spec: Any) -> bool:
    """True for ``None`` (YAML ``~``/empty) or a single non-alphanumeric marker like ``"~"``."""
    if spec is None:
        return True
    if isinstance(spec, str):
        stripped = spec.strip()
        return len(stripped) == 1 and not stripped.isalnum()
    return False


@dataclass(frozen=True)
class Tier:
    """One level of the override chain."""

    name: str
    columns: Mapping[str, Any]


def override_chain(
    table_name: str,
    table_def: TableDefinition,
    defaults: Mapping[str, Mapping[str, Any]],
) -> list[Tier]:
    """Build the ordered tiers for ``table_name``, lowest precedence first."""
    return [
        Tier("wildcard", defaults.get(WILDCARD) or {}),
        Tier("table", defaults.get(table_name) or {}),
        Tier("explicit", table_def.columns),
    ]


class DefaultResolver:
    """Merges defaults into each table and resolves inferred columns."""

    def __init__(self, defaults: Mapping[str, Mapping[str, Any]], matcher: PatternMatcher):
        self.defaults = defaults
        self.matcher = matcher

    def merge(self, table_name: str, table_def: TableDefinition) -> dict[str, str]:
        """Return the fully resolved ``column -> definition`` map for one table.

        The input document is never modified; a new dict is returned.
        An inferred ``id`` column becomes the primary key when no other
        column claims it, whatever the patterns would say.
        """
        merged: dict[str, str] = {}
        inferred: set[str] = set()
        for tier in override_chain(table_name, table_def, self.defaults):
            for column_name, spec in tier.columns.items():
                column_name = str(column_name)
                if is_inference_sentinel(spec):
                    merged[column_name] = self.matcher.resolve(column_name, table_name)
                    inferred.add(column_name)
                else:
                    merged[column_name] = str(spec)
                    inferred.discard(column_name)

        if "id" in inferred and PRIMARY_KEY not in merged.values():
            merged["id"] = PRIMARY_KEY
        return merged


def merge(
    table_name: str,
    table_def: TableDefinition,
    defaults: Mapping[str, Mapping[str, Any]],
    matcher: PatternMatcher,
) -> dict[str, str]:
    """Functional form of :meth:`DefaultResolver.merge`."""
    return DefaultResolver(defaults, matcher).merge(table_name, table_def)
