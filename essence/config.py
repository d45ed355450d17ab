"""Configuration management for Essence.

One compilation engine serves every flavor of the schema format; the few
differences between flavors (default schema name, default pattern set,
version check) live here instead of in duplicated compiler classes.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_SCHEMA_CANDIDATES = (
    "db/schema.yaml",
    "db/schema.yml",
    "schema.yaml",
    "schema.yml",
)

DEFAULT_OUTPUT_PATH = "db/schema.hcl"

SUPPORTED_RAILS_VERSIONS = ("8.0",)


def default_column_patterns() -> list[dict[str, Any]]:
    """Pattern entries used when a document declares no ``column_patterns``.

    Returns a new list on every call so no two engines share rule state.
    """
    return [
        {
            "pattern": "_id$",
            "template": "integer -> {table}.id on_delete=cascade not_null",
            "description": "Foreign key columns automatically reference the related table",
        },
        {
            "pattern": "_at$",
            "attributes": "datetime not_null",
            "description": "Timestamp columns get datetime type with not_null constraint",
        },
        {
            "pattern": ".*",
            "attributes": "string",
            "description": "Default type for columns that don't match other patterns",
        },
    ]


@dataclass(frozen=True)
class CompilerConfig:
    """Flavor settings for one compilation engine."""

    flavor: str = "essence"
    schema_name: str = "public"
    supported_rails_versions: tuple[str, ...] | None = SUPPORTED_RAILS_VERSIONS
    schema_candidates: tuple[str, ...] = DEFAULT_SCHEMA_CANDIDATES
    output_path: str = DEFAULT_OUTPUT_PATH
    include_header: bool = True
    pattern_factory: Any = field(default=default_column_patterns, repr=False)

    @classmethod
    def essence(cls, **overrides) -> "CompilerConfig":
        """Default flavor: ``public`` schema, ``rails_version`` checked."""
        return cls(**overrides)

    @classmethod
    def jaml(cls, **overrides) -> "CompilerConfig":
        """Legacy JAML flavor: ``main`` schema, no version check."""
        settings = {"flavor": "jaml", "schema_name": "main", "supported_rails_versions": None}
        settings.update(overrides)
        return cls(**settings)

    @classmethod
    def for_flavor(cls, flavor: str, **overrides) -> "CompilerConfig":
        """Look up a preset by name (``essence`` or ``jaml``)."""
        presets = {"essence": cls.essence, "jaml": cls.jaml}
        if flavor not in presets:
            raise ValueError(f"Unknown flavor '{flavor}'. Expected one of: {', '.join(presets)}")
        return presets[flavor](**overrides)

    def default_patterns(self) -> list[dict[str, Any]]:
        return self.pattern_factory()

    def find_schema_file(self, root: Path | None = None) -> Path:
        """Locate the YAML source.

        Prefers ``.yaml`` over ``.yml`` and ``db/`` over the project root. When
        nothing exists, the first candidate is returned so the caller reports
        the preferred location.
        """
        root = root or Path.cwd()
        for candidate in self.schema_candidates:
            path = root / candidate
            if path.exists():
                return path
        return root / self.schema_candidates[0]
