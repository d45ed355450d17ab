"""YAML to HCL compiler.

Ties the pieces together for one compilation run:

    SchemaLoader -> DefaultResolver (+ PatternMatcher)
                 -> ColumnDefinitionParser -> SchemaEmitter

Every run builds its own matcher, resolver and parser from the document, so
compilers never share mutable state. File output is written only after the
whole schema has been emitted.
"""

from pathlib import Path

from essence.config import CompilerConfig
from essence.schema.columns import ColumnDefinitionParser, find_primary_key_column
from essence.schema.defaults import DefaultResolver
from essence.schema.emitter import SchemaEmitter
from essence.schema.loader import SchemaLoader
from essence.schema.models import IndexSpec, ResolvedTable, SchemaDocument
from essence.schema.patterns import PatternMatcher
from essence.utils.logging import logger


class Compiler:
    """Compiles schema documents to HCL."""

    def __init__(self, config: CompilerConfig | None = None):
        self.config = config or CompilerConfig()
        self.loader = SchemaLoader(self.config)

    def resolve(self, document: SchemaDocument) -> list[ResolvedTable]:
        """Resolve every table of ``document`` in declaration order."""
        matcher = PatternMatcher(document.patterns)
        resolver = DefaultResolver(document.defaults, matcher)
        parser = ColumnDefinitionParser()

        tables = []
        for table_name, table_def in document.tables.items():
            definitions = resolver.merge(table_name, table_def)
            columns = [parser.parse(name, definition) for name, definition in definitions.items()]
            tables.append(
                ResolvedTable(
                    name=table_name,
                    columns=columns,
                    primary_key=find_primary_key_column(columns),
                    indexes=with_unique_indexes(table_name, table_def.indexes, columns),
                )
            )

        by_name = {table.name: table for table in tables}
        for table in tables:
            for problem in table.validate(by_name):
                logger.warning("{table}: {problem}", table=table.name, problem=problem)

        return tables

    def compile_document(self, document: SchemaDocument, source_name: str = "schema.yaml") -> str:
        """Resolve and emit a loaded document."""
        tables = self.resolve(document)
        emitter = SchemaEmitter(include_header=self.config.include_header, source_name=source_name)
        return emitter.emit(document, tables)

    def compile_text(self, text: str, source_name: str = "schema.yaml") -> str:
        """Compile YAML text straight to HCL text."""
        document = self.loader.load_text(text, source=source_name)
        return self.compile_document(document, source_name=source_name)

    def compile_file(
        self,
        yaml_file: Path | str | None = None,
        hcl_file: Path | str | None = None,
    ) -> Path:
        """Compile a YAML file and write the HCL artifact.

        Args:
            yaml_file: Source path; discovered from the config's candidates if None
            hcl_file: Output path; the config's ``output_path`` if None

        Returns:
            Path of the written HCL file.
        """
        source = Path(yaml_file) if yaml_file else self.config.find_schema_file()
        target = Path(hcl_file) if hcl_file else Path(self.config.output_path)

        logger.info("Converting {source} to {target}", source=source, target=target)
        document = self.loader.load_file(source)
        hcl = self.compile_document(document, source_name=str(source))

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(hcl, encoding="utf-8")
        logger.info("Atlas HCL schema written to {target}", target=target)
        return target


def with_unique_indexes(table_name: str, declared: tuple[IndexSpec, ...], columns) -> list[IndexSpec]:
    """Append a unique index for every ``unique`` column not already covered.

    Declared indexes keep their order; synthesized ones follow in column
    order, named ``index_<table>_on_<column>_unique``.
    """
    indexes = list(declared)
    names = {index.name for index in indexes}
    for column in columns:
        if not column.unique:
            continue
        spec = IndexSpec(table=table_name, columns=(column.name,), unique=True)
        if spec.name not in names:
            indexes.append(spec)
            names.add(spec.name)
    return indexes


def compile_schema(
    yaml_file: Path | str | None = None,
    hcl_file: Path | str | None = None,
    config: CompilerConfig | None = None,
) -> Path:
    """Compile ``yaml_file`` to ``hcl_file`` with a fresh compiler."""
    return Compiler(config).compile_file(yaml_file, hcl_file)
