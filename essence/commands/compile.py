"""Compile schema.yaml to Atlas HCL."""

import click

from essence.utils.error_handler import handle_exceptions


@click.command("compile")
@handle_exceptions
@click.help_option("-h", "--help")
@click.argument("yaml_file", required=False, type=click.Path(dir_okay=False))
@click.argument("hcl_file", required=False, type=click.Path(dir_okay=False))
@click.option(
    "--flavor",
    type=click.Choice(["essence", "jaml"]),
    default="essence",
    show_default=True,
    help="Schema flavor (sets default schema name and version checks)",
)
@click.option("--schema-name", help="Schema name used when the YAML omits schema_name")
@click.option("--no-header", is_flag=True, help="Omit the auto-generated comment header")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print HCL instead of writing a file")
def compile_command(yaml_file, hcl_file, flavor, schema_name, no_header, to_stdout):
    """Compile a YAML schema into Atlas HCL.

    Merges default columns into every table, infers placeholder columns
    (value ~) from the ordered column_patterns, derives foreign keys and
    unique indexes, and writes the HCL file. Nothing is written when the
    source is missing or invalid.

    \b
    INPUT DISCOVERY (when YAML_FILE is omitted):
      db/schema.yaml, db/schema.yml, schema.yaml, schema.yml

    \b
    EXAMPLES:
      essence compile
      essence compile db/schema.yaml db/schema.hcl
      essence compile schema.yml --flavor jaml --stdout

    \b
    EXIT CODES:
      0 = Success
      3 = Schema file not found
      4 = Schema YAML invalid
      5 = Unsupported rails_version
    """
    from pathlib import Path

    from essence.compiler import Compiler
    from essence.config import CompilerConfig
    from essence.ui import console, print_success

    overrides = {"include_header": not no_header}
    if schema_name:
        overrides["schema_name"] = schema_name
    config = CompilerConfig.for_flavor(flavor, **overrides)
    compiler = Compiler(config)

    if to_stdout:
        source = Path(yaml_file) if yaml_file else config.find_schema_file()
        document = compiler.loader.load_file(source)
        click.echo(compiler.compile_document(document, source_name=str(source)), nl=False)
        return

    target = compiler.compile_file(yaml_file, hcl_file)
    print_success("Compilation completed successfully!")
    console.print(f"Atlas HCL schema written to [path]{target}[/path]", highlight=False)
