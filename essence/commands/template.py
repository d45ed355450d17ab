"""Generate a starter schema.yaml."""

import click

from essence.utils.error_handler import handle_exceptions


@click.command("template")
@handle_exceptions
@click.help_option("-h", "--help")
@click.argument("path", required=False, default="db/schema.yaml", type=click.Path(dir_okay=False))
@click.option(
    "--flavor",
    type=click.Choice(["essence", "jaml"]),
    default="essence",
    show_default=True,
    help="Schema flavor for the generated file",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def template(path, flavor, force):
    """Write a commented starter schema.yaml.

    The template shows default columns, the standard column_patterns and
    example tables. Parent directories are created as needed.

    \b
    EXAMPLES:
      essence template
      essence template custom/my_schema.yaml
    """
    from pathlib import Path

    from essence.config import CompilerConfig
    from essence.template import generate_template
    from essence.ui import console, print_success, print_warning

    target = Path(path)
    if target.exists():
        if not force:
            raise click.ClickException(f"{target} already exists (use --force to overwrite)")
        print_warning(f"Overwriting existing {target}")

    console.print(f"Generating Essence schema template at {target}", highlight=False)
    generate_template(target, CompilerConfig.for_flavor(flavor))
    print_success(f"Schema template created at {target}")
    console.print("Edit this file to define your database schema", highlight=False)
    console.print("Run 'essence compile' to compile to HCL format", highlight=False)
