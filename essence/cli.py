"""Essence CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

from pathlib import Path

import click

from essence import __version__
from essence.utils.logging import configure_file_logging, set_level


@click.group()
@click.version_option(version=__version__, prog_name="essence")
@click.help_option("-h", "--help")
@click.option("-v", "--verbose", is_flag=True, help="Show per-column resolution (DEBUG logging)")
@click.option("-q", "--quiet", is_flag=True, help="Only log warnings and errors")
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False),
    help="Also write a rotating essence.log into this directory",
)
def cli(verbose, quiet, log_dir):
    """Essence - compile YAML database schemas to Atlas HCL.

    \b
    COMMANDS:
      template  Write a starter schema.yaml
      compile   Compile schema.yaml to db/schema.hcl

    \b
    TYPICAL WORKFLOW:
      essence template
      # edit db/schema.yaml
      essence compile
    """
    if verbose:
        set_level("DEBUG")
    elif quiet:
        set_level("WARNING")
    if log_dir:
        configure_file_logging(Path(log_dir))


from essence.commands.compile import compile_command
from essence.commands.template import template

cli.add_command(template)
cli.add_command(compile_command, name="compile")


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
