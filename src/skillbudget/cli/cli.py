import logging

import click

from skillbudget.cli.commands.context_cmd import context_cmd
from skillbudget.cli.commands.detect_cmd import detect_cmd
from skillbudget.cli.commands.extend_cmd import extend_cmd
from skillbudget.cli.commands.install_cmd import install_cmd
from skillbudget.cli.commands.plan_cmd import plan_cmd
from skillbudget.core.config import ConfigError
from skillbudget.core.context import create_context
from skillbudget.errors import CatalogError
from skillbudget.output import error_output

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="skillbudget")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Load backend skill references into AI coding agents within a token budget."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context()
        except (ConfigError, CatalogError) as e:
            error_output(str(e))
            raise SystemExit(1) from e


cli.add_command(context_cmd)
cli.add_command(detect_cmd)
cli.add_command(extend_cmd)
cli.add_command(install_cmd)
cli.add_command(plan_cmd)


def main() -> None:
    """CLI entry point used by the `skillbudget` console script."""
    cli()
