"""LAMMPS-MLIAP Command Line Interface.

This module serves as the main entry point for the installer command line tools.
"""
import sys
from pathlib import Path

import click
import yaml

from .. import __version__
from ..config import load_settings, recipe
from ..installer import Installer, UsageError, VerificationError, validate_arguments
from ..logging_config import configure_logging
from ..utils.console import print_error
from ..utils.toolchain import CommandFailed


@click.group()
@click.version_option(__version__, prog_name="lmpmliap")
def cli():
    """LAMMPS + ML-IAP (MACE) + Kokkos multi-GPU installer for CSC Mahti"""
    pass


@cli.command(name="install", context_settings={"allow_extra_args": True})
@click.argument("username", required=False)
@click.argument("project_name", required=False)
@click.option("--dry-run", is_flag=True, help="Log every command instead of running it")
@click.option("--log-dir", type=click.Path(file_okay=False, path_type=Path),
              help="Directory for the run log and per-step command logs")
def install(username, project_name, dry_run, log_dir):
    """Install LAMMPS-MLIAP under /projappl/PROJECT_NAME/USERNAME/LAMMPS-MLIAP."""
    prog = click.get_current_context().command_path
    try:
        username, project_name = validate_arguments([username, project_name], prog=prog)
    except UsageError as e:
        print_error(str(e))
        sys.exit(1)

    settings = load_settings(log_dir=log_dir, dry_run=True if dry_run else None)
    configure_logging(settings.log_dir)

    installer = Installer(username, project_name, settings=settings)
    try:
        installer.run()
    except (CommandFailed, VerificationError, OSError) as e:
        if installer.current_step:
            print_error(f"Step '{installer.current_step}' failed.")
        print_error(str(e))
        sys.exit(1)


@cli.command(name="recipe")
def show_recipe():
    """Print the fixed build recipe as YAML."""
    click.echo(yaml.safe_dump(recipe.recipe_as_dict(), sort_keys=False, default_flow_style=False), nl=False)


if __name__ == "__main__":
    cli()
