"""
devsetup — CLI entrypoint.

Usage:
    devsetup --help
    devsetup
    devsetup --no-sudo --distro fedora
    python -m devsetup.main --dry-run --yes --distro auto
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from devsetup import __version__
from devsetup.core.observability.logging_config import resolve_level, setup_logging


class ProvisionCommand(click.Command):
    """Usage errors exit with status 1, like every other failure."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.command(
    cls=ProvisionCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="devsetup")
@click.option("--no-sudo", is_flag=True, help="Run without sudo (some steps may fail).")
@click.option(
    "--distro",
    default=None,
    metavar="ubuntu|fedora|arch|auto",
    help="Skip the distribution menu ('auto' reads /etc/os-release).",
)
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Accept every step without asking.")
@click.option("--dry-run", is_flag=True, help="Show what would run, execute nothing.")
@click.option("--mock", is_flag=True, help="Use mock adapters (no real execution).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: ~/.config/devsetup/config.yml).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every command.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
def cli(
    no_sudo: bool,
    distro: str | None,
    assume_yes: bool,
    dry_run: bool,
    mock: bool,
    config_path: Path | None,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """Set up a Linux development environment (Ubuntu, Fedora or Arch).

    Asks before every step: base tools, development packages, zsh as
    login shell, ~/scripts on PATH, Neovim from source and its
    configuration, git identity, Oh My Zsh.
    """
    setup_logging(
        level=resolve_level(
            debug=debug,
            verbose=verbose,
            quiet=quiet,
            env_level=os.environ.get("DEVSETUP_LOG_LEVEL"),
        ),
        log_file=os.environ.get("DEVSETUP_LOG_FILE"),
        log_file_level=os.environ.get("DEVSETUP_LOG_FILE_LEVEL"),
    )

    from devsetup.adapters.registry import default_registry
    from devsetup.core.config.loader import ConfigError, load_settings
    from devsetup.core.errors import ProvisionError
    from devsetup.core.use_cases.provision import run_provision
    from devsetup.ui.cli.console import ClickConsole

    try:
        settings = load_settings(config_path)
        run_provision(
            console=ClickConsole(),
            settings=settings,
            no_sudo=no_sudo,
            distro=distro,
            assume_yes=assume_yes,
            dry_run=dry_run,
            registry=default_registry(mock_mode=mock),
        )
    except (ConfigError, ProvisionError) as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    except KeyboardInterrupt:
        click.secho("\nAborted by user (Ctrl+C).", fg="yellow")
        sys.exit(1)


if __name__ == "__main__":
    cli()
