"""
CLI main entry point for depflow
"""

import sys
from pathlib import Path

import typer

from depflow.cli.commands import dependent
from depflow.core.config_manager import get_config_manager
from depflow.logger import get_logger

logger = get_logger(__name__)


def _load_env_file() -> None:
    """
    Load .env file from appropriate location using ConfigManager.
    """
    possible_paths = [Path.cwd() / ".env"]
    if sys.argv and len(sys.argv) > 0:
        main_script = Path(sys.argv[0]).resolve()
        if main_script.is_file():
            possible_paths.append(main_script.parent / ".env")

    if get_config_manager().load_env_files(possible_paths, override=False):
        logger.debug("Environment loaded from .env")


app = typer.Typer(
    name="depflow",
    help="Dependency gate for scheduled process execution",
    context_settings={"help_option_names": ["--help", "-h"]},
    no_args_is_help=True,
)

app.add_typer(dependent.app, name="dependent", help="Check and wait for task dependencies")


@app.callback()
def cli() -> None:
    """Dependency gate for scheduled process execution."""
    _load_env_file()


@app.command()
def version() -> None:
    """Show version information."""
    from depflow import __version__

    typer.echo(f"depflow version {__version__}")


def main() -> None:
    """Entry point for console script."""
    app()


if __name__ == "__main__":
    main()
