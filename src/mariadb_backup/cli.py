"""Main CLI entry point for the MariaDB backup plugin."""

import logging
import sys
from pathlib import Path

import click

from mariadb_backup import __version__
from mariadb_backup.config import get_config, reload_config
from mariadb_backup.metadata import AUTHOR_EMAIL, PLUGIN_NAME, PROJECT_URL, UNINSTALL_COMMAND
from mariadb_backup.output import OutputFormatter, bold_text, red_fg_color


def configure_logging(level: str | int) -> None:
    """Send log records to stderr so they never mix with command output."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    package_logger = logging.getLogger("mariadb_backup")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


@click.group()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("--debug", is_flag=True, help="Log cf CLI calls to stderr")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Plugin config file (YAML)",
)
@click.version_option(version=__version__, prog_name=PLUGIN_NAME)
@click.pass_context
def cli(ctx: click.Context, output_json: bool, debug: bool, config_path: Path | None) -> None:
    """Manage backups of MariaDB service instances through the cf CLI.

    \b
    Examples:
      cf list-mariadb-backups -s mydb
      cf create-mariadb-backup -s mydb -m 5
      cf delete-mariadb-backup -s mydb -b BACKUP_GUID
    """
    config = reload_config(config_path) if config_path else get_config()
    configure_logging(logging.DEBUG if debug else config.log_level)

    ctx.ensure_object(dict)
    ctx.obj["formatter"] = OutputFormatter(json_mode=output_json, date_format=config.date_format)
    ctx.obj["json_mode"] = output_json
    ctx.obj.setdefault("connection", None)


@cli.command(UNINSTALL_COMMAND, hidden=True)
@click.pass_context
def uninstall_message(ctx: click.Context) -> None:
    """Goodbye banner shown by the cf CLI on uninstall."""
    formatter = ctx.obj["formatter"]
    formatter.print()
    formatter.print(bold_text(f"Thanks for using {PLUGIN_NAME}!"))
    formatter.print("Send some feedback to: ")
    formatter.print(f"- {red_fg_color(AUTHOR_EMAIL)}")
    formatter.print(f"- {red_fg_color(PROJECT_URL)}")
    formatter.print()


# Import and register commands
from mariadb_backup.commands import backup  # noqa: E402

cli.add_command(backup.list_backups)
cli.add_command(backup.create_backup)
cli.add_command(backup.delete_backup)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
