"""Output formatting helpers for the MariaDB backup plugin."""

import json
import sys
from datetime import datetime, timezone
from typing import Any, NoReturn

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from mariadb_backup.models import (
    BackupStatus,
    RestoreStatus,
    ServiceInstanceResults,
    status_value,
)

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def service_color(text: str) -> str:
    return f"[bright_cyan]{escape(text)}[/bright_cyan]"


def successful_color(text: str) -> str:
    return f"[black on green]{escape(text)}[/black on green]"


def warning_color(text: str) -> str:
    return f"[black on yellow]{escape(text)}[/black on yellow]"


def failure_color(text: str) -> str:
    return f"[black on red]{escape(text)}[/black on red]"


def red_fg_color(text: str) -> str:
    return f"[red]{escape(text)}[/red]"


def bold_text(text: str) -> str:
    return f"[bold]{escape(text)}[/bold]"


def hi_green_fg_color(text: str) -> str:
    return f"[bright_green]{escape(text)}[/bright_green]"


def backup_status_display(status: Any) -> str:
    """Color a backup status: succeeded, in progress, anything else."""
    value = status_value(status)
    if value == BackupStatus.CREATE_SUCCEEDED.value:
        return successful_color(value)
    if value == BackupStatus.CREATE_IN_PROGRESS.value:
        return warning_color(value)
    return failure_color(value)


def restore_status_display(status: Any) -> str:
    """Color a restore status: succeeded or anything else."""
    value = status_value(status)
    if value == RestoreStatus.SUCCEEDED.value:
        return successful_color(value)
    return failure_color(value)


def backup_rows(results: ServiceInstanceResults, date_format: str = DEFAULT_DATE_FORMAT) -> list[list[str]]:
    """Rows of the backups table, one per backup, 1-based index."""
    rows = []
    for index, backup in enumerate(results.resources, start=1):
        created = backup.metadata.created_at.strftime(date_format) if backup.metadata else ""
        status = backup.entity.status if backup.entity else ""
        rows.append([str(index), escape(backup.guid), created, backup_status_display(status)])
    return rows


def restore_rows(results: ServiceInstanceResults, date_format: str = DEFAULT_DATE_FORMAT) -> list[list[str]]:
    """Rows of the restores table in backup x restore join order.

    The index is that of the owning backup, so it repeats for backups
    with several restores.
    """
    rows = []
    for index, backup in enumerate(results.resources, start=1):
        if backup.entity is None:
            continue
        for restore in backup.entity.restores:
            rows.append(
                [
                    str(index),
                    escape(backup.guid),
                    escape(restore.metadata.guid),
                    restore.metadata.created_at.strftime(date_format),
                    restore_status_display(restore.entity.status),
                ]
            )
    return rows


class OutputFormatter:
    """Handles output formatting for both JSON and pretty (human) modes."""

    def __init__(self, json_mode: bool = False, date_format: str = DEFAULT_DATE_FORMAT) -> None:
        """Initialize the formatter."""
        self.json_mode = json_mode
        self.date_format = date_format
        self.console = Console(highlight=False, soft_wrap=True)

    def print(self, message: str = "") -> None:
        """Print a rich-markup message in pretty mode; silent in JSON mode."""
        if not self.json_mode:
            self.console.print(message)

    def ok(self) -> None:
        """Print the OK banner that closes a step."""
        self.print(f"{hi_green_fg_color('OK')}\n")

    def success(self, data: Any, message: str = "Operation completed") -> None:
        """Output a success response (JSON mode only)."""
        if self.json_mode:
            self._json_output(True, data=data, message=message)

    def error(
        self,
        code: str,
        message: str,
        suggestion: str | None = None,
        exit_code: int = 1,
    ) -> NoReturn:
        """Output an error response and exit.

        ``message`` may contain rich markup.
        """
        if self.json_mode:
            plain = Text.from_markup(message).plain
            self._json_output(
                False,
                error={"code": code, "message": plain, "suggestion": suggestion},
            )
        else:
            self.console.print(f"{red_fg_color('FAILED')}\n{message}\n")
            if suggestion:
                self.console.print(f"[yellow]Suggestion:[/yellow] {escape(suggestion)}")
        sys.exit(exit_code)

    def backups_table(self, service_name: str, results: ServiceInstanceResults) -> None:
        """Render the backups of a service."""
        self.print(f"Backups of {service_color(service_name)}:")
        self._pretty_table(
            ["Index", "Backup GUID", "Backup Date Created", "Backup Status"],
            backup_rows(results, self.date_format),
        )

    def restores_table(self, service_name: str, results: ServiceInstanceResults) -> None:
        """Render the restores of every backup of a service."""
        self.print(f"Restores of {service_color(service_name)}:")
        self._pretty_table(
            ["Index", "Backup GUID", "Restore GUID", "Restore Date Created", "Restore Status"],
            restore_rows(results, self.date_format),
        )

    def _pretty_table(self, headers: list[str], rows: list[list[str]]) -> None:
        if self.json_mode:
            return

        table = Table(show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)

        self.console.print(table, soft_wrap=False)
        self.console.print()

    def _json_output(
        self,
        success: bool,
        data: Any = None,
        message: str | None = None,
        error: dict[str, Any] | None = None,
    ) -> None:
        """Output in JSON format."""
        output: dict[str, Any] = {
            "success": success,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }

        if success:
            output["data"] = data
            output["message"] = message
        else:
            output["error"] = error

        print(json.dumps(output, indent=2, default=str))

