"""Backup management CLI commands for the MariaDB backup plugin."""

import logging

import click
from rich.markup import escape

from mariadb_backup.config import get_config
from mariadb_backup.connection import CfCliConnection, CliConnection, ServiceModel
from mariadb_backup.errors import ArgumentError, MariaDBBackupError, ServiceLookupError
from mariadb_backup.metadata import PLUGIN_METADATA
from mariadb_backup.models import ServiceInstanceBackup, ServiceInstanceResults
from mariadb_backup.output import OutputFormatter, bold_text, red_fg_color, service_color
from mariadb_backup.services.backup_service import BackupService

logger = logging.getLogger(__name__)

SERVICE_NAME_HELP = "Service name, e.g., --service-name SERVICE_NAME"


def get_formatter(ctx: click.Context) -> OutputFormatter:
    """Get the output formatter from context."""
    return ctx.obj["formatter"]


def get_connection(ctx: click.Context) -> CliConnection:
    """Get the host CLI connection from context, creating the cf one on first use."""
    if ctx.obj.get("connection") is None:
        ctx.obj["connection"] = CfCliConnection(get_config())
    return ctx.obj["connection"]


def resolve_service(connection: CliConnection, service_name: str, offering_name: str = "mariadb") -> ServiceModel:
    """Look up a service instance by name and check it is a MariaDB one.

    Raises:
        ServiceLookupError: If the lookup fails, nothing matched, or the
            service offering is not MariaDB
    """
    try:
        service = connection.get_service(service_name)
    except MariaDBBackupError as e:
        raise ServiceLookupError(f"Error getting service: {escape(e.message)}")

    if not service.guid:
        raise ServiceLookupError("Does the service exist?")

    if offering_name not in service.service_offering_name:
        raise ServiceLookupError(
            f"The service {service_color(service.name)} is not a MariaDB instance. "
            "This plugin does not yet support the backup of other service instances."
        )
    return service


def get_oldest_backup(results: ServiceInstanceResults) -> ServiceInstanceBackup | None:
    """Return the backup with the earliest creation time.

    Ties keep the first one seen. A leading backup without metadata is
    replaced by the next one.
    """
    oldest = None
    for backup in results.resources:
        if oldest is None or oldest.metadata is None:
            oldest = backup
        elif backup.metadata is not None and backup.metadata.created_at < oldest.metadata.created_at:
            oldest = backup
    return oldest


def _target(ctx: click.Context, connection: CliConnection, service: ServiceModel) -> str:
    """Describe the org / space / service a command acts on."""
    formatter = get_formatter(ctx)
    try:
        org = connection.get_current_org()
    except MariaDBBackupError as e:
        logger.debug(f"get_current_org failed: {e.message}")
        formatter.error(code=e.code, message="Error getting the current organization.")
    try:
        space = connection.get_current_space()
    except MariaDBBackupError as e:
        logger.debug(f"get_current_space failed: {e.message}")
        formatter.error(code=e.code, message="Error getting the current space.")
    return f"org {service_color(org)} / space {service_color(space)} of service {service_color(service.name)}"


def _require_service_name(service_name: str | None) -> str:
    if not service_name:
        raise ArgumentError(
            f"Error parsing the argument {red_fg_color('--service-name (-s)')}. Did you forget to specify it?"
        )
    return service_name


def _parse_rotation(value: str | None) -> int | None:
    """Parse the --max-backups-rotation value, which must be a positive integer."""
    if value is None:
        return None
    try:
        amount = int(value)
    except ValueError:
        amount = 0
    if amount < 1:
        raise ArgumentError(
            f"Error parsing the arguments: {red_fg_color('--max-backups-rotation (-m)')} "
            f"must be a positive integer, got '{escape(value)}'."
        )
    return amount


def _setup(ctx: click.Context, service_name: str) -> tuple[CliConnection, ServiceModel, BackupService]:
    formatter = get_formatter(ctx)
    connection = get_connection(ctx)
    try:
        service = resolve_service(connection, service_name, get_config().offering_name)
    except ServiceLookupError as e:
        formatter.error(code=e.code, message=e.message)
    return connection, service, BackupService(connection)


@click.command("list-mariadb-backups", help=PLUGIN_METADATA.command("list-mariadb-backups").help_text)
@click.option("--service-name", "-s", "service_name", help=SERVICE_NAME_HELP)
@click.pass_context
def list_backups(ctx: click.Context, service_name: str | None) -> None:
    """List all backups and restores of a MariaDB service."""
    formatter = get_formatter(ctx)

    try:
        service_name = _require_service_name(service_name)
    except ArgumentError as e:
        formatter.error(code=e.code, message=e.message)

    connection, service, backup_service = _setup(ctx, service_name)

    formatter.print(f"Listing backups in {_target(ctx, connection, service)}...")
    try:
        results = backup_service.list_backups(service.guid)
    except MariaDBBackupError as e:
        formatter.error(
            message=f"Error getting backups for service '{service_color(service.name)}': {escape(e.message)}",
            code=e.code,
        )
    formatter.ok()

    if formatter.json_mode:
        formatter.success(
            data=results.to_dict(),
            message=f"Found {len(results.resources)} backup(s)",
        )
        return

    formatter.backups_table(service.name, results)
    formatter.restores_table(service.name, results)


@click.command("create-mariadb-backup", help=PLUGIN_METADATA.command("create-mariadb-backup").help_text)
@click.option("--service-name", "-s", "service_name", help=SERVICE_NAME_HELP)
@click.option(
    "--max-backups-rotation",
    "-m",
    "max_backups",
    help="Delete the oldest backup when the max amount of backups is reached, e.g., --max-backups-rotation AMOUNT",
)
@click.pass_context
def create_backup(ctx: click.Context, service_name: str | None, max_backups: str | None) -> None:
    """Create a backup, optionally deleting the oldest one first."""
    formatter = get_formatter(ctx)

    try:
        service_name = _require_service_name(service_name)
        rotation_bound = _parse_rotation(max_backups)
    except ArgumentError as e:
        formatter.error(code=e.code, message=e.message)

    connection, service, backup_service = _setup(ctx, service_name)
    rotated: str | None = None

    if rotation_bound is not None:
        try:
            results = backup_service.list_backups(service.guid)
        except MariaDBBackupError as e:
            formatter.error(
                message=f"Error getting backups for service '{service_color(service.name)}': {escape(e.message)}",
                code=e.code,
            )

        if len(results.resources) >= rotation_bound:
            formatter.print(
                f"Currently there are {service_color(str(len(results.resources)))} backups in service "
                f"{service_color(service.name)}. The max specified amount of backups is "
                f"{service_color(str(rotation_bound))}.\n"
            )
            oldest = get_oldest_backup(results)
            if oldest is None or oldest.metadata is None:
                formatter.error(
                    message=f"Cannot determine the oldest backup of service {service_color(service.name)}.",
                    code="BUSINESS_ERROR",
                )
            rotated = oldest.metadata.guid

            formatter.print(f"Deleting the oldest backup in {_target(ctx, connection, service)}...")
            try:
                backup_service.delete_backup(service.guid, rotated)
            except MariaDBBackupError as e:
                formatter.error(
                    message=f"Error deleting the backup {bold_text(rotated)} of service "
                    f"{service_color(service.name)}: {escape(e.message)}",
                    code=e.code,
                )
            formatter.ok()

    formatter.print(f"Creating a backup in {_target(ctx, connection, service)}...")
    try:
        backup = backup_service.create_backup(service.guid)
    except MariaDBBackupError as e:
        formatter.error(
            message=f"Error creating a backup for service '{service_color(service.name)}': {escape(e.message)}",
            code=e.code,
        )
    formatter.ok()

    formatter.success(
        data={"backup": backup.to_dict(), "rotated_backup_guid": rotated},
        message="Backup created successfully",
    )


@click.command("delete-mariadb-backup", help=PLUGIN_METADATA.command("delete-mariadb-backup").help_text)
@click.option("--service-name", "-s", "service_name", help=SERVICE_NAME_HELP)
@click.option("--backup-guid", "-b", "backup_guid", help="Backup GUID, e.g., --backup-guid BACKUP_GUID")
@click.pass_context
def delete_backup(ctx: click.Context, service_name: str | None, backup_guid: str | None) -> None:
    """Delete one backup of a MariaDB service."""
    formatter = get_formatter(ctx)

    if not service_name or not backup_guid:
        formatter.error(
            message=f"Error parsing the arguments {red_fg_color('--service-name (-s)')} and "
            f"{red_fg_color('--backup-guid (-b)')}. Did you forget to specify it?",
            code=ArgumentError.code,
        )

    connection, service, backup_service = _setup(ctx, service_name)

    try:
        backup = backup_service.get_backup(service.guid, backup_guid)
        if backup.metadata is None:
            raise ServiceLookupError("backup not found")
    except MariaDBBackupError as e:
        formatter.error(
            message=f"Error finding the backup {bold_text(backup_guid)} of service "
            f"{service_color(service.name)}: {escape(e.message)}",
            code=e.code,
        )

    formatter.print(f"Deleting a backup in {_target(ctx, connection, service)}...")
    try:
        backup_service.delete_backup(service.guid, backup_guid)
    except MariaDBBackupError as e:
        formatter.error(
            message=f"Error deleting the backup {bold_text(backup_guid)} of service "
            f"{service_color(service.name)}: {escape(e.message)}",
            code=e.code,
        )
    formatter.ok()

    formatter.success(
        data={"backup_guid": backup_guid, "service": service.name},
        message="Backup deleted successfully",
    )
