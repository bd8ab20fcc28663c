"""Client for the service instance backup API."""

import json
import logging
from typing import Any

from mariadb_backup.connection import CliConnection
from mariadb_backup.errors import BusinessError, DecodeError
from mariadb_backup.models import ServiceInstanceBackup, ServiceInstanceResults

logger = logging.getLogger(__name__)


def backups_path(service_instance_id: str) -> str:
    return f"/custom/service_instances/{service_instance_id}/backups"


def backup_path(service_instance_id: str, backup_id: str) -> str:
    return f"{backups_path(service_instance_id)}/{backup_id}"


def _decode(body: str) -> Any:
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON response: {e}")


class BackupService:
    """Backup operations issued through the host cf CLI."""

    def __init__(self, connection: CliConnection) -> None:
        self.connection = connection

    def _curl(self, *args: str) -> str:
        """Run ``cf curl`` and join the output lines into one body."""
        output = self.connection.cli_command_without_terminal_output("curl", *args)
        return "".join(output)

    def list_backups(self, service_instance_id: str) -> ServiceInstanceResults:
        """Fetch all backups of a service instance, following ``next_url``.

        Resources are accumulated in page order; totals are those of the
        last page fetched.
        """
        results = ServiceInstanceResults()
        next_url: str | None = backups_path(service_instance_id)

        while next_url:
            logger.debug(f"Fetching backups page {next_url}")
            page = ServiceInstanceResults.from_dict(_decode(self._curl(next_url)))

            results.resources.extend(page.resources)
            results.total_results = page.total_results
            results.total_pages = page.total_pages

            next_url = page.next_url

        return results

    def create_backup(self, service_instance_id: str) -> ServiceInstanceBackup:
        """Create a backup.

        The call only counts as successful when the body decodes and carries
        an ``entity``.

        Raises:
            BusinessError: If the response has no entity or is not JSON
        """
        body = self._curl("-X", "POST", backups_path(service_instance_id))
        try:
            backup = ServiceInstanceBackup.from_dict(_decode(body))
        except DecodeError:
            backup = None

        if backup is None or backup.entity is None:
            raise BusinessError(f"Create backup command was not successful.\nDetails:\n{body}")
        return backup

    def get_backup(self, service_instance_id: str, backup_id: str) -> ServiceInstanceBackup:
        body = self._curl(backup_path(service_instance_id, backup_id))
        return ServiceInstanceBackup.from_dict(_decode(body))

    def delete_backup(self, service_instance_id: str, backup_id: str) -> None:
        # The response body is not inspected.
        self._curl("-X", "DELETE", backup_path(service_instance_id, backup_id))
        logger.debug(f"Deleted backup {backup_id} of {service_instance_id}")
