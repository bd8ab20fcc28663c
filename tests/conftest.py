"""Shared fixtures: a scripted stand-in for the cf CLI and API payload builders."""

import json

import pytest

from mariadb_backup import config as config_module
from mariadb_backup.connection import ServiceModel
from mariadb_backup.errors import TargetError, TransportError

SERVICE_GUID = "svc-guid"
BACKUPS_PATH = f"/custom/service_instances/{SERVICE_GUID}/backups"


class FakeConnection:
    """CliConnection returning scripted output lines per command."""

    def __init__(
        self,
        responses: dict | None = None,
        service: ServiceModel | Exception | None = None,
        org: str | None = "myorg",
        space: str | None = "myspace",
    ):
        self.responses = responses or {}
        self.service = service or ServiceModel(
            guid=SERVICE_GUID, name="mydb", service_offering_name="mariadb"
        )
        self.org = org
        self.space = space
        self.calls: list[tuple[str, ...]] = []
        self.service_lookups: list[str] = []

    def cli_command_without_terminal_output(self, *args: str) -> list[str]:
        self.calls.append(args)
        if args not in self.responses:
            raise TransportError(f"unexpected call: {' '.join(args)}")
        response = self.responses[args]
        if isinstance(response, Exception):
            raise response
        return response

    def get_current_org(self) -> str:
        if self.org is None:
            raise TargetError("no org")
        return self.org

    def get_current_space(self) -> str:
        if self.space is None:
            raise TargetError("no space")
        return self.space

    def get_service(self, name: str) -> ServiceModel:
        self.service_lookups.append(name)
        if isinstance(self.service, Exception):
            raise self.service
        return self.service


def metadata_json(guid: str, created_at: str = "2024-01-15T10:30:00Z") -> dict:
    return {
        "guid": guid,
        "url": f"/custom/backups/{guid}",
        "created_at": created_at,
        "updated_at": created_at,
    }


def restore_json(guid: str, backup_id: str, status: str = "SUCCEEDED", created_at: str = "2024-01-16T08:00:00Z") -> dict:
    return {
        "metadata": metadata_json(guid, created_at),
        "entity": {"backup_id": backup_id, "status": status},
    }


def backup_json(
    guid: str,
    created_at: str = "2024-01-15T10:30:00Z",
    status: str = "CREATE_SUCCEEDED",
    restores: list | None = None,
) -> dict:
    return {
        "metadata": metadata_json(guid, created_at),
        "entity": {
            "service_instance_id": SERVICE_GUID,
            "status": status,
            "restores": restores or [],
        },
    }


def page_json(resources: list, next_url: str | None = None, total_results: int | None = None, total_pages: int = 1) -> dict:
    return {
        "total_results": len(resources) if total_results is None else total_results,
        "total_pages": total_pages,
        "prev_url": None,
        "next_url": next_url,
        "resources": resources,
    }


def lines(data) -> list[str]:
    """Split a JSON body over several lines, the way cf curl prints it."""
    return json.dumps(data, indent=2).splitlines()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's real plugin config out of the tests."""
    monkeypatch.setenv(config_module.CONFIG_ENV_VAR, str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("CF_HOME", str(tmp_path))
    config_module.reload_config()
    yield
    config_module._config = None
