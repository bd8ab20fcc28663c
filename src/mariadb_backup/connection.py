"""Access to the host cf CLI.

Every API call goes through the cf CLI (``cf curl``), which carries the
user's authentication and target. Command handlers only see the
``CliConnection`` protocol, so tests can inject a scripted fake.
"""

import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import quote

from mariadb_backup.config import PluginConfig, get_config
from mariadb_backup.errors import DecodeError, TargetError, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceModel:
    """A service instance in the targeted space."""

    guid: str
    name: str
    service_offering_name: str = ""


class CliConnection(Protocol):
    """What the plugin needs from the host CLI."""

    def cli_command_without_terminal_output(self, *args: str) -> list[str]: ...

    def get_current_org(self) -> str: ...

    def get_current_space(self) -> str: ...

    def get_service(self, name: str) -> ServiceModel: ...


class CfCliConnection:
    """``CliConnection`` backed by the ``cf`` executable."""

    def __init__(self, config: PluginConfig | None = None) -> None:
        self.config = config or get_config()
        self._target: dict[str, Any] | None = None

    def cli_command_without_terminal_output(self, *args: str) -> list[str]:
        """Run ``cf <args>`` and return its stdout lines."""
        cmd = [self.config.cf_binary, *args]
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.config.command_timeout,
            )
        except FileNotFoundError:
            raise TransportError(
                f"cf CLI not found: {self.config.cf_binary}",
                suggestion="Install the cf CLI or set cf_binary in the plugin config",
            )
        except subprocess.TimeoutExpired:
            raise TransportError(f"cf {args[0] if args else ''} timed out")
        except subprocess.CalledProcessError as e:
            details = (e.stderr or e.stdout or "").strip()
            raise TransportError(details or f"cf exited with status {e.returncode}")
        return result.stdout.splitlines()

    def _load_target(self) -> dict[str, Any]:
        """Read the org/space target from the cf CLI config.json."""
        if self._target is not None:
            return self._target

        path = self.config.cf_config_path
        try:
            with open(path) as f:
                self._target = json.load(f)
        except OSError as e:
            raise TargetError(
                f"Cannot read cf CLI config {path}: {e}",
                suggestion="Log in and target a space with 'cf login' / 'cf target'",
            )
        except json.JSONDecodeError as e:
            raise TargetError(f"Invalid cf CLI config {path}: {e}")
        return self._target

    def _target_field(self, section: str, key: str) -> str:
        value = (self._load_target().get(section) or {}).get(key) or ""
        if not value:
            raise TargetError(f"No {section} {key} in cf CLI config; is a space targeted?")
        return value

    def get_current_org(self) -> str:
        return self._target_field("OrganizationFields", "Name")

    def get_current_space(self) -> str:
        return self._target_field("SpaceFields", "Name")

    def get_service(self, name: str) -> ServiceModel:
        """Look up a service instance by name in the targeted space."""
        space_guid = self._target_field("SpaceFields", "GUID")
        path = (
            f"/v3/service_instances?names={quote(name)}&space_guids={space_guid}"
            "&fields[service_plan.service_offering]=name"
        )
        body = "".join(self.cli_command_without_terminal_output("curl", path))
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Invalid service lookup response: {e}")
        if not isinstance(data, dict):
            raise DecodeError("Invalid service lookup response")
        if data.get("errors"):
            detail = data["errors"][0].get("detail", "unknown error")
            raise TransportError(detail)

        resources = data.get("resources") or []
        if not resources:
            return ServiceModel(guid="", name=name)

        instance = resources[0]
        offerings = (data.get("included") or {}).get("service_offerings") or []
        offering_name = offerings[0].get("name", "") if offerings else ""
        return ServiceModel(
            guid=instance.get("guid", ""),
            name=instance.get("name", name),
            service_offering_name=offering_name,
        )
